"""Tests for same-day reconciliation."""

from newsparser.reconcile import reconcile
from newsparser.types import NewsItem


def _stored(*headlines):
    return [NewsItem(id=i, headline=h) for i, h in enumerate(headlines, start=1)]


def test_substring_of_stored_headline_is_dropped():
    existing = _stored("Market rally continues amid strong earnings")
    batch = {"Market rally continues": "x", "Market rally ends": "y"}

    assert reconcile(batch, existing) == {"Market rally ends": "y"}


def test_empty_existing_returns_batch_unchanged():
    batch = {"A": "descA", "B": "descB"}

    result = reconcile(batch, [])

    assert result == batch
    assert list(result) == ["A", "B"]


def test_empty_batch_stays_empty():
    assert reconcile({}, _stored("A")) == {}


def test_order_of_survivors_is_preserved():
    batch = {"C": "3", "A": "1", "D": "4", "B": "2"}

    result = reconcile(batch, _stored("xx A xx", "B"))

    assert list(result) == ["C", "D"]


def test_reconcile_is_idempotent():
    existing = _stored("Storm heads north", "Election results")
    batch = {"Storm": "a", "Election results": "b", "Fresh story": "c"}

    once = reconcile(batch, existing)

    assert reconcile(once, existing) == once
    assert once == {"Fresh story": "c"}


def test_stored_headline_shorter_than_candidate_does_not_match():
    assert reconcile({"Market rally continues": "x"}, _stored("Market")) == {
        "Market rally continues": "x"
    }

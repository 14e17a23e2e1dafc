"""Tests for fetching and pairing headlines with descriptions."""

import pytest
import requests

from newsparser import scraper
from newsparser.scraper import (
    DEFAULT_DESCRIPTION_SELECTOR,
    DEFAULT_HEADLINE_SELECTOR,
    FetchError,
    extract_news,
    pair_nodes,
    select_texts,
)

PAGE = """
<html><body>
  <h3 class="Mb(5px) LineClamp(2,2.6em)"><a class="js-content-viewer wafer-caas" href="/a">Market rally
      continues</a></h3>
  <p class="finance-ticker-fetch-success_D(n) Fz(14px)">Stocks climbed again.</p>
  <h3 class="LineClamp(2,2.6em)"><a class="js-content-viewer" href="/b">Storm heads north</a></h3>
  <p class="finance-ticker-fetch-success_D(n)">Forecasters expect heavy rain.</p>
  <h3 class="LineClamp(2,2.6em)"><a class="js-content-viewer" href="/c">Orphan headline</a></h3>
  <h3 class="Other"><a class="js-content-viewer" href="/d">Not a match</a></h3>
</body></html>
"""


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeScraper:
    headers = {"User-Agent": "test-agent"}

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_pair_nodes_truncates_to_shorter_side():
    batch = pair_nodes(["A", "B", "C"], ["descA", "descB"])

    assert list(batch.items()) == [("A", "descA"), ("B", "descB")]


def test_pair_nodes_keeps_page_order_and_last_description_for_repeats():
    batch = pair_nodes(["A", "B", "A"], ["first", "descB", "second"])

    assert list(batch) == ["A", "B"]
    assert batch["A"] == "second"


def test_pair_nodes_skips_blank_headlines():
    assert pair_nodes(["", "B"], ["x", "descB"]) == {"B": "descB"}


def test_select_texts_normalises_whitespace():
    texts = select_texts(PAGE, DEFAULT_HEADLINE_SELECTOR)

    assert texts == ["Market rally continues", "Storm heads north", "Orphan headline"]


def test_extract_news_pairs_default_selectors(monkeypatch):
    monkeypatch.setattr(scraper, "fetch_document", lambda url, timeout=30: PAGE)

    result = extract_news("https://example.com/")

    assert result.ok
    assert list(result.batch.items()) == [
        ("Market rally continues", "Stocks climbed again."),
        ("Storm heads north", "Forecasters expect heavy rain."),
    ]


def test_extract_news_returns_empty_batch_on_fetch_failure(monkeypatch):
    def failing_fetch(url, timeout=30):
        raise FetchError("boom")

    monkeypatch.setattr(scraper, "fetch_document", failing_fetch)

    result = extract_news("https://example.com/")

    assert not result.ok
    assert result.batch == {}
    assert "boom" in result.error


def test_extract_news_reports_invalid_selector(monkeypatch):
    monkeypatch.setattr(scraper, "fetch_document", lambda url, timeout=30: PAGE)

    result = extract_news("https://example.com/", "h3[", DEFAULT_DESCRIPTION_SELECTOR)

    assert not result.ok
    assert result.batch == {}


def test_fetch_document_rejects_error_status(monkeypatch):
    fake = FakeScraper(response=FakeResponse(503))
    monkeypatch.setattr(scraper, "_build_scraper", lambda: fake)

    with pytest.raises(FetchError, match="503"):
        scraper.fetch_document("https://example.com/", timeout=5)


def test_fetch_document_wraps_transport_errors(monkeypatch):
    fake = FakeScraper(error=requests.ConnectionError("unreachable"))
    monkeypatch.setattr(scraper, "_build_scraper", lambda: fake)

    with pytest.raises(FetchError, match="unreachable"):
        scraper.fetch_document("https://example.com/")


def test_fetch_document_returns_body(monkeypatch):
    fake = FakeScraper(response=FakeResponse(200, "<html></html>"))
    monkeypatch.setattr(scraper, "_build_scraper", lambda: fake)

    assert scraper.fetch_document("https://example.com/", timeout=7) == "<html></html>"
    url, headers, timeout = fake.calls[0]
    assert url == "https://example.com/"
    assert headers["User-Agent"] == "test-agent"
    assert timeout == 7

"""Same-day reconciliation of a freshly extracted batch."""
from __future__ import annotations

from typing import Iterable

from .types import Batch, NewsItem


def reconcile(batch: Batch, existing_today: Iterable[NewsItem]) -> Batch:
    """Drop batch entries whose headline is contained in a stored headline.

    Matching is substring containment, so a stored "Market rally continues
    amid strong earnings" suppresses a candidate "Market rally continues".
    Order of the surviving entries follows the batch.
    """
    stored = [item.headline for item in existing_today]
    if not batch or not stored:
        return dict(batch)

    return {
        headline: description
        for headline, description in batch.items()
        if not any(headline in existing for existing in stored)
    }

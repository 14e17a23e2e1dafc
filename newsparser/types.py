"""Core datatypes for the news parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Ordered headline -> description mapping produced by one extraction.
Batch = Dict[str, str]


@dataclass(frozen=True)
class NewsItem:
    """A single headline/description pair, stored or about to be stored."""

    headline: str
    description: str = ""
    publication_time: Optional[datetime] = None
    id: Optional[int] = None

    def to_row(self) -> tuple[str, str, str]:
        """Return a tuple suitable for SQLite insertion."""
        if self.publication_time is None:
            raise ValueError("publication_time must be set before the item is stored")
        return (
            self.headline,
            self.description,
            self.publication_time.strftime(TIMESTAMP_FORMAT),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "headline": self.headline,
            "description": self.description,
            "publicationTime": (
                self.publication_time.strftime(TIMESTAMP_FORMAT)
                if self.publication_time
                else None
            ),
        }


@dataclass
class ExtractionResult:
    """Outcome of one extraction: the pairs gathered and the failure, if any."""

    batch: Batch = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

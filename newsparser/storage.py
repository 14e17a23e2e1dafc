"""SQLite storage for parsed news."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from pathlib import Path
import sqlite3
from typing import Callable, Generator, Optional

from .types import TIMESTAMP_FORMAT, NewsItem


_SCHEMA = """
CREATE TABLE IF NOT EXISTS news (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    headline TEXT NOT NULL,
    description TEXT,
    publication_time TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS news_publication_time ON news (publication_time);
"""

_COLUMNS = "id, headline, description, publication_time"

# Half-open range over the ISO timestamps so the publication_time index applies.
_BY_DATE_QUERY = (
    f"SELECT {_COLUMNS} FROM news "
    "WHERE publication_time >= ? AND publication_time < ? "
    "ORDER BY publication_time, id"
)


def _row_to_item(row: tuple) -> NewsItem:
    identifier, headline, description, publication_time = row
    return NewsItem(
        id=identifier,
        headline=headline,
        description=description or "",
        publication_time=datetime.strptime(publication_time, TIMESTAMP_FORMAT),
    )


class NewsRepository:
    """Keyed record store for news items with a calendar-date query."""

    def __init__(self, path: str, clock: Callable[[], datetime] = datetime.now) -> None:
        db_path = Path(path)
        parent = db_path.parent
        if parent != Path("."):
            parent.mkdir(parents=True, exist_ok=True)
        self._path = str(db_path)
        self._clock = clock
        self._ensure_schema()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._path)
        try:
            yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._conn() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.executescript(_SCHEMA)
            conn.commit()

    def _stamp(self, item: NewsItem) -> NewsItem:
        if not item.headline:
            raise ValueError("headline must not be empty")
        if item.publication_time is None:
            item = replace(item, publication_time=self._clock().replace(microsecond=0))
        return item

    def create(self, item: NewsItem) -> NewsItem:
        item = self._stamp(item)
        with self._conn() as conn:
            cur = conn.execute(
                "INSERT INTO news (headline, description, publication_time) VALUES (?, ?, ?)",
                item.to_row(),
            )
            conn.commit()
            return replace(item, id=cur.lastrowid)

    def update(self, item: NewsItem) -> Optional[NewsItem]:
        if item.id is None:
            raise ValueError("cannot update an item without an id")
        item = self._stamp(item)
        with self._conn() as conn:
            cur = conn.execute(
                "UPDATE news SET headline = ?, description = ?, publication_time = ? WHERE id = ?",
                (*item.to_row(), item.id),
            )
            conn.commit()
            return item if cur.rowcount else None

    def find_by_id(self, identifier: int) -> Optional[NewsItem]:
        with self._conn() as conn:
            cur = conn.execute(f"SELECT {_COLUMNS} FROM news WHERE id = ?", (identifier,))
            row = cur.fetchone()
        return _row_to_item(row) if row else None

    def find_by_date(self, day: date) -> list[NewsItem]:
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        with self._conn() as conn:
            cur = conn.execute(
                _BY_DATE_QUERY,
                (start.strftime(TIMESTAMP_FORMAT), end.strftime(TIMESTAMP_FORMAT)),
            )
            rows = cur.fetchall()
        return [_row_to_item(row) for row in rows]

    def find_all(self, limit: Optional[int] = None) -> list[NewsItem]:
        query = f"SELECT {_COLUMNS} FROM news ORDER BY publication_time DESC, id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params: tuple[object, ...] = (limit,)
        else:
            params = ()

        with self._conn() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_item(row) for row in rows]

    def delete_by_id(self, identifier: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute("DELETE FROM news WHERE id = ?", (identifier,))
            conn.commit()
            return cur.rowcount > 0

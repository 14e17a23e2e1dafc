"""High-level orchestration for the news parser."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
import logging
import threading
import time
from typing import Callable, Optional

from .config import Settings
from .reconcile import reconcile
from .schedule import CronSchedule
from .scraper import extract_news
from .storage import NewsRepository
from .types import Batch, ExtractionResult, NewsItem

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[str, str, str, int], ExtractionResult]


class NewsService:
    """Operations over stored news used by the parser and the command line."""

    def __init__(self, repository: NewsRepository) -> None:
        self._repository = repository

    def get_news_by_date(self, day: date) -> list[NewsItem]:
        return self._repository.find_by_date(day)

    def save_news_to_repository(self, item: NewsItem) -> NewsItem:
        return self._repository.create(item)

    def find_news_by_id(self, identifier: int) -> Optional[NewsItem]:
        return self._repository.find_by_id(identifier)

    def delete_news_by_id(self, identifier: int) -> bool:
        return self._repository.delete_by_id(identifier)

    def list_news(self, limit: Optional[int] = None) -> list[NewsItem]:
        return self._repository.find_all(limit)

    def create_news(self, headline: str, description: str = "") -> NewsItem:
        return self._repository.create(NewsItem(headline=headline, description=description))

    def update_news(self, identifier: int, headline: str, description: str = "") -> Optional[NewsItem]:
        """Overwrite an item's text; the publication time moves to now."""
        existing = self._repository.find_by_id(identifier)
        if existing is None:
            return None
        changed = replace(existing, headline=headline, description=description, publication_time=None)
        return self._repository.update(changed)


class ParserService:
    def __init__(
        self,
        news_service: NewsService,
        settings: Settings,
        schedule: Optional[CronSchedule] = None,
        extractor: Extractor = extract_news,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._news = news_service
        self._settings = settings
        self._schedule = schedule or CronSchedule(settings.schedule)
        self._extractor = extractor
        self._clock = clock
        self._run_lock = threading.Lock()

    def _extract(self) -> Batch:
        result = self._extractor(
            self._settings.source_url,
            self._settings.headline_selector,
            self._settings.description_selector,
            self._settings.timeout,
        )
        if not result.ok:
            LOGGER.warning("Extraction finished with an error; keeping %s item(s).", len(result.batch))
        return result.batch

    def _persist(self, batch: Batch) -> int:
        if not batch:
            LOGGER.error("There are no news to save.")
            return 0

        saved = 0
        for headline, description in batch.items():
            try:
                self._news.save_news_to_repository(NewsItem(headline=headline, description=description))
            except Exception:  # noqa: BLE001 - keep writing the rest of the batch
                LOGGER.exception("Saving news item %r failed.", headline)
                continue
            saved += 1
        LOGGER.info("Saved %s of %s news item(s).", saved, len(batch))
        return saved

    def run_startup(self) -> int:
        """Extract and save everything without checking what is already stored."""
        with self._run_lock:
            batch = self._extract()
            return self._persist(batch)

    def run_scheduled(self) -> int:
        """Extract, drop headlines already stored today, save the rest."""
        with self._run_lock:
            today = self._clock().date()
            batch = self._extract()
            if batch:
                existing = self._news.get_news_by_date(today)
                fresh = reconcile(batch, existing)
                if len(fresh) < len(batch):
                    LOGGER.info(
                        "Skipping %s headline(s) already stored for %s.",
                        len(batch) - len(fresh),
                        today.isoformat(),
                    )
                batch = fresh
            return self._persist(batch)

    def _next_run(self, last_run: Optional[datetime]) -> datetime:
        """Next grid slot after now, never the slot that just fired.

        Only an exact repeat is skipped: after an early wake-up the grid
        yields ``last_run`` again, while a clock set back (DST) yields an
        earlier slot, which is kept.
        """
        next_run = self._schedule.next_after(self._clock())
        if next_run == last_run:
            next_run = self._schedule.next_after(last_run)
        return next_run

    def _wait_until(self, moment: datetime, stop_event: Optional[threading.Event]) -> bool:
        delay = max(0.0, (moment - self._clock()).total_seconds())
        if stop_event is None:
            time.sleep(delay)
            return True
        return not stop_event.wait(delay)

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        LOGGER.info("Starting parser loop with schedule %r", self._schedule.expression)
        try:
            self.run_startup()
        except Exception as exc:  # noqa: BLE001 - log and continue loop
            LOGGER.exception("Unexpected error during startup run: %s", exc)

        last_run: Optional[datetime] = None
        while stop_event is None or not stop_event.is_set():
            next_run = self._next_run(last_run)
            last_run = next_run
            LOGGER.debug("Next run scheduled at %s", next_run.isoformat())
            if not self._wait_until(next_run, stop_event):
                break
            try:
                self.run_scheduled()
            except Exception as exc:  # noqa: BLE001 - log and continue loop
                LOGGER.exception("Unexpected error during scheduled run: %s", exc)
        LOGGER.info("Parser loop stopped.")

"""Configuration loading from .env files and the environment."""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional

from .schedule import DEFAULT_SCHEDULE
from .scraper import (
    DEFAULT_DESCRIPTION_SELECTOR,
    DEFAULT_HEADLINE_SELECTOR,
    DEFAULT_SOURCE_URL,
)

ENV_PREFIX = "NEWSPARSER_"


def load_env(paths: Iterable[str] | None = None) -> None:
    """Populate os.environ with values from .env-style files if present."""

    if paths is None:
        paths = (".env",)

    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            continue

        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            os.environ.setdefault(key, value)


@dataclass(frozen=True)
class Settings:
    source_url: str = DEFAULT_SOURCE_URL
    headline_selector: str = DEFAULT_HEADLINE_SELECTOR
    description_selector: str = DEFAULT_DESCRIPTION_SELECTOR
    schedule: str = DEFAULT_SCHEDULE
    database_path: str = "news.sqlite3"
    timeout: int = 30

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``NEWSPARSER_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(ENV_PREFIX + name) or default

        timeout_raw = get("TIMEOUT", str(cls.timeout))
        try:
            timeout = int(timeout_raw)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}TIMEOUT must be an integer, got {timeout_raw!r}") from exc

        return cls(
            source_url=get("SOURCE_URL", cls.source_url),
            headline_selector=get("HEADLINE_SELECTOR", cls.headline_selector),
            description_selector=get("DESCRIPTION_SELECTOR", cls.description_selector),
            schedule=get("SCHEDULE", cls.schedule),
            database_path=get("DATABASE", cls.database_path),
            timeout=timeout,
        )

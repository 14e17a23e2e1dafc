"""Command line entrypoint for the news parser."""
from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import date, datetime
import json
import logging
import sys

from .config import Settings, load_env
from .schedule import CronSchedule
from .scraper import extract_news
from .service import NewsService, ParserService
from .storage import NewsRepository
from .types import NewsItem


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--database",
        help="Path to the SQLite database holding parsed news."
        " Can be set via NEWSPARSER_DATABASE.",
    )
    parser.add_argument("--source-url", help="Page to parse (NEWSPARSER_SOURCE_URL).")
    parser.add_argument(
        "--headline-selector",
        help="CSS selector for headline nodes (NEWSPARSER_HEADLINE_SELECTOR).",
    )
    parser.add_argument(
        "--description-selector",
        help="CSS selector for description nodes (NEWSPARSER_DESCRIPTION_SELECTOR).",
    )
    parser.add_argument(
        "--schedule",
        help="Cron expression for scheduled runs (default: '*/20 * * * *').",
    )
    parser.add_argument("--timeout", type=int, help="HTTP timeout in seconds (default: 30).")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO).",
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--once",
        action="store_true",
        help="Run a single scheduled parse instead of looping forever.",
    )
    actions.add_argument(
        "--by-date",
        type=date.fromisoformat,
        metavar="YYYY-MM-DD",
        help="Print the news stored for a date.",
    )
    actions.add_argument("--show", type=int, metavar="ID", help="Print one stored item.")
    actions.add_argument(
        "--create",
        nargs=2,
        metavar=("HEADLINE", "DESCRIPTION"),
        help="Store a news item manually.",
    )
    actions.add_argument(
        "--update",
        nargs=3,
        metavar=("ID", "HEADLINE", "DESCRIPTION"),
        help="Replace the text of a stored item.",
    )
    actions.add_argument("--delete", type=int, metavar="ID", help="Delete a stored item.")
    actions.add_argument(
        "--dump-archive",
        action="store_true",
        help="Print the stored news, newest first, instead of parsing.",
    )
    parser.add_argument(
        "--startup",
        action="store_true",
        help="With --once, use the startup path (no same-day duplicate check).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Optional limit when dumping the archive.",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    overrides = {
        "database_path": args.database,
        "source_url": args.source_url,
        "headline_selector": args.headline_selector,
        "description_selector": args.description_selector,
        "schedule": args.schedule,
        "timeout": args.timeout,
    }
    return replace(settings, **{key: value for key, value in overrides.items() if value is not None})


def _print_item(item: NewsItem) -> None:
    print(json.dumps(item.to_dict(), ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.startup and not args.once:
        parser.error("--startup only applies together with --once.")
    if args.limit is not None and not args.dump_archive:
        parser.error("--limit only applies together with --dump-archive.")

    load_env()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = _settings_from_args(args)
        schedule = CronSchedule(settings.schedule)
        schedule.next_after(datetime.now())
    except ValueError as exc:
        parser.error(str(exc))

    news = NewsService(NewsRepository(settings.database_path))

    if args.by_date is not None:
        for item in news.get_news_by_date(args.by_date):
            _print_item(item)
        return 0

    if args.dump_archive:
        for item in news.list_news(limit=args.limit):
            _print_item(item)
        return 0

    if args.show is not None:
        found = news.find_news_by_id(args.show)
        if found is None:
            print(f"No news item with id {args.show}.", file=sys.stderr)
            return 1
        _print_item(found)
        return 0

    if args.create:
        headline, description = args.create
        if not headline.strip():
            parser.error("HEADLINE must not be empty.")
        _print_item(news.create_news(headline, description))
        return 0

    if args.update:
        raw_id, headline, description = args.update
        try:
            identifier = int(raw_id)
        except ValueError:
            parser.error(f"ID must be an integer, got {raw_id!r}.")
        if not headline.strip():
            parser.error("HEADLINE must not be empty.")
        updated = news.update_news(identifier, headline, description)
        if updated is None:
            print(f"No news item with id {identifier}.", file=sys.stderr)
            return 1
        _print_item(updated)
        return 0

    if args.delete is not None:
        if not news.delete_news_by_id(args.delete):
            print(f"No news item with id {args.delete}.", file=sys.stderr)
            return 1
        return 0

    service = ParserService(news, settings, schedule=schedule, extractor=extract_news)

    if args.once:
        if args.startup:
            service.run_startup()
        else:
            service.run_scheduled()
        return 0

    service.run_forever()
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    sys.exit(main())

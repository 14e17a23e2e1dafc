"""Fetching the news homepage and pairing headlines with descriptions."""
from __future__ import annotations

import logging
from typing import Sequence

import cloudscraper
import requests
from bs4 import BeautifulSoup

from .types import Batch, ExtractionResult

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = "https://news.yahoo.com/"
DEFAULT_HEADLINE_SELECTOR = (
    'h3[class*="LineClamp(2,2.6em)"] > a[class*="js-content-viewer"]'
)
DEFAULT_DESCRIPTION_SELECTOR = 'p[class*="finance-ticker-fetch-success_D(n)"]'


class FetchError(RuntimeError):
    """Raised when the source page cannot be retrieved or parsed."""


def _build_scraper() -> cloudscraper.CloudScraper:
    return cloudscraper.create_scraper(
        browser={
            "browser": "chrome",
            "platform": "windows",
            "mobile": False,
        }
    )


def fetch_document(url: str, timeout: int = 30) -> str:
    scraper = _build_scraper()
    headers = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "User-Agent": scraper.headers["User-Agent"],
    }
    try:
        response = scraper.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(f"Request to {url} failed: {exc}") from exc
    if response.status_code >= 400:
        raise FetchError(f"Failed to retrieve page (status {response.status_code}) from {url}")
    return response.text


def _node_text(node) -> str:
    return " ".join(node.get_text(" ").split())


def select_texts(html: str, selector: str) -> list[str]:
    """Return the normalised text of every node matching ``selector``, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    try:
        nodes = soup.select(selector)
    except Exception as exc:  # noqa: BLE001 - soupsieve raises its own error types
        raise FetchError(f"Invalid selector {selector!r}: {exc}") from exc
    return [_node_text(node) for node in nodes]


def pair_nodes(headlines: Sequence[str], descriptions: Sequence[str], into: Batch | None = None) -> Batch:
    """Pair the i-th headline with the i-th description.

    Only ``min(len(headlines), len(descriptions))`` pairs are produced; the
    surplus on the longer side is dropped. A repeated headline keeps its first
    position but takes the later description.
    """
    batch: Batch = {} if into is None else into
    if len(headlines) != len(descriptions):
        LOGGER.debug(
            "Selector counts differ (%s headlines, %s descriptions); truncating.",
            len(headlines),
            len(descriptions),
        )
    for headline, description in zip(headlines, descriptions):
        if not headline:
            continue
        batch[headline] = description
    return batch


def extract_news(
    url: str = DEFAULT_SOURCE_URL,
    headline_selector: str = DEFAULT_HEADLINE_SELECTOR,
    description_selector: str = DEFAULT_DESCRIPTION_SELECTOR,
    timeout: int = 30,
) -> ExtractionResult:
    """Fetch ``url`` and extract the headline/description batch.

    Never raises: failures are logged and reported through
    :attr:`ExtractionResult.error` alongside whatever was gathered.
    """
    result = ExtractionResult()
    try:
        html = fetch_document(url, timeout=timeout)
        headlines = select_texts(html, headline_selector)
        descriptions = select_texts(html, description_selector)
        pair_nodes(headlines, descriptions, into=result.batch)
    except Exception as exc:  # noqa: BLE001 - extraction fails softly
        LOGGER.error("Extracting news from %s failed: %s", url, exc)
        result.error = str(exc)
        return result

    LOGGER.info("Extracted %s news item(s) from %s.", len(result.batch), url)
    return result

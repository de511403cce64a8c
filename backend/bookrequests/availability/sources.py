"""Catalog sources consulted by availability checks.

A source turns a search target into a fully materialized list of catalog
entries. How items are fetched (HTTP, feed parsing) is injected as an async
callable so that sources only carry request policy: search terms,
deduplication and failure mapping.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

import structlog

from bookrequests.core.matching import (
    FEED_THRESHOLDS,
    TRACKER_THRESHOLDS,
    CatalogEntry,
    ConfidenceThresholds,
    FieldExtractor,
    SearchTarget,
    extract_from_feed_label,
    extract_from_tracker_label,
)

RawItem = Mapping[str, Any]
FeedFetcher = Callable[[], Awaitable[Sequence[RawItem]]]
TrackerSearcher = Callable[[str], Awaitable[Sequence[RawItem]]]

MIN_SEARCH_TERM_LENGTH = 3
TITLE_PREFIX_WORDS = 3


class CatalogUnavailableError(Exception):
    """Raised when a catalog could not be fetched.

    Callers map this to the UNKNOWN confidence tier, which is distinct from
    "checked, nothing found".
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Catalog '{source}' unavailable: {reason}")
        self.source = source
        self.reason = reason


class CatalogSource(ABC):
    """Abstract base class for catalog sources."""

    def __init__(
        self,
        name: str,
        extractor: FieldExtractor,
        thresholds: ConfidenceThresholds,
    ) -> None:
        """Initialize catalog source.

        Args:
            name: Source name (for logging and metrics)
            extractor: Field extractor for this source's labels
            thresholds: Confidence cut-offs for this source
        """
        self.name = name
        self.extractor = extractor
        self.thresholds = thresholds
        self.logger = structlog.get_logger(f"bookrequests.sources.{name.lower()}")

    @abstractmethod
    async def fetch_entries(self, target: SearchTarget) -> list[CatalogEntry]:
        """Fetch the catalog entries to match against.

        Args:
            target: Requested (title, author)

        Returns:
            Fully materialized list of catalog entries

        Raises:
            CatalogUnavailableError: If the catalog could not be fetched
        """


class FeedCatalogSource(CatalogSource):
    """RSS feed of recently published ebooks.

    Every feed item's ``title`` is its raw label; the item itself (link,
    pubDate...) is passed through as metadata.
    """

    def __init__(
        self,
        fetch_items: FeedFetcher,
        thresholds: ConfidenceThresholds = FEED_THRESHOLDS,
        name: str = "feed",
    ) -> None:
        super().__init__(name, extract_from_feed_label, thresholds)
        self._fetch_items = fetch_items

    async def fetch_entries(self, target: SearchTarget) -> list[CatalogEntry]:
        try:
            items = await self._fetch_items()
        except Exception as e:
            self.logger.error("Feed fetch failed", error=str(e), error_type=type(e).__name__)
            raise CatalogUnavailableError(self.name, str(e)) from e

        if not isinstance(items, Sequence) or isinstance(items, str | bytes):
            self.logger.error("Feed returned an unexpected payload", type=type(items).__name__)
            raise CatalogUnavailableError(self.name, "feed payload is not a list of items")

        entries = [_to_entry(item, "title") for item in items if isinstance(item, Mapping)]
        self.logger.debug("Feed entries fetched", count=len(entries))
        return entries


class TrackerCatalogSource(CatalogSource):
    """Private tracker searched by keyword.

    The tracker only returns hits for a query, so several queries are built
    from the target and their results merged without duplicates.
    """

    def __init__(
        self,
        search_torrents: TrackerSearcher,
        thresholds: ConfidenceThresholds = TRACKER_THRESHOLDS,
        name: str = "tracker",
    ) -> None:
        super().__init__(name, extract_from_tracker_label, thresholds)
        self._search_torrents = search_torrents

    async def fetch_entries(self, target: SearchTarget) -> list[CatalogEntry]:
        terms = build_search_terms(target)
        entries: list[CatalogEntry] = []
        seen: set[str] = set()
        failures: list[str] = []

        for term in terms:
            try:
                torrents = await self._search_torrents(term)
            except Exception as e:
                # One failed query shouldn't hide the results of the others
                self.logger.warning("Tracker search failed", term=term, error=str(e))
                failures.append(f"{term}: {e}")
                continue

            added = 0
            for torrent in torrents or []:
                if not isinstance(torrent, Mapping):
                    continue
                torrent_id = torrent.get("id")
                key = (
                    f"id:{torrent_id}"
                    if torrent_id is not None
                    else f"name:{torrent.get('name') or ''}"
                )
                if key in seen:
                    continue
                seen.add(key)
                entries.append(_to_entry(torrent, "name"))
                added += 1

            self.logger.debug("Tracker search", term=term, results=len(torrents or []), added=added)

        if terms and len(failures) == len(terms):
            raise CatalogUnavailableError(self.name, "; ".join(failures))

        self.logger.debug("Tracker entries fetched", terms=terms, unique=len(entries))
        return entries


def build_search_terms(target: SearchTarget) -> list[str]:
    """Build tracker queries for a target.

    Queries: the author, the first three words of the title, and the author
    followed by the first title word. Short and duplicate queries are dropped.

    Args:
        target: Requested (title, author)

    Returns:
        Ordered list of distinct queries (the full title if nothing else qualifies)
    """
    title_words = target.title.split()
    candidates = [
        target.author,
        " ".join(title_words[:TITLE_PREFIX_WORDS]),
        f"{target.author} {title_words[0]}" if title_words else target.author,
    ]

    terms: list[str] = []
    for term in candidates:
        term = term.strip()
        if len(term) >= MIN_SEARCH_TERM_LENGTH and term not in terms:
            terms.append(term)
    return terms or [target.title]


def _to_entry(item: RawItem, label_key: str) -> CatalogEntry:
    label = item.get(label_key) or ""
    return CatalogEntry(raw_label=str(label), source_metadata=dict(item))

"""Availability service - checks requested books against catalog sources."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog
from pydantic import BaseModel, Field

from bookrequests.availability.sources import (
    CatalogSource,
    CatalogUnavailableError,
    FeedCatalogSource,
    FeedFetcher,
    TrackerCatalogSource,
    TrackerSearcher,
)
from bookrequests.core.config import Settings, get_settings
from bookrequests.core.matching import (
    AvailabilityVerdict,
    Confidence,
    MatchResult,
    SearchTarget,
    get_thresholds,
    resolve,
)
from bookrequests.core.metrics import record_fetch_failure, record_resolution

logger = structlog.get_logger("bookrequests.availability")

# User-facing text per confidence tier
DEFAULT_MESSAGES: dict[Confidence, str] = {
    Confidence.HIGH: "This book looks available! Your request should be handled quickly.",
    Confidence.MEDIUM: (
        "A similar book looks available. Your request could be handled quickly."
    ),
    Confidence.LOW: (
        "This book doesn't look immediately available. Handling may take longer."
    ),
    Confidence.UNKNOWN: "Availability can't be checked right now.",
}


class AvailabilityReport(BaseModel):
    """Availability answer returned to request handlers."""

    available: bool = Field(..., description="True for high or medium confidence")
    confidence: Confidence = Field(..., description="Confidence tier")
    message: str = Field(..., description="User-facing text for the tier")
    match: MatchResult | None = Field(default=None, description="Best matching catalog entry")
    score: int = Field(default=0, ge=0, le=100, description="Best match score")
    source: str | None = Field(default=None, description="Catalog source that answered")
    error: str | None = Field(default=None, description="Why the check failed (unknown tier)")


class AvailabilityService:
    """Service for checking a requested book against catalog sources."""

    def __init__(
        self,
        sources: Sequence[CatalogSource],
        messages: Mapping[Confidence, str] | None = None,
    ) -> None:
        """Initialize availability service.

        Args:
            sources: Catalog sources, in the order they are consulted
            messages: User-facing text per confidence tier (uses defaults if None)
        """
        self.sources = list(sources)
        self.messages = {**DEFAULT_MESSAGES, **(messages or {})}
        self.logger = structlog.get_logger("bookrequests.availability.service")

    async def check(self, title: str, author: str) -> AvailabilityReport:
        """Check whether a requested book is likely available.

        Sources are tried in order; a source that can't be fetched hands over
        to the next one. The first source that could be checked answers.

        Args:
            title: Requested title
            author: Requested author

        Returns:
            AvailabilityReport (UNKNOWN if no source could be checked)

        Raises:
            pydantic.ValidationError: If title or author is blank
        """
        target = SearchTarget(title=title, author=author)
        errors: list[str] = []

        with structlog.contextvars.bound_contextvars(
            search_title=target.title, search_author=target.author
        ):
            for source in self.sources:
                try:
                    entries = await source.fetch_entries(target)
                except CatalogUnavailableError as e:
                    self.logger.warning(
                        "Catalog unavailable, trying next source",
                        source=source.name,
                        error=e.reason,
                    )
                    record_fetch_failure(source.name)
                    errors.append(str(e))
                    continue

                verdict = resolve(
                    target.title,
                    target.author,
                    entries,
                    source.extractor,
                    source.thresholds,
                )
                record_resolution(source.name, verdict.confidence.value, verdict.score)
                self.logger.info(
                    "Availability checked",
                    source=source.name,
                    entries=len(entries),
                    confidence=verdict.confidence.value,
                    score=verdict.score,
                    match=verdict.best_match.raw_label if verdict.best_match else None,
                )
                return self._report(verdict, source.name)

            self.logger.error("No catalog source could be checked", errors=errors)
            return self._report(
                AvailabilityVerdict.unknown(),
                None,
                error="; ".join(errors) or "No catalog source configured",
            )

    def _report(
        self,
        verdict: AvailabilityVerdict,
        source: str | None,
        error: str | None = None,
    ) -> AvailabilityReport:
        return AvailabilityReport(
            available=verdict.available,
            confidence=verdict.confidence,
            message=self.messages[verdict.confidence],
            match=verdict.best_match,
            score=verdict.score,
            source=source,
            error=error,
        )


def build_availability_service(
    fetch_feed: FeedFetcher | None = None,
    search_tracker: TrackerSearcher | None = None,
    settings: Settings | None = None,
) -> AvailabilityService:
    """Wire an AvailabilityService from settings.

    Only sources with a fetcher are included, ordered by ``settings.source_order``.

    Args:
        fetch_feed: Async callable returning the feed items
        search_tracker: Async callable returning torrents for a query
        settings: Settings to read thresholds and order from (defaults to get_settings())

    Returns:
        Configured AvailabilityService
    """
    if settings is None:
        settings = get_settings()

    available: dict[str, CatalogSource] = {}
    if search_tracker is not None:
        available["tracker"] = TrackerCatalogSource(
            search_tracker,
            thresholds=get_thresholds("tracker", settings),
        )
    if fetch_feed is not None:
        available["feed"] = FeedCatalogSource(
            fetch_feed,
            thresholds=get_thresholds("feed", settings),
        )

    sources = [available[name] for name in settings.source_order if name in available]
    logger.debug("Availability service configured", sources=[s.name for s in sources])
    return AvailabilityService(sources)

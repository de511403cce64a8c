"""Availability resolver - finds the best catalog entry for a search target.

The resolver is synchronous and keeps no state between calls: fetching the
catalog is the caller's job and must be finished before resolving.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from .config import DEFAULT_CONFIG, ConfidenceThresholds, MatchingConfig
from .evaluator import evaluate_candidate
from .extractors import FieldExtractor, get_extractor
from .models import AvailabilityVerdict, CatalogEntry, MatchResult
from .results import build_match_result, build_verdict

logger = structlog.get_logger("bookrequests.matching")


def resolve(
    search_title: str | None,
    search_author: str | None,
    catalog_entries: Iterable[CatalogEntry] | None,
    extractor: FieldExtractor | str,
    thresholds: ConfidenceThresholds,
    config: MatchingConfig | None = None,
) -> AvailabilityVerdict:
    """Resolve a search target against the entries of one catalog.

    Entries are scanned in order; the first entry reaching the highest score
    wins ties. Passing ``None`` as ``catalog_entries`` means the catalog could
    not be fetched, which yields an UNKNOWN verdict instead of LOW.

    Args:
        search_title: Requested title
        search_author: Requested author
        catalog_entries: Entries of one catalog, or None if unavailable
        extractor: Field extractor, or the name of a registered one
        thresholds: Source-specific confidence cut-offs
        config: Matching configuration (defaults to DEFAULT_CONFIG)

    Returns:
        AvailabilityVerdict for the best entry
    """
    if catalog_entries is None:
        logger.debug("Catalog unavailable, returning unknown verdict")
        return AvailabilityVerdict.unknown()

    if config is None:
        config = DEFAULT_CONFIG
    if isinstance(extractor, str):
        extractor = get_extractor(extractor)

    best_score = 0
    best_match: MatchResult | None = None
    scanned = 0

    for entry in catalog_entries:
        scanned += 1
        fields = extractor(entry.raw_label)
        breakdown = evaluate_candidate(
            search_title,
            search_author,
            fields.title,
            fields.author,
            fields.full_text,
            config,
        )
        entry_score = breakdown.total

        if entry_score >= thresholds.medium and entry_score > 0:
            logger.debug(
                "Candidate scored",
                score=entry_score,
                raw_label=entry.raw_label,
                extracted_title=fields.title,
                extracted_author=fields.author,
                details=breakdown.details,
            )

        if entry_score > best_score:
            best_score = entry_score
            best_match = build_match_result(entry, fields, entry_score)

    verdict = build_verdict(best_score, best_match, thresholds)

    logger.debug(
        "Resolution completed",
        search_title=search_title,
        search_author=search_author,
        entries_scanned=scanned,
        best_score=verdict.score,
        confidence=verdict.confidence.value,
        best_label=best_match.raw_label if best_match else None,
    )

    return verdict

"""Result builders for the matching system.

Functions to bucket scores into confidence tiers and to build the verdict
returned to callers.
"""

from __future__ import annotations

from .config import ConfidenceThresholds
from .extractors import ExtractedFields
from .models import AvailabilityVerdict, CatalogEntry, Confidence, MatchResult


def classify_confidence(score: int, thresholds: ConfidenceThresholds) -> Confidence:
    """Bucket a score into a confidence tier.

    Args:
        score: Best match score (0-100)
        thresholds: Source-specific cut-offs

    Returns:
        HIGH, MEDIUM or LOW (UNKNOWN is never derived from a score)
    """
    if score >= thresholds.high:
        return Confidence.HIGH
    if score >= thresholds.medium:
        return Confidence.MEDIUM
    return Confidence.LOW


def build_match_result(entry: CatalogEntry, fields: ExtractedFields, score: int) -> MatchResult:
    """Build the audit/display record for a scored catalog entry."""
    return MatchResult(
        raw_label=entry.raw_label,
        extracted_title=fields.title,
        extracted_author=fields.author,
        score=score,
        source_metadata=dict(entry.source_metadata),
    )


def build_verdict(
    best_score: int,
    best_match: MatchResult | None,
    thresholds: ConfidenceThresholds,
) -> AvailabilityVerdict:
    """Build the verdict for a completed scan.

    Args:
        best_score: Highest score seen (0 if nothing matched)
        best_match: Entry that first reached the highest score, if any
        thresholds: Source-specific cut-offs

    Returns:
        AvailabilityVerdict; available for high and medium confidence
    """
    if best_match is None:
        # Nothing scored: low even if a source sets its medium cut-off to 0
        return AvailabilityVerdict(
            available=False, confidence=Confidence.LOW, best_match=None, score=0
        )

    confidence = classify_confidence(best_score, thresholds)
    return AvailabilityVerdict(
        available=confidence in (Confidence.HIGH, Confidence.MEDIUM),
        confidence=confidence,
        best_match=best_match,
        score=best_score,
    )

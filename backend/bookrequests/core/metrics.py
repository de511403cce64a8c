"""Prometheus metrics for availability checks."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Availability checks, by catalog source and resulting confidence tier
availability_checks_total = Counter(
    "availability_checks_total",
    "Total number of availability checks resolved against a catalog",
    ["source", "confidence"],  # confidence: high, medium, low, unknown
)

# Catalog fetch failures (mapped to the unknown tier)
catalog_fetch_failures_total = Counter(
    "catalog_fetch_failures_total",
    "Total number of catalog fetches that failed",
    ["source"],
)

# Best match score per resolution
availability_best_score = Histogram(
    "availability_best_score",
    "Best match score found per availability check",
    ["source"],
    buckets=(0, 25, 35, 45, 55, 65, 75, 85, 100),
)


def record_resolution(source: str, confidence: str, best_score: int) -> None:
    """Record the outcome of one resolution.

    Args:
        source: Catalog source name
        confidence: Confidence tier value
        best_score: Best match score
    """
    availability_checks_total.labels(source=source, confidence=confidence).inc()
    availability_best_score.labels(source=source).observe(best_score)


def record_fetch_failure(source: str) -> None:
    """Record a catalog that could not be fetched."""
    catalog_fetch_failures_total.labels(source=source).inc()
    availability_checks_total.labels(source=source, confidence="unknown").inc()

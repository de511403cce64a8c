"""Tests for metrics functionality."""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY, generate_latest

from bookrequests.core.metrics import (
    availability_best_score,
    availability_checks_total,
    catalog_fetch_failures_total,
    record_fetch_failure,
    record_resolution,
)


@pytest.fixture
def clean_metrics():
    """Reset metrics to a known state."""
    availability_checks_total._metrics.clear()
    catalog_fetch_failures_total._metrics.clear()
    availability_best_score._metrics.clear()
    yield
    availability_checks_total._metrics.clear()
    catalog_fetch_failures_total._metrics.clear()
    availability_best_score._metrics.clear()


def test_metrics_exposed() -> None:
    """Test that availability metrics are registered for scraping."""
    content = generate_latest(REGISTRY).decode()

    assert "availability_checks_total" in content
    assert "catalog_fetch_failures_total" in content
    assert "availability_best_score" in content


def test_record_resolution(clean_metrics) -> None:
    """Test that a resolution counts the check and observes the score."""
    record_resolution("feed", "high", 100)
    record_resolution("feed", "low", 0)
    record_resolution("feed", "high", 90)

    assert availability_checks_total.labels(source="feed", confidence="high")._value._value == 2.0
    assert availability_checks_total.labels(source="feed", confidence="low")._value._value == 1.0
    assert REGISTRY.get_sample_value("availability_best_score_count", {"source": "feed"}) == 3.0
    assert REGISTRY.get_sample_value("availability_best_score_sum", {"source": "feed"}) == 190.0


def test_record_fetch_failure(clean_metrics) -> None:
    """Test that a fetch failure is counted as an unknown check."""
    record_fetch_failure("tracker")

    assert catalog_fetch_failures_total.labels(source="tracker")._value._value == 1.0
    assert (
        availability_checks_total.labels(source="tracker", confidence="unknown")._value._value
        == 1.0
    )
    # No score is observed for a catalog that wasn't checked
    assert REGISTRY.get_sample_value("availability_best_score_count", {"source": "tracker"}) is None

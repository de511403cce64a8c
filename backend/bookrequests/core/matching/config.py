"""Matching configuration - scoring weights and confidence thresholds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bookrequests.core.config import Settings


@dataclass(frozen=True)
class MatchingConfig:
    """Configuration for catalog matching.

    Centralizes the scoring weights so that every catalog source shares one
    scoring policy. Each component is evaluated in priority order and only the
    first matching rule contributes.
    """

    # Title component
    title_exact_match: int = 60
    title_containment_match: int = 50
    title_in_full_text: int = 40
    title_overlap_high: int = 45
    title_overlap_medium: int = 35
    title_overlap_low: int = 25

    # Author component
    author_exact_match: int = 40
    author_containment_match: int = 35
    author_in_full_text: int = 30
    author_overlap_high: int = 35
    author_overlap_medium: int = 25

    # Word overlap cut-offs (percent)
    overlap_high_percent: float = 70.0
    overlap_medium_percent: float = 50.0
    overlap_low_percent: float = 30.0

    # Words shorter than this are ignored by the overlap ratio
    min_word_length: int = 3

    # Component caps
    max_title_score: int = 60
    max_author_score: int = 40

    def __post_init__(self) -> None:
        negative = [name for name, value in vars(self).items() if value < 0]
        if negative:
            raise ValueError(f"Invalid matching config: negative values for {', '.join(negative)}")
        if self.max_title_score + self.max_author_score > 100:
            raise ValueError(
                f"Invalid matching config: max_title_score ({self.max_title_score}) + "
                f"max_author_score ({self.max_author_score}) exceeds 100"
            )


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Score cut-offs for one catalog source.

    Attributes:
        high: Minimum score for high confidence
        medium: Minimum score for medium confidence
    """

    high: int
    medium: int

    def __post_init__(self) -> None:
        if not 0 <= self.medium <= self.high <= 100:
            raise ValueError(
                f"Invalid thresholds: expected 0 <= medium ({self.medium}) <= high ({self.high}) <= 100"
            )


# Default config instance
DEFAULT_CONFIG = MatchingConfig()

# Feed titles are cleanly separated, so the feed demands stronger evidence
FEED_THRESHOLDS = ConfidenceThresholds(high=75, medium=45)

# Release names are noisy to parse, so tracker matching is more permissive
TRACKER_THRESHOLDS = ConfidenceThresholds(high=65, medium=25)


def get_thresholds(source: str, settings: Settings | None = None) -> ConfidenceThresholds:
    """Get the configured thresholds for a built-in catalog source.

    Args:
        source: Catalog source name ("feed" or "tracker")
        settings: Settings to read overrides from (defaults to get_settings())

    Returns:
        ConfidenceThresholds for the source

    Raises:
        ValueError: If the source has no configured thresholds
    """
    if settings is None:
        from bookrequests.core.config import get_settings

        settings = get_settings()
    if source == "feed":
        return ConfidenceThresholds(
            high=settings.feed_threshold_high,
            medium=settings.feed_threshold_medium,
        )
    if source == "tracker":
        return ConfidenceThresholds(
            high=settings.tracker_threshold_high,
            medium=settings.tracker_threshold_medium,
        )
    raise ValueError(f"No thresholds configured for catalog source: {source}")

"""Fuzzy bibliographic matching engine.

Decides whether free-form catalog labels (RSS item titles, tracker release
names) refer to a requested book, and how confident that verdict is.
"""

from .config import (
    DEFAULT_CONFIG,
    FEED_THRESHOLDS,
    TRACKER_THRESHOLDS,
    ConfidenceThresholds,
    MatchingConfig,
    get_thresholds,
)
from .criteria import match_author, match_title
from .evaluator import ScoreBreakdown, evaluate_candidate, score
from .extractors import (
    EXTRACTORS,
    ExtractedFields,
    FieldExtractor,
    UnknownExtractorError,
    extract_from_feed_label,
    extract_from_tracker_label,
    get_extractor,
    register_extractor,
)
from .models import AvailabilityVerdict, CatalogEntry, Confidence, MatchResult, SearchTarget
from .normalizer import normalize, word_overlap
from .resolver import resolve
from .results import build_verdict, classify_confidence

__all__ = [
    "MatchingConfig",
    "ConfidenceThresholds",
    "DEFAULT_CONFIG",
    "FEED_THRESHOLDS",
    "TRACKER_THRESHOLDS",
    "get_thresholds",
    "normalize",
    "word_overlap",
    "ExtractedFields",
    "FieldExtractor",
    "EXTRACTORS",
    "UnknownExtractorError",
    "extract_from_feed_label",
    "extract_from_tracker_label",
    "get_extractor",
    "register_extractor",
    "match_title",
    "match_author",
    "ScoreBreakdown",
    "evaluate_candidate",
    "score",
    "SearchTarget",
    "CatalogEntry",
    "MatchResult",
    "AvailabilityVerdict",
    "Confidence",
    "classify_confidence",
    "build_verdict",
    "resolve",
]

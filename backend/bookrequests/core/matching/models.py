"""Pydantic models for search targets, catalog entries and verdicts."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Confidence(str, Enum):
    """How sure we are that the catalog holds the requested book."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"  # The catalog could not be checked


class SearchTarget(BaseModel):
    """The (title, author) pair a user requested."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, description="Requested book title")
    author: str = Field(..., min_length=1, description="Requested book author")


class CatalogEntry(BaseModel):
    """One raw item from an external catalog (feed item or tracker release)."""

    model_config = ConfigDict(frozen=True)

    raw_label: str = Field(default="", description="Feed item title or release name")
    source_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque source data passed through for display (link, seeders, size...)",
    )


class MatchResult(BaseModel):
    """The best-scoring catalog entry for one resolution."""

    raw_label: str = Field(..., description="Raw label of the matched entry")
    extracted_title: str = Field(default="", description="Title extracted from the label")
    extracted_author: str = Field(default="", description="Author extracted from the label")
    score: int = Field(..., ge=0, le=100, description="Match score")
    source_metadata: dict[str, Any] = Field(default_factory=dict)


class AvailabilityVerdict(BaseModel):
    """Outcome of resolving one search target against one catalog."""

    available: bool = Field(..., description="True for high or medium confidence")
    confidence: Confidence = Field(..., description="Confidence tier")
    best_match: MatchResult | None = Field(default=None, description="Winning entry, if any")
    score: int = Field(default=0, ge=0, le=100, description="Best score over all entries")

    @classmethod
    def unknown(cls) -> AvailabilityVerdict:
        """Verdict for a catalog that could not be checked."""
        return cls(available=False, confidence=Confidence.UNKNOWN, best_match=None, score=0)

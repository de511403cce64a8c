"""Match evaluator - combines the title and author criteria into one score."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import DEFAULT_CONFIG, MatchingConfig
from .criteria import match_author, match_title
from .normalizer import normalize


@dataclass(frozen=True)
class ScoreBreakdown:
    """Result of scoring one candidate.

    Attributes:
        title_score: Title component (capped at config.max_title_score)
        author_score: Author component (capped at config.max_author_score)
        details: Reasons reported by each criterion
    """

    title_score: int
    author_score: int
    details: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.title_score + self.author_score


def evaluate_candidate(
    search_title: str | None,
    search_author: str | None,
    candidate_title: str | None,
    candidate_author: str | None,
    candidate_full_text: str | None,
    config: MatchingConfig | None = None,
) -> ScoreBreakdown:
    """Score a candidate against a search target, keeping the reasons.

    Every input is normalized before comparison, so raw strings are fine.

    Args:
        search_title: Requested title
        search_author: Requested author
        candidate_title: Title extracted from the catalog label
        candidate_author: Author extracted from the catalog label
        candidate_full_text: Cleaned catalog label
        config: Matching configuration (defaults to DEFAULT_CONFIG)

    Returns:
        ScoreBreakdown with both components and their reasons
    """
    if config is None:
        config = DEFAULT_CONFIG

    norm_search_title = normalize(search_title)
    norm_search_author = normalize(search_author)
    norm_candidate_title = normalize(candidate_title)
    norm_candidate_author = normalize(candidate_author)
    norm_full_text = normalize(candidate_full_text)

    title_score, title_reason = match_title(
        norm_search_title, norm_candidate_title, norm_full_text, config
    )
    author_score, author_reason = match_author(
        norm_search_author, norm_candidate_author, norm_full_text, config
    )

    return ScoreBreakdown(
        title_score=max(0, min(title_score, config.max_title_score)),
        author_score=max(0, min(author_score, config.max_author_score)),
        details=[title_reason, author_reason],
    )


def score(
    search_title: str | None,
    search_author: str | None,
    candidate_title: str | None,
    candidate_author: str | None,
    candidate_full_text: str | None,
    config: MatchingConfig | None = None,
) -> int:
    """Compute a 0-100 match score between a search target and a candidate."""
    return evaluate_candidate(
        search_title,
        search_author,
        candidate_title,
        candidate_author,
        candidate_full_text,
        config,
    ).total

"""Individual match criteria evaluators.

Each function scores one component of a match (title or author) and returns
a score and reason. Rules are checked in priority order and the first rule
that applies decides the component score; rules never accumulate.

All inputs are expected to be normalized already (see ``normalizer.normalize``).
"""

from .config import MatchingConfig
from .normalizer import word_overlap


def match_title(
    search_title: str,
    candidate_title: str,
    candidate_full_text: str,
    config: MatchingConfig,
) -> tuple[int, str]:
    """Evaluate title match.

    Args:
        search_title: Normalized requested title
        candidate_title: Normalized title extracted from the catalog label
        candidate_full_text: Normalized cleaned catalog label
        config: Matching configuration

    Returns:
        Tuple of (score, reason)
    """
    if not (search_title and candidate_title):
        return 0, f"Empty title: search='{search_title}', candidate='{candidate_title}'"

    if search_title == candidate_title:
        return config.title_exact_match, f"Exact title match: '{search_title}'"

    if search_title in candidate_title or candidate_title in search_title:
        return (
            config.title_containment_match,
            f"Title containment: '{search_title}' ~ '{candidate_title}'",
        )

    if search_title in candidate_full_text:
        return (
            config.title_in_full_text,
            f"Title found in full text: '{search_title}'",
        )

    overlap = word_overlap(search_title, candidate_title, config.min_word_length)
    if overlap >= config.overlap_high_percent:
        return config.title_overlap_high, f"Title word overlap {overlap:.0f}%"
    if overlap >= config.overlap_medium_percent:
        return config.title_overlap_medium, f"Title word overlap {overlap:.0f}%"
    if overlap >= config.overlap_low_percent:
        return config.title_overlap_low, f"Title word overlap {overlap:.0f}%"

    return 0, f"No title match: '{search_title}' vs '{candidate_title}'"


def match_author(
    search_author: str,
    candidate_author: str,
    candidate_full_text: str,
    config: MatchingConfig,
) -> tuple[int, str]:
    """Evaluate author match.

    Exact, containment and overlap rules need an extracted author; the full
    text rule still applies when the extractor found no author.

    Args:
        search_author: Normalized requested author
        candidate_author: Normalized author extracted from the catalog label
        candidate_full_text: Normalized cleaned catalog label
        config: Matching configuration

    Returns:
        Tuple of (score, reason)
    """
    if not search_author:
        return 0, "No author in search"

    if not (candidate_author or candidate_full_text):
        return 0, "No author or text in candidate"

    if candidate_author and search_author == candidate_author:
        return config.author_exact_match, f"Exact author match: '{search_author}'"

    if candidate_author and (
        search_author in candidate_author or candidate_author in search_author
    ):
        return (
            config.author_containment_match,
            f"Author containment: '{search_author}' ~ '{candidate_author}'",
        )

    if candidate_full_text and search_author in candidate_full_text:
        return config.author_in_full_text, f"Author found in full text: '{search_author}'"

    if candidate_author:
        overlap = word_overlap(search_author, candidate_author, config.min_word_length)
        if overlap >= config.overlap_high_percent:
            return config.author_overlap_high, f"Author word overlap {overlap:.0f}%"
        if overlap >= config.overlap_medium_percent:
            return config.author_overlap_medium, f"Author word overlap {overlap:.0f}%"

    return 0, f"No author match: '{search_author}' vs '{candidate_author}'"

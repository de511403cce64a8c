"""Field extractors for raw catalog labels.

Each catalog source formats its labels differently, so each one gets an
extractor that turns a raw label into a (title, author, full_text) guess.
Extractors never raise: a label that doesn't follow the expected convention
yields a poor guess that the scorer ranks down.

New sources plug in through ``register_extractor`` without touching the scorer.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

EBOOK_EXTENSIONS = ("pdf", "epub", "mobi", "azw3", "cbz", "cbr")
FEED_LANGUAGE_TAGS = ("fr", "en", "es", "de")

_EXTENSIONS_PATTERN = "|".join(EBOOK_EXTENSIONS)

# Feed labels: "Title - Author.epub [fr]"
_FEED_EXTENSION_RE = re.compile(
    rf"\.(?:{_EXTENSIONS_PATTERN})\b|[\[(](?:{_EXTENSIONS_PATTERN})[\])]",
    re.IGNORECASE,
)
_FEED_LANGUAGE_RE = re.compile(
    r"\[(?:{tags})\]|\b(?:{tags})\b".format(tags="|".join(FEED_LANGUAGE_TAGS)),
    re.IGNORECASE,
)
_DASH_SEPARATOR_RE = re.compile(r"\s*[-–—]+\s*")
_WHITESPACE_RE = re.compile(r"\s+")

# Tracker labels: "Title.Parts.YEAR.LANG.Author.Name.format-Tag"
_YEAR_TOKEN_RE = re.compile(r"\.\d{4}\.")
_TRAILING_LANGUAGE_RE = re.compile(r"\.(?:FRENCH|ENGLISH|FR|EN)\b.*$", re.IGNORECASE)
_TRAILING_EXTENSION_RE = re.compile(rf"\.(?:{_EXTENSIONS_PATTERN})$", re.IGNORECASE)
_RELEASE_TAG_RE = re.compile(r"-(?:(?i:notag)|[A-Z0-9]{2,}[A-Za-z0-9]*)$")
_SEGMENT_SEPARATOR_RE = re.compile(r"[.\s_]+")
_VOLUME_MARKER_RE = re.compile(r"T\d+", re.IGNORECASE)

# Segments after the year that describe the release rather than the author
TRACKER_RELEASE_TOKENS = frozenset(
    {
        "french",
        "truefrench",
        "english",
        "fr",
        "en",
        "multi",
        "vf",
        "vff",
        "vo",
        "ebook",
        "retail",
        *EBOOK_EXTENSIONS,
    }
)

# Any "-Group" tag directly after a release token ("EPUB-Group", "FRENCH-Team")
_TOKEN_RELEASE_TAG_RE = re.compile(
    r"(?<![^.\s_])({tokens})-[A-Za-z0-9]+$".format(
        tokens="|".join(sorted(TRACKER_RELEASE_TOKENS, key=len, reverse=True))
    ),
    re.IGNORECASE,
)

MAX_AUTHOR_PARTS = 2


@dataclass(frozen=True)
class ExtractedFields:
    """Title/author guess derived from one raw catalog label."""

    title: str = ""
    author: str = ""
    full_text: str = ""


FieldExtractor = Callable[[str | None], ExtractedFields]


class UnknownExtractorError(KeyError):
    """Raised when no extractor is registered under the requested name."""


def extract_from_feed_label(raw_label: str | None) -> ExtractedFields:
    """Extract fields from an RSS feed item title.

    Strips file extensions and language tags, then splits on the first dash
    run: the left part is the title and the right part is the author.

    Args:
        raw_label: Feed item title (e.g., "Dune - Frank Herbert.epub [fr]")

    Returns:
        ExtractedFields with the cleaned label as full_text
    """
    if not raw_label:
        return ExtractedFields()

    cleaned = _FEED_EXTENSION_RE.sub("", raw_label)
    cleaned = _FEED_LANGUAGE_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    parts = _DASH_SEPARATOR_RE.split(cleaned, maxsplit=1)
    title = parts[0].strip()
    author = parts[1].strip() if len(parts) > 1 else ""

    return ExtractedFields(title=title, author=author, full_text=cleaned)


def extract_from_tracker_label(raw_label: str | None) -> ExtractedFields:
    """Extract fields from a scene-style release name.

    Release names look like ``Title.Parts.YEAR.LANG.Author.Name.format-Tag``.
    When a year token is present the title is everything before it and the
    author is looked for after it (past the language and format tags).
    Without a year, the author is guessed from name-like trailing segments.

    Args:
        raw_label: Torrent name (e.g., "Dune.2024.FRENCH.Frank.Herbert-NoTag.epub")

    Returns:
        ExtractedFields (best-effort guess, possibly with an empty author)
    """
    if not raw_label:
        return ExtractedFields()

    year_match = _YEAR_TOKEN_RE.search(raw_label)
    if year_match:
        head_segments = _split_segments(raw_label[: year_match.start()])
        tail_segments = [
            segment
            for segment in _split_segments(_strip_release_suffix(raw_label[year_match.end() :]))
            if segment.lower() not in TRACKER_RELEASE_TOKENS
        ]
        author_span = _find_author_span(tail_segments, lowest_index=0)
        if author_span and head_segments:
            start, end = author_span
            return ExtractedFields(
                title=" ".join(head_segments),
                author=" ".join(tail_segments[start:end]),
                full_text=" ".join(head_segments + tail_segments),
            )
        # No usable author after the year: guess from the title region
        return _extract_from_segments(head_segments)

    cleaned = _TRAILING_LANGUAGE_RE.sub("", raw_label)
    segments = _split_segments(_strip_release_suffix(cleaned))
    while segments and segments[-1].lower() in TRACKER_RELEASE_TOKENS:
        segments.pop()
    return _extract_from_segments(segments)


def _strip_release_suffix(value: str) -> str:
    """Remove a trailing file extension, then a trailing "-Tag" group suffix.

    Group tags of any case are removed when they follow a release token
    ("EPUB-Group"); elsewhere only NoTag or uppercase-led tags are, so that
    hyphenated names survive.
    """
    value = _TRAILING_EXTENSION_RE.sub("", value)
    value = _TOKEN_RELEASE_TAG_RE.sub(r"\1", value)
    return _RELEASE_TAG_RE.sub("", value)


def _split_segments(value: str) -> list[str]:
    return [segment for segment in _SEGMENT_SEPARATOR_RE.split(value) if segment]


def _looks_like_name_part(segment: str) -> bool:
    """Check if a segment could be part of a person's name."""
    return (
        len(segment) > 2
        and segment[0].isupper()
        and not _VOLUME_MARKER_RE.fullmatch(segment)
    )


def _find_author_span(segments: list[str], lowest_index: int) -> tuple[int, int] | None:
    """Find the trailing run of name-like segments.

    Scans backwards, skipping trailing segments that aren't names (volume
    markers, numbers), then collects up to MAX_AUTHOR_PARTS consecutive
    name-like segments. Segments below ``lowest_index`` are never collected.

    Returns:
        (start, end) slice of the author segments, or None
    """
    index = len(segments) - 1
    while index >= lowest_index and not _looks_like_name_part(segments[index]):
        index -= 1
    if index < lowest_index:
        return None

    end = index + 1
    start = end
    while (
        start - 1 >= lowest_index
        and end - start < MAX_AUTHOR_PARTS
        and _looks_like_name_part(segments[start - 1])
    ):
        start -= 1
    return start, end


def _extract_from_segments(segments: list[str]) -> ExtractedFields:
    """Split title segments into title and author with the name heuristic."""
    full_text = " ".join(segments)

    # The first segment always stays in the title
    author_span = _find_author_span(segments, lowest_index=1)
    if author_span:
        start, end = author_span
        return ExtractedFields(
            title=" ".join(segments[:start]),
            author=" ".join(segments[start:end]),
            full_text=full_text,
        )

    if len(segments) >= 3:
        return ExtractedFields(
            title=" ".join(segments[:-2]),
            author=" ".join(segments[-2:]),
            full_text=full_text,
        )

    return ExtractedFields(title=full_text, author="", full_text=full_text)


EXTRACTORS: dict[str, FieldExtractor] = {
    "feed": extract_from_feed_label,
    "tracker": extract_from_tracker_label,
}


def register_extractor(name: str, extractor: FieldExtractor) -> None:
    """Register an extractor for a new catalog source.

    Args:
        name: Source name used to look the extractor up
        extractor: Callable turning a raw label into ExtractedFields
    """
    EXTRACTORS[name] = extractor


def get_extractor(name: str) -> FieldExtractor:
    """Look up a registered extractor by source name.

    Raises:
        UnknownExtractorError: If no extractor is registered under ``name``
    """
    try:
        return EXTRACTORS[name]
    except KeyError:
        raise UnknownExtractorError(name) from None

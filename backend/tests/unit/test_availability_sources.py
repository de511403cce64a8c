"""Tests for catalog sources."""

from __future__ import annotations

import pytest

from bookrequests.availability import (
    CatalogUnavailableError,
    FeedCatalogSource,
    TrackerCatalogSource,
    build_search_terms,
)
from bookrequests.core.matching import (
    FEED_THRESHOLDS,
    TRACKER_THRESHOLDS,
    ConfidenceThresholds,
    SearchTarget,
    extract_from_feed_label,
    extract_from_tracker_label,
)

DUNE = SearchTarget(title="Dune", author="Frank Herbert")


class TestBuildSearchTerms:
    """Test tracker query construction."""

    def test_author_title_prefix_and_combination(self):
        """Test the three query kinds in order."""
        target = SearchTarget(title="Le Petit Prince illustré", author="Saint-Exupéry")
        assert build_search_terms(target) == [
            "Saint-Exupéry",
            "Le Petit Prince",
            "Saint-Exupéry Le",
        ]

    def test_duplicates_removed(self):
        """Test that identical queries are sent once."""
        target = SearchTarget(title="Hugo", author="Hugo")
        assert build_search_terms(target) == ["Hugo", "Hugo Hugo"]

    def test_short_terms_dropped(self):
        """Test that queries shorter than three characters are dropped."""
        target = SearchTarget(title="It", author="Ke")
        assert build_search_terms(target) == ["Ke It"]

    def test_single_letter_names(self):
        """Test that only the combined query is long enough for one-letter names."""
        target = SearchTarget(title="A", author="B")
        assert build_search_terms(target) == ["B A"]


class TestFeedCatalogSource:
    """Test FeedCatalogSource."""

    async def test_items_become_entries(self):
        """Test that item titles become labels and items become metadata."""
        items = [
            {"title": "Dune - Frank Herbert.epub [fr]", "link": "https://example.org/1"},
            {"link": "https://example.org/2"},
            "not an item",
        ]

        async def fetch_items():
            return items

        source = FeedCatalogSource(fetch_items)
        entries = await source.fetch_entries(DUNE)

        assert [entry.raw_label for entry in entries] == ["Dune - Frank Herbert.epub [fr]", ""]
        assert entries[0].source_metadata == items[0]

    async def test_defaults(self):
        """Test the default name, extractor and thresholds."""

        async def fetch_items():
            return []

        source = FeedCatalogSource(fetch_items)
        assert source.name == "feed"
        assert source.extractor is extract_from_feed_label
        assert source.thresholds == FEED_THRESHOLDS
        assert await source.fetch_entries(DUNE) == []

    async def test_fetch_error_raises_unavailable(self):
        """Test that fetch errors map to CatalogUnavailableError."""

        async def fetch_items():
            raise ConnectionError("feed timed out")

        source = FeedCatalogSource(fetch_items)
        with pytest.raises(CatalogUnavailableError) as exc_info:
            await source.fetch_entries(DUNE)

        assert exc_info.value.source == "feed"
        assert exc_info.value.reason == "feed timed out"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_unexpected_payload_raises_unavailable(self):
        """Test that a payload that isn't a list of items is rejected."""

        async def fetch_items():
            return "<rss>oops</rss>"

        source = FeedCatalogSource(fetch_items)
        with pytest.raises(CatalogUnavailableError):
            await source.fetch_entries(DUNE)


class TestTrackerCatalogSource:
    """Test TrackerCatalogSource."""

    async def test_merges_queries_without_duplicates(self):
        """Test that results of every query are merged by torrent id."""
        queries: list[str] = []
        results = {
            "Frank Herbert": [
                {"id": 1, "name": "Dune.2019.FRENCH.Frank.Herbert-NoTag.epub", "seeders": 12},
                {"id": 2, "name": "Dune.Messiah.Frank.Herbert.epub"},
            ],
            "Dune": [{"id": 1, "name": "Dune.2019.FRENCH.Frank.Herbert-NoTag.epub"}],
            "Frank Herbert Dune": [{"name": "Dune.Frank.Herbert.pdf"}],
        }

        async def search_torrents(term: str):
            queries.append(term)
            return results[term]

        source = TrackerCatalogSource(search_torrents)
        entries = await source.fetch_entries(DUNE)

        assert queries == ["Frank Herbert", "Dune", "Frank Herbert Dune"]
        assert [entry.raw_label for entry in entries] == [
            "Dune.2019.FRENCH.Frank.Herbert-NoTag.epub",
            "Dune.Messiah.Frank.Herbert.epub",
            "Dune.Frank.Herbert.pdf",
        ]
        assert entries[0].source_metadata["seeders"] == 12

    async def test_zero_id_deduplicated(self):
        """Test that an id of 0 is a real id, not a missing one."""

        async def search_torrents(term: str):
            return [{"id": 0, "name": "A.B.C"}, {"id": 0, "name": "X.Y.Z"}]

        source = TrackerCatalogSource(search_torrents)
        entries = await source.fetch_entries(DUNE)

        assert [entry.raw_label for entry in entries] == ["A.B.C"]

    async def test_name_used_without_id(self):
        """Test that torrents without an id are deduplicated by name."""

        async def search_torrents(term: str):
            return [{"name": "A.B.C"}, {"name": "A.B.C"}, {"id": "A.B.C", "name": "A.B.C"}]

        source = TrackerCatalogSource(search_torrents)
        entries = await source.fetch_entries(DUNE)

        # An id equal to another torrent's name is still a distinct key
        assert [entry.raw_label for entry in entries] == ["A.B.C", "A.B.C"]

    async def test_defaults(self):
        """Test the default name, extractor and thresholds."""

        async def search_torrents(term: str):
            return None

        source = TrackerCatalogSource(search_torrents)
        assert source.name == "tracker"
        assert source.extractor is extract_from_tracker_label
        assert source.thresholds == TRACKER_THRESHOLDS
        assert await source.fetch_entries(DUNE) == []

    async def test_partial_failure_tolerated(self):
        """Test that a failed query doesn't hide the other results."""

        async def search_torrents(term: str):
            if term == "Dune":
                raise TimeoutError("slow tracker")
            return [{"id": term, "name": f"{term}.epub"}]

        source = TrackerCatalogSource(search_torrents)
        entries = await source.fetch_entries(DUNE)

        assert [entry.raw_label for entry in entries] == [
            "Frank Herbert.epub",
            "Frank Herbert Dune.epub",
        ]

    async def test_all_queries_failing_raises_unavailable(self):
        """Test that the catalog is unavailable when every query fails."""

        async def search_torrents(term: str):
            raise ConnectionError("tracker down")

        source = TrackerCatalogSource(search_torrents, name="xthor")
        with pytest.raises(CatalogUnavailableError) as exc_info:
            await source.fetch_entries(DUNE)

        assert exc_info.value.source == "xthor"
        assert "tracker down" in exc_info.value.reason

    async def test_custom_thresholds(self):
        """Test that thresholds can be overridden per source."""

        async def search_torrents(term: str):
            return []

        thresholds = ConfidenceThresholds(high=80, medium=40)
        source = TrackerCatalogSource(search_torrents, thresholds=thresholds)
        assert source.thresholds is thresholds

"""Availability checks for requested books against external catalogs."""

from bookrequests.availability.service import (
    DEFAULT_MESSAGES,
    AvailabilityReport,
    AvailabilityService,
    build_availability_service,
)
from bookrequests.availability.sources import (
    CatalogSource,
    CatalogUnavailableError,
    FeedCatalogSource,
    TrackerCatalogSource,
    build_search_terms,
)

__all__ = [
    "AvailabilityReport",
    "AvailabilityService",
    "CatalogSource",
    "CatalogUnavailableError",
    "DEFAULT_MESSAGES",
    "FeedCatalogSource",
    "TrackerCatalogSource",
    "build_availability_service",
    "build_search_terms",
]

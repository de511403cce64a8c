"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from bookrequests.core.config import get_settings


@pytest.fixture(autouse=True, scope="session")
def isolated_data_dir(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Point settings at an empty data directory so local settings.json files don't leak in."""
    data_dir = tmp_path_factory.mktemp("data")
    previous = os.environ.get("BOOKREQUESTS_DATA_DIR")
    os.environ["BOOKREQUESTS_DATA_DIR"] = str(data_dir)
    get_settings.cache_clear()

    yield data_dir

    if previous is None:
        os.environ.pop("BOOKREQUESTS_DATA_DIR", None)
    else:
        os.environ["BOOKREQUESTS_DATA_DIR"] = previous
    get_settings.cache_clear()

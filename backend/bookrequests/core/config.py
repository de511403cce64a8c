"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def _default_data_dir() -> Path:
    """Container volume if mounted, otherwise backend/data."""
    if Path("/config").exists():
        return Path("/config")
    # __file__ is backend/bookrequests/core/config.py, so go up to backend/ and add data
    return (Path(__file__).parent.parent.parent / "data").resolve()


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:
    """Load settings from settings.json file.

    This source has lowest priority - env vars will override JSON values.

    Thresholds may be written nested:
    ``{"thresholds": {"feed": {"high": 75, "medium": 45}}}``
    and are flattened to ``feed_threshold_high`` / ``feed_threshold_medium``.

    Args:
        settings: The Settings class (not instance) being constructed.

    Returns:
        Dictionary with setting keys (lowercase) and values from JSON file.
    """
    data_dir_env = os.environ.get("BOOKREQUESTS_DATA_DIR", "")
    data_dir = Path(data_dir_env) if data_dir_env else _default_data_dir()

    settings_file = data_dir / "config" / "settings.json"
    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        import structlog

        structlog.get_logger("bookrequests.config").warning(
            "Ignoring unreadable settings file", path=str(settings_file), error=str(e)
        )
        return {}

    if not isinstance(data, dict):
        return {}

    flattened: dict[str, Any] = {}
    thresholds = data.get("thresholds")
    if isinstance(thresholds, dict):
        for source, values in thresholds.items():
            if not isinstance(values, dict):
                continue
            for level in ("high", "medium"):
                if level in values:
                    flattened[f"{source}_threshold_{level}"] = values[level]

    # Copy other settings (flat keys win over the nested block)
    for key, value in data.items():
        if key != "thresholds":
            flattened[key] = value

    # Convert keys to lowercase to match field names
    return {k.lower(): v for k, v in flattened.items()}


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from:
    1. JSON file (settings.json in config directory) - lowest priority
    2. .env file
    3. Environment variables - highest priority (override JSON/.env)

    All settings are prefixed with BOOKREQUESTS_ (e.g., BOOKREQUESTS_LOG_LEVEL=DEBUG).

    See: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOKREQUESTS_",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources.

        Priority (lowest to highest):
        1. JSON file (settings.json)
        2. .env file
        3. Environment variables
        4. Init settings (values passed to Settings())

        Sources listed first take precedence, so the tuple runs highest to lowest.
        """
        return (  # type: ignore[return-value]
            init_settings,
            env_settings,
            dotenv_settings,
            json_config_settings_source,
        )

    # Application
    env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment (development, production, testing)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_to_file: bool = Field(
        default=False,
        description="Write JSON logs to logs_dir instead of stdout",
    )

    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Base directory for application data (config, logs)",
    )

    # Availability thresholds (scores are 0-100)
    feed_threshold_high: int = Field(default=75, ge=0, le=100)
    feed_threshold_medium: int = Field(default=45, ge=0, le=100)
    tracker_threshold_high: int = Field(default=65, ge=0, le=100)
    tracker_threshold_medium: int = Field(default=25, ge=0, le=100)

    # Catalog sources, in the order they are consulted
    source_order: list[Literal["tracker", "feed"]] = Field(
        default_factory=lambda: ["tracker", "feed"],
        min_length=1,
        description="Catalog sources to check, first available wins",
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> Settings:
        for source in ("feed", "tracker"):
            high = getattr(self, f"{source}_threshold_high")
            medium = getattr(self, f"{source}_threshold_medium")
            if medium > high:
                raise ValueError(
                    f"{source}_threshold_medium ({medium}) must not exceed "
                    f"{source}_threshold_high ({high})"
                )
        return self

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files (settings.json)."""
        return self.data_dir / "config"

    @property
    def logs_dir(self) -> Path:
        """Directory for log files (if file logging is enabled)."""
        return self.data_dir / "logs"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is wanted."""
        return self.env == "development" or self.log_level == "DEBUG"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    Creates and caches the settings instance on first call.
    The cache is cleared when reload_settings() is called.

    Returns:
        Settings instance
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()

"""
Tradelog Settings

Journal configuration loaded from ``TRADELOG_*`` environment variables, an
optional ``.env`` file and an optional YAML settings file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigurationError, ErrorCodes

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".tradelog" / "settings.yaml"


class JournalSettings(BaseSettings):
    """Configuration for a single-user trading journal."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRADELOG_",
        case_sensitive=False,
        extra="ignore",
    )

    sheet_url: Optional[str] = Field(
        default=None,
        description="URL of the Google Sheet holding the trades.",
    )
    sheet: str = Field(
        default="0",
        description="Sheet selector passed to the export endpoint.",
    )
    feed_revision: str = Field(
        default="classic",
        description="Layout revision of the sheet (see tradelog.feed.schema).",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Feed request timeout in seconds.",
    )
    cache_path: Optional[Path] = Field(
        default=None,
        description="JSON file caching the last loaded trades.",
    )
    images_dir: Optional[Path] = Field(
        default=None,
        description="Directory of chart screenshots.",
    )
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @field_validator("sheet", mode="before")
    @classmethod
    def coerce_sheet(cls, v: Any) -> str:
        """Accept sheet indexes given as integers."""
        return str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


def read_settings_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML settings file.

    Returns an empty mapping when the file does not exist.

    Raises:
        ConfigurationError: If the file is not a YAML mapping
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            ErrorCodes.CONFIG_INVALID_FILE,
            detail=str(path),
            original_error=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            ErrorCodes.CONFIG_INVALID_FILE,
            detail=f"{path} must contain a mapping",
        )
    return data


def load_settings(path: Optional[Union[str, Path]] = None, **overrides: Any) -> JournalSettings:
    """
    Build settings from a YAML file, the environment and explicit overrides.

    Explicit overrides win over the environment, which wins over the file.
    """
    file_values = read_settings_file(path or DEFAULT_SETTINGS_FILE)
    env_values = JournalSettings().model_dump(exclude_unset=True)

    merged = {**file_values, **env_values, **overrides}
    settings = JournalSettings(**merged)
    logger.debug(
        f"Settings loaded (revision={settings.feed_revision}, cache={settings.cache_path})"
    )
    return settings


@lru_cache()
def get_settings() -> JournalSettings:
    """Cached settings for the running process."""
    return load_settings()

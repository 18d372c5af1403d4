"""
Application settings, read from environment variables.

The CLI scripts load a ``.env`` file first (python-dotenv), so local
development and Lambda both end up here.
"""

import tempfile
from datetime import date
from functools import lru_cache
from pathlib import PurePath
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from holidaybook.errors import ConfigurationError

DEFAULT_API_URL = (
    "https://data.taipei/api/v1/dataset/964e936d-d971-4567-a467-aa67b930f98e"
    "?scope=resourceAquire&offset=1316&limit=1000"
)


def check_output_directory(value: str) -> str:
    """
    Reject output directories that are unsafe to wipe and recreate.

    Raises:
        ValueError: If value is empty, the current directory, a filesystem
            root or contains a ".." component
    """
    if not value or not value.strip():
        raise ValueError("output directory must not be empty")

    path = PurePath(value)
    # "." and "/" are their own parents
    if path.parent == path:
        raise ValueError(f"output directory {value!r} is a root or the current directory")
    if ".." in path.parts:
        raise ValueError(f"output directory {value!r} must not contain '..'")
    return value


class Settings(BaseSettings):
    """Holiday book settings"""

    # Upstream data source
    HOLIDAY_API_URL: str = DEFAULT_API_URL
    HOLIDAY_API_TIMEOUT: float = Field(30.0, gt=0)
    HOLIDAY_API_MAX_RETRIES: int = Field(3, ge=1, le=10)
    HOLIDAY_TEST_DATA_PATH: str = "test-data.json"

    # Raw dataset cache
    CACHE_BACKEND: Literal["file", "dynamodb"] = "file"
    CACHE_DIR: str = Field(default_factory=tempfile.gettempdir)
    CACHE_KEY: str = "holiday-dataset.json"
    CACHE_MAX_AGE_SECONDS: Optional[int] = Field(None, gt=0)

    # AWS
    CONFIG_TABLE_NAME: str = "holidaybook_config"
    AWS_REGION: str = "us-east-1"

    # Static generation
    OUTPUT_DIRECTORY: str = "docs"
    START_DATE: date = date(2024, 1, 1)
    YEARS_TO_GENERATE: int = Field(2, ge=0, le=50)

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    @field_validator('HOLIDAY_API_URL')
    @classmethod
    def api_url_must_be_https(cls, v: str) -> str:
        """Only fetch the dataset over HTTPS"""
        parsed = urlparse(v)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ValueError('HOLIDAY_API_URL must be an absolute https URL')
        return v

    @field_validator('CACHE_KEY')
    @classmethod
    def cache_key_is_plain_name(cls, v: str) -> str:
        """Cache keys double as file names, so no directories"""
        if not v or PurePath(v).name != v or v in (".", ".."):
            raise ValueError('CACHE_KEY must be a plain file name')
        return v

    @field_validator('OUTPUT_DIRECTORY')
    @classmethod
    def output_directory_is_safe(cls, v: str) -> str:
        """The generator deletes this directory before writing"""
        return check_output_directory(v)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings.

    Raises:
        ConfigurationError: If an environment variable fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def clear_settings_cache() -> None:
    """Forget cached settings (tests change the environment between runs)."""
    get_settings.cache_clear()

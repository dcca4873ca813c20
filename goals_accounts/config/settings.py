"""
Configuration Management for Goals & Accounts

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Which storage medium is used, where it lives, and how listings are
collated are all decided at startup, not inside the record store.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistence medium configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOALS_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory|none)$",
        description="Storage medium: file, memory, or none (no medium)"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per storage slot"
    )
    key: str = Field(
        default="goals-accounts-data-v1",
        min_length=1,
        description="Slot key the document is stored under"
    )

    @field_validator('key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Slot keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key must not contain path separators: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GOALS_",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    # Listings
    default_page_limit: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Page size used when a query gives none (or a non-positive one)"
    )
    collation_locale: Optional[str] = Field(
        default=None,
        description="Locale used to order names and titles (e.g. 'ar_EG.UTF-8'); "
                    "unset means Unicode casefold ordering"
    )

    # Audit
    audit_history_size: int = Field(
        default=1000,
        ge=1,
        description="How many audit events the in-memory audit storage keeps"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

"""Application settings using Pydantic Settings for type safety and env var support."""

__all__ = [
    "RoutingSettings",
    "DirectorySettings",
    "Settings",
    "get_settings",
]

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RoutingSettings(BaseSettings):
    """Routing resolution configuration.

    The Global policy and dial plan are the tenant-wide defaults used for
    subscribers that have nothing assigned.
    """

    model_config = SettingsConfigDict(env_prefix="ROUTING_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    global_policy_name: str = "Global"
    global_dial_plan_name: str = "Global"

    # "ascending": lower priority value is preferred
    priority_order: Literal["ascending", "descending"] = "ascending"


class DirectorySettings(BaseSettings):
    """Directory catalog configuration."""

    model_config = SettingsConfigDict(env_prefix="DIRECTORY_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # JSON export of subscribers, policies, dial plans and routes
    catalog_path: str = "catalog.json"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-settings
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    directory: DirectorySettings = Field(default_factory=DirectorySettings)

    # Application settings
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure a single Settings instance is shared across
    the application. Call get_settings.cache_clear() to reload settings.
    """
    return Settings()

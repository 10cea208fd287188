"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single global configuration instance is shared through ``get_settings()``.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Security Considerations:
-----------------------
- Never commit .env files to version control
- WooCommerce consumer keys grant read access to the whole store

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy URL of the partition snapshot database
        wc_url: Base URL of the upstream WooCommerce store
        wc_consumer_key: WooCommerce REST consumer key
        wc_consumer_secret: WooCommerce REST consumer secret
        wc_api_version: WooCommerce REST API version path
        user_agent: User-Agent header sent upstream
        link_endpoint_url: Base URL of the download-link authorization site
        sync_enabled: Run the catalog sync at startup and on a timer
        sync_interval_hours: Hours between two scheduled sync cycles
        sync_page_size: Products requested per upstream page
        sync_page_delay_seconds: Pause between two page requests
        upstream_timeout_seconds: Timeout applied to each upstream request
        theme_category_slug: Category slug marking a product as a theme
        plugin_category_slug: Category slug marking a product as a plugin
        search_limit: Maximum number of search results
        search_score_cutoff: Minimum fuzzy score (0-100) for a search hit
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.sync_interval_seconds)
        86400
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="WP Catalog API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/catalog.db",
        description="SQLAlchemy connection string for partition snapshots"
    )

    # =========================================================================
    # UPSTREAM CATALOG SETTINGS
    # =========================================================================
    wc_url: str = Field(
        default="",
        description="Base URL of the WooCommerce store"
    )

    wc_consumer_key: str = Field(
        default="",
        description="WooCommerce REST consumer key"
    )

    wc_consumer_secret: str = Field(
        default="",
        description="WooCommerce REST consumer secret"
    )

    wc_api_version: str = Field(
        default="wc/v3",
        description="WooCommerce REST API version"
    )

    user_agent: str = Field(
        default="wpcatalog/1.0",
        description="User-Agent header for upstream requests"
    )

    link_endpoint_url: str = Field(
        default="",
        description="Base URL of the download-link authorization endpoint"
    )

    # =========================================================================
    # SYNC SETTINGS
    # =========================================================================
    sync_enabled: bool = Field(
        default=True,
        description="Sync the catalog at startup and on a fixed interval"
    )

    sync_interval_hours: float = Field(
        default=24,
        gt=0,
        le=168,  # Max one week
        description="Hours between scheduled sync cycles"
    )

    sync_page_size: int = Field(
        default=100,
        ge=1,
        le=100,  # WooCommerce per_page ceiling
        description="Products requested per upstream page"
    )

    sync_page_delay_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Delay between two upstream page requests"
    )

    upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Timeout for each upstream request"
    )

    # =========================================================================
    # CLASSIFICATION & SEARCH SETTINGS
    # =========================================================================
    theme_category_slug: str = Field(
        default="wp-gpl-themes",
        min_length=1,
        description="Category slug that marks a theme"
    )

    plugin_category_slug: str = Field(
        default="wp-gpl-plugins",
        min_length=1,
        description="Category slug that marks a plugin"
    )

    search_limit: int = Field(
        default=20,
        ge=1,
        le=20,
        description="Maximum number of search results"
    )

    search_score_cutoff: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Minimum fuzzy match score for a search hit"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Args:
            value: Raw environment value

        Returns:
            Lowercase normalized environment name
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("wc_url", "link_endpoint_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize base URLs so paths can be appended with a slash."""
        return value.strip().rstrip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def sync_interval_seconds(self) -> float:
        """Get the sync interval in seconds."""
        return self.sync_interval_hours * 60 * 60

    @property
    def catalog_api_url(self) -> str:
        """Get the versioned WooCommerce REST base URL."""
        return f"{self.wc_url}/wp-json/{self.wc_api_version.strip('/')}"

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for in-memory and non-SQLite URLs
        """
        if not self.database_url.startswith("sqlite:///"):
            return None
        db_path = self.database_url.replace("sqlite:///", "", 1)
        if not db_path or db_path == ":memory:":
            return None
        return Path(db_path)

    def ensure_directories(self) -> None:
        """Create the database directory (SQLite only)."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"wc_url={self.wc_url!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings

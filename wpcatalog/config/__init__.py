"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from wpcatalog.config import get_settings

    settings = get_settings()
    print(settings.wc_url)
    print(settings.sync_interval_hours)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]

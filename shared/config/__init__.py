"""
Configuration
=============

Usage:
    from shared.config import settings

    client_timeout = settings.warranty.timeout_seconds
    if settings.is_production:
        ...
"""

from shared.config.settings import (
    Environment,
    LogLevel,
    Settings,
    WarrantyServiceSettings,
    get_settings,
)


settings = get_settings()

__all__ = [
    "Environment",
    "LogLevel",
    "Settings",
    "WarrantyServiceSettings",
    "get_settings",
    "settings",
]

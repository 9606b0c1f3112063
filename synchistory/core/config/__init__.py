"""Configuration module for the sync history service.

Provides centralized configuration management with type-safe enums.

Usage:
    from synchistory.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from synchistory.core.config.enums import Environment
from synchistory.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()

"""
Orchard provider configuration.

Pydantic-based settings read from ORCHARD_AWS_* environment variables or a
.env file.
"""

from orchard.config.settings import ProviderSettings, get_settings

__all__ = [
    "ProviderSettings",
    "get_settings",
]

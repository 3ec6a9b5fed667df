"""
Configuration management for Backend TrustLend.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for endpoints, credentials and timeouts.
"""

from backend_trustlend.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]

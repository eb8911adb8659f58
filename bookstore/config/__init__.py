"""Configuration module for the bookstore query runner."""

from bookstore.config.logging import configure_logging
from bookstore.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "configure_logging"]

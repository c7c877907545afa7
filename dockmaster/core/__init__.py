"""Core app configuration, errors, security and database."""

from dockmaster.core.config import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]

"""Configuration package for the call routing resolver."""

from config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]

"""Configuration: TOML profiles, environment overrides, logging setup."""

from polyradar.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]

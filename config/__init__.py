"""
Configuration module for objectquery.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from config import Settings, load_config
    >>> 
    >>> # Load default config
    >>> settings = load_config()
    >>> 
    >>> # Access settings
    >>> print(settings.log_level)
    >>> print(settings.empty_average)
"""

from .settings import (
    Settings,
    StorageConfig,
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "StorageConfig",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]

"""
Configuration management for objectquery.

Provides dataclasses for configuration and utilities
for loading settings from YAML files.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Literal
import yaml

from objectquery.core.exceptions import ConfigError


EMPTY_AVERAGE_POLICIES = ("nan", "raise")


@dataclass
class StorageConfig:
    """Storage backend configuration."""
    compress: bool = False


@dataclass
class Settings:
    """
    Main settings container for objectquery.
    
    Attributes:
        log_level: Logging level
        log_file: Optional file receiving log output
        empty_average: What ``average`` does on an empty result,
            ``"nan"`` returns ``float("nan")``, ``"raise"`` raises
            ``EmptyResultError``
        storage: Storage settings for persisted collections
    """
    log_level: str = "INFO"
    log_file: Optional[str] = None
    empty_average: Literal["nan", "raise"] = "nan"
    
    storage: StorageConfig = field(default_factory=StorageConfig)
    
    def __post_init__(self):
        if self.empty_average not in EMPTY_AVERAGE_POLICIES:
            raise ConfigError(
                f"empty_average must be one of {EMPTY_AVERAGE_POLICIES}, "
                f"got {self.empty_average!r}"
            )
    
    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        data = dict(data)
        storage_data = data.pop("storage", None) or {}
        
        try:
            return cls(storage=StorageConfig(**storage_data), **data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
    
    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        from dataclasses import asdict
        return asdict(self)


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Environment variable overrides the bundled defaults
    env_config = os.environ.get("OBJECTQUERY_CONFIG")
    if env_config:
        return Path(env_config)
    
    # Check for config in current directory
    local_config = Path("./config/default_config.yaml")
    if local_config.exists():
        return local_config
    
    # Check for config relative to this file
    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. If None, uses default.
        
    Returns:
        Settings object with loaded configuration
        
    Example:
        >>> settings = load_config()
        >>> settings = load_config("./my_config.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)
    
    if not path.exists():
        # Return default settings if no config file
        return Settings()
    
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    
    if data is None:
        return Settings()
    
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    
    return Settings.from_dict(data)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Return the process-wide settings, loading them on first use.

    Loading also applies ``log_level`` and ``log_file`` to the
    ``objectquery`` logger.
    """
    global _settings
    if _settings is None:
        from objectquery.utils.logging import configure_from_settings

        _settings = load_config()
        configure_from_settings(_settings)
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings`` reloads them."""
    global _settings
    _settings = None

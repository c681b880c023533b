"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + environment overrides)
- Logging setup (Loguru)
- Path containment checks

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    ConfigError,
    LoggingConfig,
    MusicConfig,
    ServerConfig,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
)

# Logging
from .output import setup_loguru

# Path security
from .path_security import is_path_within_root, resolve_within_root

__all__ = [
    # Config
    "Config",
    "ConfigError",
    "LoggingConfig",
    "MusicConfig",
    "ServerConfig",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    # Logging
    "setup_loguru",
    # Path security
    "is_path_within_root",
    "resolve_within_root",
]

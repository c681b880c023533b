"""
Configuration management for Zero Music
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

# Range requests larger than this are rejected with 400 (100MB)
DEFAULT_MAX_RANGE_SIZE = 100 * 1024 * 1024
# Upper bound accepted for max_range_size (500MB)
MAX_ALLOWED_RANGE_SIZE = 500 * 1024 * 1024
DEFAULT_CACHE_TTL_MINUTES = 5
MAX_ALLOWED_CACHE_TTL = 1440  # 24 hours
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8080

DEFAULT_SUPPORTED_FORMATS = [".mp3", ".flac", ".wav", ".m4a", ".ogg"]

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

ENV_PREFIX = "ZERO_MUSIC_"


class ConfigError(ValueError):
    """Raised when configuration values are out of range."""

    pass


def _default_music_directory() -> str:
    """~/Music if it exists, otherwise ./music."""
    music_dir = Path.home() / "Music"
    if not music_dir.exists():
        music_dir = Path("music").resolve()
    return str(music_dir)


@dataclass
class MusicConfig:
    """Configuration for music library settings."""

    directory: str = field(default_factory=_default_music_directory)
    supported_formats: List[str] = field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_FORMATS)
    )
    cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES

    def validate(self) -> None:
        """Validate music configuration values.

        Raises:
            ConfigError: If configuration values are invalid
        """
        if self.cache_ttl_minutes < 0 or self.cache_ttl_minutes > MAX_ALLOWED_CACHE_TTL:
            raise ConfigError(
                f"cache_ttl_minutes must be within 0-{MAX_ALLOWED_CACHE_TTL}, "
                f"got {self.cache_ttl_minutes}"
            )
        for fmt in self.supported_formats:
            if not isinstance(fmt, str) or not fmt.startswith("."):
                raise ConfigError(f"Supported format must start with '.': {fmt!r}")


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""

    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_SERVER_PORT
    max_range_size: int = DEFAULT_MAX_RANGE_SIZE
    debug: bool = False  # Expose 5xx error details in responses
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173"]
    )

    def validate(self) -> None:
        """Validate server configuration values.

        Raises:
            ConfigError: If configuration values are invalid
        """
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"port must be within 1-65535, got {self.port}")
        if self.max_range_size <= 0 or self.max_range_size > MAX_ALLOWED_RANGE_SIZE:
            raise ConfigError(
                f"max_range_size must be within 1-{MAX_ALLOWED_RANGE_SIZE}, "
                f"got {self.max_range_size}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/zero-music/zero-music.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = True  # Also output to stderr

    def validate(self) -> None:
        """Validate logging configuration values.

        Raises:
            ConfigError: If configuration values are invalid
        """
        if self.level not in LOG_LEVELS:
            raise ConfigError(f"level must be one of {LOG_LEVELS}, got {self.level!r}")
        if self.max_file_size_mb < 1:
            raise ConfigError(
                f"max_file_size_mb must be positive, got {self.max_file_size_mb}"
            )
        if self.backup_count < 0:
            raise ConfigError(
                f"backup_count must not be negative, got {self.backup_count}"
            )


@dataclass
class Config:
    """Main configuration object."""

    music: MusicConfig = field(default_factory=MusicConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.music.validate()
        self.server.validate()
        self.logging.validate()


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "zero-music"
    return Path.home() / ".config" / "zero-music"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "zero-music"
    return Path.home() / ".local" / "share" / "zero-music"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/zero-music (or ~/.config/zero-music)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def _absolute(path: str) -> str:
    return str(Path(path).expanduser().absolute())


def _upper(value: object) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Expected a string, got {value!r}")
    return value.upper()


def _parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, keeping defaults for missing keys."""
    config = Config()

    if "music" in toml_data:
        music_data = toml_data["music"]
        config.music = MusicConfig(
            directory=_absolute(music_data.get("directory", config.music.directory)),
            supported_formats=music_data.get("supported_formats")
            or config.music.supported_formats,
            cache_ttl_minutes=music_data.get(
                "cache_ttl_minutes", config.music.cache_ttl_minutes
            )
            or DEFAULT_CACHE_TTL_MINUTES,
        )

    if "server" in toml_data:
        server_data = toml_data["server"]
        config.server = ServerConfig(
            host=server_data.get("host", config.server.host),
            port=server_data.get("port", config.server.port),
            max_range_size=server_data.get(
                "max_range_size", config.server.max_range_size
            )
            or DEFAULT_MAX_RANGE_SIZE,
            debug=server_data.get("debug", config.server.debug),
            allowed_origins=server_data.get(
                "allowed_origins", config.server.allowed_origins
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=_upper(logging_data.get("level", config.logging.level)),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def _env_int(name: str, minimum: int, maximum: int) -> Optional[int]:
    """Read an integer override, ignoring unparsable or out-of-range values."""
    raw = os.environ.get(ENV_PREFIX + name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {ENV_PREFIX}{name}={raw!r}")
        return None
    if value < minimum or value > maximum:
        logger.warning(f"Ignoring out-of-range {ENV_PREFIX}{name}={value}")
        return None
    return value


def apply_env_overrides(config: Config) -> Config:
    """Apply ZERO_MUSIC_* environment variables on top of file values."""
    host = os.environ.get(ENV_PREFIX + "SERVER_HOST")
    if host:
        config.server.host = host

    port = _env_int("SERVER_PORT", 1, 65535)
    if port is not None:
        config.server.port = port

    max_range = _env_int("MAX_RANGE_SIZE", 1, MAX_ALLOWED_RANGE_SIZE)
    if max_range is not None:
        config.server.max_range_size = max_range

    music_dir = os.environ.get(ENV_PREFIX + "MUSIC_DIRECTORY")
    if music_dir:
        config.music.directory = _absolute(music_dir)

    ttl = _env_int("CACHE_TTL_MINUTES", 1, MAX_ALLOWED_CACHE_TTL)
    if ttl is not None:
        config.music.cache_ttl_minutes = ttl

    log_level = os.environ.get("LOG_LEVEL", "").upper()
    if log_level in LOG_LEVELS:
        config.logging.level = log_level
    elif log_level:
        logger.warning(f"Ignoring unknown LOG_LEVEL={log_level!r}")

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - ZERO_MUSIC_SERVER_HOST, ZERO_MUSIC_SERVER_PORT
    - ZERO_MUSIC_MAX_RANGE_SIZE
    - ZERO_MUSIC_MUSIC_DIRECTORY, ZERO_MUSIC_CACHE_TTL_MINUTES
    - LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    path = config_path or get_config_path()

    if not path.exists():
        logger.info(f"No configuration file at {path}, using defaults")
        return apply_env_overrides(Config())

    try:
        with open(path, "rb") as f:
            toml_data = tomllib.load(f)
        config = _parse_config(toml_data)
        config.validate()
    except (tomllib.TOMLDecodeError, ConfigError, TypeError) as e:
        logger.warning(f"Invalid configuration in {path}: {e}. Using defaults.")
        config = Config()

    return apply_env_overrides(config)

"""Tests for configuration loading and environment overrides."""

import os
from pathlib import Path

import pytest

from zero_music.core.config import (
    DEFAULT_CACHE_TTL_MINUTES,
    DEFAULT_MAX_RANGE_SIZE,
    DEFAULT_SERVER_PORT,
    Config,
    ConfigError,
    LoggingConfig,
    MusicConfig,
    ServerConfig,
    load_config,
)

ENV_VARS = [
    "ZERO_MUSIC_SERVER_HOST",
    "ZERO_MUSIC_SERVER_PORT",
    "ZERO_MUSIC_MAX_RANGE_SIZE",
    "ZERO_MUSIC_MUSIC_DIRECTORY",
    "ZERO_MUSIC_CACHE_TTL_MINUTES",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the user's environment and config directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.toml")

        assert config.server.port == DEFAULT_SERVER_PORT
        assert config.server.max_range_size == DEFAULT_MAX_RANGE_SIZE
        assert config.music.cache_ttl_minutes == DEFAULT_CACHE_TTL_MINUTES

    def test_values_from_toml(self, tmp_path):
        music = tmp_path / "music"
        path = write_config(
            tmp_path,
            f"""
[music]
directory = "{music}"
supported_formats = [".mp3", ".opus"]
cache_ttl_minutes = 15

[server]
host = "127.0.0.1"
port = 9000
max_range_size = 1048576
debug = true

[logging]
level = "debug"
""",
        )

        config = load_config(path)

        assert config.music.directory == str(music)
        assert config.music.supported_formats == [".mp3", ".opus"]
        assert config.music.cache_ttl_minutes == 15
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9000
        assert config.server.max_range_size == 1048576
        assert config.server.debug is True
        assert config.logging.level == "DEBUG"

    def test_zero_values_fall_back_to_defaults(self, tmp_path):
        path = write_config(
            tmp_path,
            "[music]\ncache_ttl_minutes = 0\n[server]\nmax_range_size = 0\n",
        )

        config = load_config(path)

        assert config.music.cache_ttl_minutes == DEFAULT_CACHE_TTL_MINUTES
        assert config.server.max_range_size == DEFAULT_MAX_RANGE_SIZE

    def test_invalid_toml_falls_back_to_defaults(self, tmp_path):
        path = write_config(tmp_path, "[server\nport = ")
        config = load_config(path)
        assert config.server.port == DEFAULT_SERVER_PORT

    def test_out_of_range_values_fall_back_to_defaults(self, tmp_path):
        path = write_config(tmp_path, "[server]\nport = 70000\n")
        config = load_config(path)
        assert config.server.port == DEFAULT_SERVER_PORT

    @pytest.mark.parametrize(
        "text",
        [
            "[logging]\nlevel = 5\n",
            "[logging]\nlevel = \"loud\"\n",
            "[music]\nsupported_formats = [1]\n",
            "[music]\nsupported_formats = 5\n",
            "[server]\nport = \"http\"\n",
        ],
    )
    def test_wrong_value_types_fall_back_to_defaults(self, tmp_path, text):
        config = load_config(write_config(tmp_path, text))

        assert config.logging.level == "INFO"
        assert config.server.port == DEFAULT_SERVER_PORT
        assert config.music.supported_formats == Config().music.supported_formats


class TestEnvOverrides:
    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, "[server]\nport = 9000\n")
        monkeypatch.setenv("ZERO_MUSIC_SERVER_PORT", "9100")
        monkeypatch.setenv("ZERO_MUSIC_SERVER_HOST", "localhost")
        monkeypatch.setenv("ZERO_MUSIC_MAX_RANGE_SIZE", "2048")
        monkeypatch.setenv("ZERO_MUSIC_MUSIC_DIRECTORY", str(tmp_path / "songs"))
        monkeypatch.setenv("ZERO_MUSIC_CACHE_TTL_MINUTES", "30")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        config = load_config(path)

        assert config.server.port == 9100
        assert config.server.host == "localhost"
        assert config.server.max_range_size == 2048
        assert config.music.directory == str(tmp_path / "songs")
        assert config.music.cache_ttl_minutes == 30
        assert config.logging.level == "WARNING"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("ZERO_MUSIC_SERVER_PORT", "0"),
            ("ZERO_MUSIC_SERVER_PORT", "not-a-port"),
            ("ZERO_MUSIC_MAX_RANGE_SIZE", str(600 * 1024 * 1024)),
            ("ZERO_MUSIC_CACHE_TTL_MINUTES", "2000"),
        ],
    )
    def test_invalid_env_values_ignored(self, tmp_path, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        config = load_config(tmp_path / "absent.toml")

        assert config.server.port == DEFAULT_SERVER_PORT
        assert config.server.max_range_size == DEFAULT_MAX_RANGE_SIZE
        assert config.music.cache_ttl_minutes == DEFAULT_CACHE_TTL_MINUTES

    def test_unknown_log_level_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "loud")
        config = load_config(tmp_path / "absent.toml")
        assert config.logging.level == "INFO"

    def test_dotenv_in_config_dir(self, tmp_path):
        config_dir = tmp_path / "xdg" / "zero-music"
        config_dir.mkdir(parents=True)
        (config_dir / ".env").write_text("ZERO_MUSIC_SERVER_PORT=9200\n")

        try:
            config = load_config(tmp_path / "absent.toml")
        finally:
            # load_dotenv writes os.environ directly
            os.environ.pop("ZERO_MUSIC_SERVER_PORT", None)

        assert config.server.port == 9200


class TestValidate:
    def test_defaults_are_valid(self):
        Config().validate()

    @pytest.mark.parametrize("port", [0, 65536])
    def test_bad_port(self, port):
        with pytest.raises(ConfigError):
            ServerConfig(port=port).validate()

    @pytest.mark.parametrize("size", [0, 500 * 1024 * 1024 + 1])
    def test_bad_max_range_size(self, size):
        with pytest.raises(ConfigError):
            ServerConfig(max_range_size=size).validate()

    def test_bad_cache_ttl(self):
        with pytest.raises(ConfigError):
            MusicConfig(directory="/music", cache_ttl_minutes=1441).validate()

    @pytest.mark.parametrize("fmt", ["mp3", 1])
    def test_bad_format(self, fmt):
        with pytest.raises(ConfigError):
            MusicConfig(directory="/music", supported_formats=[fmt]).validate()

    @pytest.mark.parametrize(
        "kwargs",
        [{"level": "LOUD"}, {"max_file_size_mb": 0}, {"backup_count": -1}],
    )
    def test_bad_logging(self, kwargs):
        with pytest.raises(ConfigError):
            LoggingConfig(**kwargs).validate()

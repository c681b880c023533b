"""Pytest configuration for backend tests.

Each test gets its own app bound to a temporary music directory.
"""

import pytest
from fastapi.testclient import TestClient

from zero_music.core.config import Config, MusicConfig, ServerConfig
from zero_music.domain.library import song_id

from web.backend.main import create_app

TEST_MP3_CONTENT = b"test mp3 content"


@pytest.fixture
def music_dir(tmp_path):
    """Music root with one mp3 and one file that must be ignored."""
    root = tmp_path / "music"
    root.mkdir()
    (root / "test.mp3").write_bytes(TEST_MP3_CONTENT)
    (root / "notes.txt").write_text("not music")
    return root


@pytest.fixture
def config(music_dir):
    return Config(
        music=MusicConfig(directory=str(music_dir), supported_formats=[".mp3"]),
        server=ServerConfig(),
    )


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def test_song_id(music_dir):
    return song_id(str(music_dir / "test.mp3"))

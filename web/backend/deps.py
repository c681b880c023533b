from fastapi import Request

from zero_music.core.config import Config
from zero_music.domain.library import LibraryScanner
from zero_music.domain.streaming import StreamEngine


def get_config(request: Request) -> Config:
    """FastAPI dependency for configuration."""
    return request.app.state.config


def get_scanner(request: Request) -> LibraryScanner:
    """FastAPI dependency for the library index."""
    return request.app.state.scanner


def get_engine(request: Request) -> StreamEngine:
    """FastAPI dependency for the stream engine."""
    return request.app.state.engine

"""Mapping from domain errors to HTTP errors."""

from typing import List

from fastapi import HTTPException

from zero_music.core.config import Config
from zero_music.domain.library import LibraryError, LibraryScanner, Song
from zero_music.domain.streaming import StreamError

INTERNAL_ERROR_DETAIL = "Internal server error"


def internal_error(error: Exception, config: Config) -> HTTPException:
    """500 with details only when server.debug is enabled."""
    detail = f"{INTERNAL_ERROR_DETAIL}: {error}" if config.server.debug else INTERNAL_ERROR_DETAIL
    return HTTPException(status_code=500, detail=detail)


def stream_error(error: StreamError, config: Config) -> HTTPException:
    if error.status_code >= 500:
        return internal_error(error, config)
    return HTTPException(status_code=error.status_code, detail=error.message)


def scan_library(scanner: LibraryScanner, config: Config) -> List[Song]:
    """Scan (usually a cache hit), surfacing failures as 500."""
    try:
        return scanner.scan()
    except LibraryError as e:
        # Already logged with details by the scanner
        raise internal_error(e, config) from e

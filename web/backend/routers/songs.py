from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from zero_music.core.config import Config
from zero_music.domain.library import LibraryError, LibraryScanner, is_valid_song_id

from ..deps import get_config, get_scanner
from ..errors import internal_error, scan_library
from ..schemas import RefreshResponse, SongInfo, SongList

router = APIRouter()


@router.get("/songs", response_model=SongList)
def list_songs(
    scanner: LibraryScanner = Depends(get_scanner),
    config: Config = Depends(get_config),
):
    """List every song in the music directory."""
    songs = scan_library(scanner, config)
    return SongList(total=len(songs), songs=[SongInfo.from_song(s) for s in songs])


@router.get("/song/{song_id}", response_model=SongInfo)
def get_song(
    song_id: str,
    scanner: LibraryScanner = Depends(get_scanner),
    config: Config = Depends(get_config),
):
    # SECURITY: ids are never used as path fragments, but reject junk early
    if not is_valid_song_id(song_id):
        raise HTTPException(400, "Invalid song id format")

    scan_library(scanner, config)
    song = scanner.lookup(song_id)
    if song is None:
        raise HTTPException(404, "Song not found")
    return SongInfo.from_song(song)


@router.post("/songs/refresh", response_model=RefreshResponse)
def refresh_library(
    scanner: LibraryScanner = Depends(get_scanner),
    config: Config = Depends(get_config),
):
    """Rescan the music directory regardless of cache age."""
    try:
        scanner.refresh()
    except LibraryError as e:
        raise internal_error(e, config) from e

    total = scanner.count()
    logger.info(f"Library refreshed: {total} songs")
    return RefreshResponse(total=total)

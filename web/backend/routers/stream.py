from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from zero_music.core.config import Config
from zero_music.domain.library import LibraryScanner, is_valid_song_id
from zero_music.domain.streaming import StreamEngine, StreamError

from ..deps import get_config, get_engine, get_scanner
from ..errors import scan_library, stream_error

router = APIRouter()


@router.get("/stream/{song_id}")
def stream_audio(
    song_id: str,
    range_header: Optional[str] = Header(default=None, alias="Range"),
    scanner: LibraryScanner = Depends(get_scanner),
    engine: StreamEngine = Depends(get_engine),
    config: Config = Depends(get_config),
):
    """Stream a song, honouring single-range "Range: bytes=a-b" requests."""
    if not is_valid_song_id(song_id):
        raise HTTPException(400, "Invalid song id format")

    # The engine only looks songs up; make sure the index is current
    scan_library(scanner, config)

    try:
        result = engine.stream(song_id, range_header)
    except StreamError as e:
        raise stream_error(e, config) from e

    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)

    # close() also runs after a client disconnect, when the body
    # generator is abandoned before its finally block
    return StreamingResponse(
        iter(result.body),
        status_code=result.status_code,
        headers=result.headers,
        background=BackgroundTask(result.close),
    )

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zero_music import __version__
from zero_music.core.config import Config, load_config
from zero_music.domain.library import MusicScanner
from zero_music.domain.streaming import StreamEngine

from web.backend.middleware import RequestIDMiddleware


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API with its own scanner and stream engine."""
    config = config or load_config()

    app = FastAPI(title="Zero Music API", version=__version__)

    scanner = MusicScanner.from_config(config.music)
    app.state.config = config
    app.state.scanner = scanner
    app.state.engine = StreamEngine(scanner, config.music, config.server)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # Browsers hide these from audio players unless exposed
        expose_headers=["Content-Range", "Content-Length", "Accept-Ranges"],
    )
    app.add_middleware(RequestIDMiddleware)

    # Include routers
    from web.backend.routers import songs, stream

    app.include_router(songs.router, prefix="/api", tags=["songs"])
    app.include_router(stream.router, prefix="/api", tags=["stream"])

    @app.get("/health")
    async def health_check(request: Request):
        music_dir = request.app.state.config.music.directory
        accessible = Path(music_dir).is_dir()
        return JSONResponse(
            {
                "status": "ok" if accessible else "degraded",
                "music_dir_accessible": accessible,
                "music_directory": music_dir,
                "song_count": request.app.state.scanner.count(),
            },
            status_code=200 if accessible else 503,
        )

    @app.get("/")
    async def root():
        return {
            "name": "Zero Music API",
            "version": __version__,
            "endpoints": [
                "GET /health - health check",
                "GET /api/songs - list all songs",
                "GET /api/song/{id} - song details",
                "POST /api/songs/refresh - rescan the music directory",
                "GET /api/stream/{id} - stream audio (supports Range)",
            ],
        }

    return app

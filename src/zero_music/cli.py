"""
Zero Music CLI - Entry point

Runs the HTTP server or performs a one-shot library scan.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from zero_music.core.config import Config, load_config
from zero_music.core.output import setup_loguru
from zero_music.domain.library import LibraryError, MusicScanner


def run_scan(config: Config) -> int:
    """Scan the music directory once and print the songs found.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    scanner = MusicScanner.from_config(config.music)
    print(f"Scanning: {config.music.directory}")

    try:
        songs = scanner.scan()
    except LibraryError as e:
        print(f"Scan failed: {e}")
        return 1

    print(f"Found {scanner.count()} songs")
    for i, song in enumerate(songs, 1):
        print(f"{i}. {song.title}")
        print(f"   File: {song.file_name}")
        print(f"   Size: {song.file_size / (1024 * 1024):.2f} MB")
        print(f"   Path: {song.file_path}")

    if not songs:
        formats = ", ".join(config.music.supported_formats)
        print(f"No supported music files ({formats}) found in {config.music.directory}")
    return 0


def run_server(config: Config) -> int:
    """Serve the API with uvicorn until interrupted."""
    import uvicorn

    from web.backend.main import create_app

    app = create_app(config)
    logger.info(
        f"Zero Music starting on http://{config.server.host}:{config.server.port} "
        f"(music directory: {config.music.directory})"
    )
    # uvicorn handles SIGINT/SIGTERM with a graceful shutdown
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)
    logger.info("Server stopped")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="zero-music",
        description="Index a music directory and stream it over HTTP",
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to config.toml"
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the HTTP server (default)")
    subparsers.add_parser("scan", help="Scan the music directory and print songs")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_loguru(config.logging)

    if args.command == "scan":
        return run_scan(config)
    return run_server(config)


if __name__ == "__main__":
    sys.exit(main())

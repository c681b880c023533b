"""
Song metadata extraction.

Reads tags from audio files using Mutagen and falls back to filename-derived
values when a file has no readable tags.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from mutagen import File as MutagenFile

from .identifiers import song_id
from .models import Song

UNKNOWN = "Unknown"

# ID3 (MP3), MP4, and Vorbis/FLAC tag names
TITLE_TAGS = ["TIT2", "\xa9nam", "TITLE", "title"]
ARTIST_TAGS = ["TPE1", "\xa9ART", "ARTIST", "artist"]
ALBUM_TAGS = ["TALB", "\xa9alb", "ALBUM", "album"]


def get_tag_value(audio_file: Any, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
        if value:
            if isinstance(value, list):
                text = str(value[0])
            else:
                text = str(value)
            if text.strip():
                return text.strip()
    return None


def read_tags(file_path: str) -> dict[str, Any]:
    """Read title/artist/album/duration tags; empty dict if unreadable."""
    try:
        audio_file = MutagenFile(file_path)
    except Exception as e:
        # Mutagen raises a variety of format-specific errors for corrupt files
        logger.debug(f"Could not read metadata from {file_path}: {e}")
        return {}

    if audio_file is None:
        return {}

    tags: dict[str, Any] = {
        "title": get_tag_value(audio_file, TITLE_TAGS),
        "artist": get_tag_value(audio_file, ARTIST_TAGS),
        "album": get_tag_value(audio_file, ALBUM_TAGS),
    }
    info = getattr(audio_file, "info", None)
    if info is not None:
        tags["duration"] = getattr(info, "length", None)
    return tags


def build_song(file_path: str, stat_result: os.stat_result) -> Song:
    """Create a Song from a path and the stat taken during the walk.

    Size and modification time come from the walk's stat so every song in a
    snapshot reflects the same pass.
    """
    path = Path(file_path)
    tags = read_tags(file_path)

    return Song(
        id=song_id(file_path),
        title=tags.get("title") or path.stem,
        artist=tags.get("artist") or UNKNOWN,
        album=tags.get("album") or UNKNOWN,
        file_path=file_path,
        file_name=path.name,
        file_size=stat_result.st_size,
        format=path.suffix.lower(),
        added_at=datetime.fromtimestamp(stat_result.st_mtime),
        duration=float(tags.get("duration") or 0.0),
    )

"""Library domain - music file scanning and indexing.

This domain handles:
- Song data models and index snapshots
- Path-derived song identifiers
- Metadata extraction from audio files
- TTL-cached directory scanning
"""

# Models
from .models import LibrarySnapshot, Song

# Identifiers
from .identifiers import SONG_ID_PATTERN, is_valid_song_id, song_id

# Errors
from .exceptions import (
    DirectoryNotFoundError,
    LibraryError,
    ScanCancelledError,
    WalkError,
)

# Scanning
from .scanner import LibraryScanner, MusicScanner, is_supported_format

__all__ = [
    # Models
    "LibrarySnapshot",
    "Song",
    # Identifiers
    "SONG_ID_PATTERN",
    "is_valid_song_id",
    "song_id",
    # Errors
    "DirectoryNotFoundError",
    "LibraryError",
    "ScanCancelledError",
    "WalkError",
    # Scanner
    "LibraryScanner",
    "MusicScanner",
    "is_supported_format",
]

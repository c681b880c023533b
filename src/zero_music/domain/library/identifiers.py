"""
Song identifiers derived from file paths.

An id is the first 16 bytes of SHA-256 over the absolute path, hex-encoded.
Ids identify a path, not file contents: a re-encoded file at the same path
keeps its id, a moved file gets a new one.
"""

import hashlib
import re

SONG_ID_BYTES = 16
SONG_ID_PATTERN = r"^[a-f0-9]{32}$"

_SONG_ID_RE = re.compile(SONG_ID_PATTERN)


def song_id(file_path: str) -> str:
    """Pure function - deterministic 32-char lowercase hex id for a path."""
    digest = hashlib.sha256(file_path.encode("utf-8", "surrogateescape")).digest()
    return digest[:SONG_ID_BYTES].hex()


def is_valid_song_id(value: str) -> bool:
    """Check that value has the exact wire format of a song id."""
    # fullmatch: "$" alone would accept a trailing newline
    return isinstance(value, str) and _SONG_ID_RE.fullmatch(value) is not None

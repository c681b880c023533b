"""
Audio streaming with HTTP Range support.

Resolves a song id through the library index, checks the file stays inside
the music root, and produces status, headers and a file-backed body for
either the whole file (200) or one byte range (206/416).
"""

import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Optional
from urllib.parse import quote

from loguru import logger

from zero_music.core.config import MusicConfig, ServerConfig
from zero_music.core.path_security import resolve_within_root
from zero_music.domain.library.identifiers import is_valid_song_id
from zero_music.domain.library.scanner import LibraryScanner

from .exceptions import BadRequestError, ForbiddenError, InternalError, NotFoundError
from .ranges import parse_range_header, unsatisfiable_content_range

DEFAULT_CHUNK_SIZE = 64 * 1024

AUDIO_MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".flac": "audio/flac",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".ogg": "audio/ogg",
    ".opus": "audio/opus",
}


def get_mime_type(file_path: Path) -> str:
    """Pure function - MIME type from extension.

    System registry first, then the audio table, then octet-stream.
    """
    guessed, _ = mimetypes.guess_type(str(file_path))
    if guessed:
        return guessed
    return AUDIO_MIME_TYPES.get(file_path.suffix.lower(), "application/octet-stream")


def content_disposition(file_name: str) -> str:
    """Inline Content-Disposition; RFC 5987 form for names headers can't carry."""
    if file_name.isascii() and '"' not in file_name and "\\" not in file_name:
        return f'inline; filename="{file_name}"'
    return f"inline; filename*=utf-8''{quote(file_name, safe='')}"


class FileBody:
    """Iterable over length bytes of an open file; owns the file handle.

    The handle is closed when iteration finishes or fails, and by close(),
    which is safe to call more than once.
    """

    def __init__(self, file_obj: BinaryIO, length: int, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._file = file_obj
        self.length = length
        self.chunk_size = chunk_size

    def __iter__(self) -> Iterator[bytes]:
        remaining = self.length
        try:
            while remaining > 0:
                chunk = self._file.read(min(self.chunk_size, remaining))
                if not chunk:
                    # File shrank after it was opened
                    logger.warning(
                        f"Short read: {self.length - remaining}/{self.length} bytes"
                    )
                    break
                remaining -= len(chunk)
                yield chunk
        finally:
            self.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


@dataclass
class StreamResult:
    """Status, headers and body for one stream request."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[FileBody] = None

    def close(self) -> None:
        if self.body is not None:
            self.body.close()


class StreamEngine:
    """Serves indexed songs as full or partial HTTP content."""

    def __init__(
        self,
        scanner: LibraryScanner,
        music_config: MusicConfig,
        server_config: ServerConfig,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.scanner = scanner
        self.music_root = Path(music_config.directory).absolute()
        self.max_range_size = server_config.max_range_size
        self.chunk_size = chunk_size

    def stream(self, song_id: str, range_header: Optional[str] = None) -> StreamResult:
        """Build the response for streaming song_id.

        The library is not rescanned here; callers scan beforehand. A song
        deleted since the last scan surfaces as NotFoundError when opening.

        Raises:
            BadRequestError: Malformed id or Range header, or oversized range
            NotFoundError: Unknown id, or file missing on disk
            ForbiddenError: Path outside the music root, or a directory
            InternalError: Other I/O failures
        """
        if not is_valid_song_id(song_id):
            raise BadRequestError("Invalid song id format")

        song = self.scanner.lookup(song_id)
        if song is None:
            raise NotFoundError("Song not found")

        path = self._resolve(Path(song.file_path))
        file_obj, file_size = self._open(path)

        logger.info(f"Stream request: id={song_id}, path={path}, size={file_size}")

        try:
            return self._build_result(file_obj, file_size, path.name, range_header)
        except BaseException:
            file_obj.close()
            raise

    def _resolve(self, file_path: Path) -> Path:
        resolved = resolve_within_root(file_path, self.music_root)
        if resolved is None:
            logger.warning(
                f"Security: blocked access outside music root {self.music_root}: {file_path}"
            )
            raise ForbiddenError("Access denied")
        if resolved.is_dir():
            logger.warning(f"Security: attempt to stream a directory: {resolved}")
            raise ForbiddenError("Cannot stream a directory")
        return resolved

    def _open(self, path: Path) -> tuple[BinaryIO, int]:
        try:
            file_obj = open(path, "rb")
        except FileNotFoundError:
            raise NotFoundError("Audio file not found")
        except IsADirectoryError:
            raise ForbiddenError("Cannot stream a directory")
        except OSError as e:
            logger.error(f"Failed to open audio file {path}: {e}")
            raise InternalError(f"Failed to open audio file: {e}") from e

        try:
            file_size = os.fstat(file_obj.fileno()).st_size
        except OSError as e:
            file_obj.close()
            logger.error(f"Failed to stat audio file {path}: {e}")
            raise InternalError(f"Failed to stat audio file: {e}") from e
        return file_obj, file_size

    def _build_result(
        self,
        file_obj: BinaryIO,
        file_size: int,
        file_name: str,
        range_header: Optional[str],
    ) -> StreamResult:
        headers = {
            "Content-Type": get_mime_type(Path(file_name)),
            "Accept-Ranges": "bytes",
            "Content-Disposition": content_disposition(file_name),
        }

        if not range_header:
            headers["Content-Length"] = str(file_size)
            return StreamResult(
                200, headers, FileBody(file_obj, file_size, self.chunk_size)
            )

        byte_range = parse_range_header(range_header, file_size, self.max_range_size)
        if byte_range is None:
            file_obj.close()
            return StreamResult(
                416, {"Content-Range": unsatisfiable_content_range(file_size)}
            )

        try:
            file_obj.seek(byte_range.start)
        except OSError as e:
            logger.error(f"Failed to seek to {byte_range.start} in {file_name}: {e}")
            raise InternalError(f"Failed to seek audio file: {e}") from e

        headers["Content-Range"] = byte_range.content_range(file_size)
        headers["Content-Length"] = str(byte_range.length)
        return StreamResult(
            206, headers, FileBody(file_obj, byte_range.length, self.chunk_size)
        )

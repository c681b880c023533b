"""
Music library scanning and caching.

Walks the music directory for supported audio files and keeps the result as
an immutable snapshot that is reused until its TTL expires.

Concurrency model:
- Readers (lookup, list_songs, count, cache-hit scan) read the current
  snapshot reference and never block.
- Walks are serialized by a single lock. A caller that finds the cache stale
  takes the lock and checks staleness again before walking, so callers that
  queued behind a walk reuse its result instead of walking again.
- A new snapshot is built locally and published with one reference swap;
  failed or cancelled walks leave the previous snapshot in place.
"""

import os
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol

from loguru import logger

from zero_music.core.config import DEFAULT_CACHE_TTL_MINUTES, MusicConfig
from zero_music.core.path_security import is_path_within_root

from .exceptions import DirectoryNotFoundError, ScanCancelledError, WalkError
from .metadata import build_song
from .models import LibrarySnapshot, Song

DEFAULT_FORMATS = [".mp3"]


class LibraryScanner(Protocol):
    """Capabilities of a library index.

    Callers (HTTP routers, the stream engine) depend on this protocol only.
    """

    def scan(self, cancel_event: Optional[threading.Event] = None) -> List[Song]:
        """Return cached songs, rescanning if the cache is stale or empty."""
        ...

    def refresh(self, cancel_event: Optional[threading.Event] = None) -> None:
        """Rescan unconditionally."""
        ...

    def list_songs(self) -> List[Song]:
        """Copy of the current snapshot's songs. Never scans."""
        ...

    def count(self) -> int:
        """Number of songs in the current snapshot."""
        ...

    def lookup(self, song_id: str) -> Optional[Song]:
        """Song with the given id in the current snapshot, or None. Never scans."""
        ...


def normalize_formats(supported_formats: Iterable[str]) -> frozenset[str]:
    """Lower-case extensions for case-insensitive matching."""
    return frozenset(fmt.lower() for fmt in supported_formats)


def is_supported_format(file_name: str, supported_formats: frozenset[str]) -> bool:
    """Check if file extension is in the (lower-cased) supported set."""
    return os.path.splitext(file_name)[1].lower() in supported_formats


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ScanCancelledError("Library scan cancelled")


class MusicScanner:
    """In-memory, TTL-cached index of one music directory."""

    def __init__(
        self,
        directory: str,
        supported_formats: Optional[List[str]] = None,
        cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if cache_ttl_minutes <= 0:
            cache_ttl_minutes = DEFAULT_CACHE_TTL_MINUTES

        self.directory = os.path.abspath(directory)
        self.supported_formats = normalize_formats(
            supported_formats or DEFAULT_FORMATS
        )
        self.cache_ttl_seconds = cache_ttl_minutes * 60
        self._clock = clock
        self._snapshot = LibrarySnapshot()
        self._scan_lock = threading.Lock()

    @classmethod
    def from_config(
        cls, config: MusicConfig, clock: Callable[[], float] = time.monotonic
    ) -> "MusicScanner":
        return cls(
            config.directory,
            config.supported_formats,
            config.cache_ttl_minutes,
            clock=clock,
        )

    @property
    def snapshot(self) -> LibrarySnapshot:
        return self._snapshot

    @property
    def last_scan(self) -> Optional[datetime]:
        """Wall-clock time of the last successful scan, or None."""
        return self._snapshot.scanned_wall_time

    def _is_fresh(self, snapshot: LibrarySnapshot) -> bool:
        if snapshot.scanned_at is None or len(snapshot) == 0:
            return False
        return self._clock() - snapshot.scanned_at < self.cache_ttl_seconds

    def scan(self, cancel_event: Optional[threading.Event] = None) -> List[Song]:
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return list(snapshot.songs)

        with self._scan_lock:
            # Another caller may have rescanned while we waited for the lock
            snapshot = self._snapshot
            if self._is_fresh(snapshot):
                return list(snapshot.songs)
            return list(self._scan_locked(cancel_event).songs)

    def refresh(self, cancel_event: Optional[threading.Event] = None) -> None:
        with self._scan_lock:
            self._scan_locked(cancel_event)

    def list_songs(self) -> List[Song]:
        return list(self._snapshot.songs)

    def count(self) -> int:
        return len(self._snapshot)

    def lookup(self, song_id: str) -> Optional[Song]:
        return self._snapshot.index.get(song_id)

    def _scan_locked(
        self, cancel_event: Optional[threading.Event]
    ) -> LibrarySnapshot:
        """Walk and publish a new snapshot. Caller must hold _scan_lock."""
        started = self._clock()
        try:
            songs = self._walk(cancel_event)
        except ScanCancelledError:
            logger.info(f"Scan of {self.directory} cancelled, keeping previous index")
            raise
        except (DirectoryNotFoundError, WalkError) as e:
            logger.error(f"Library scan failed: {e}")
            raise

        snapshot = LibrarySnapshot.build(songs, scanned_at=self._clock())
        self._snapshot = snapshot
        logger.info(
            f"Library scan complete: {len(snapshot)} songs in {self.directory} "
            f"({self._clock() - started:.2f}s)"
        )
        return snapshot

    def _walk(self, cancel_event: Optional[threading.Event]) -> List[Song]:
        """Iterative depth-first walk of the music directory.

        Symlinked directories are not followed, and symlinked files are
        skipped unless their target is inside the root. Cancellation is
        checked between entries.
        """
        if not os.path.isdir(self.directory):
            raise DirectoryNotFoundError(self.directory)

        root = Path(self.directory)
        songs: List[Song] = []
        stack = [self.directory]

        while stack:
            _check_cancelled(cancel_event)
            current = stack.pop()
            try:
                with os.scandir(current) as entries:
                    for entry in entries:
                        _check_cancelled(cancel_event)

                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                            continue
                        if not is_supported_format(entry.name, self.supported_formats):
                            continue

                        try:
                            if entry.is_symlink() and not is_path_within_root(
                                Path(entry.path), root
                            ):
                                logger.warning(
                                    f"Security: skipping symlink outside music root: {entry.path}"
                                )
                                continue
                            # Follows symlinks: size is that of the target
                            if not entry.is_file():
                                continue
                            stat_result = entry.stat()
                        except FileNotFoundError:
                            logger.debug(f"File vanished during scan: {entry.path}")
                            continue

                        songs.append(build_song(entry.path, stat_result))
            except OSError as e:
                raise WalkError(current, e) from e

        return songs

"""
Music library domain models.

Contains data structures for representing indexed songs and index snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Optional


class Song(NamedTuple):
    """Represents one indexed audio file.

    Immutable: a rescan produces new Song objects rather than updating these.
    """

    id: str  # 32-char hex, derived from file_path
    title: str
    artist: str
    album: str
    file_path: str  # Absolute path at scan time
    file_name: str
    file_size: int  # Bytes at scan time
    format: str  # Lower-cased extension, e.g. ".mp3"
    added_at: datetime  # File modification time
    duration: float = 0.0  # in seconds


@dataclass(frozen=True)
class LibrarySnapshot:
    """Immutable result of one directory walk.

    The songs tuple and the id index always describe the same set of songs.
    """

    songs: tuple[Song, ...] = ()
    index: Mapping[str, Song] = field(default_factory=lambda: MappingProxyType({}))
    scanned_at: Optional[float] = None  # Monotonic clock reading
    scanned_wall_time: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        songs: Iterable[Song],
        scanned_at: float,
        scanned_wall_time: Optional[datetime] = None,
    ) -> "LibrarySnapshot":
        song_tuple = tuple(songs)
        return cls(
            songs=song_tuple,
            index=MappingProxyType({song.id: song for song in song_tuple}),
            scanned_at=scanned_at,
            scanned_wall_time=scanned_wall_time or datetime.now(),
        )

    def __len__(self) -> int:
        return len(self.songs)

from datetime import datetime

from pydantic import BaseModel

from zero_music.domain.library import Song


class SongInfo(BaseModel):
    id: str
    title: str
    artist: str
    album: str
    duration: float = 0.0  # seconds
    file_path: str
    file_name: str
    file_size: int
    added_at: datetime
    format: str

    @classmethod
    def from_song(cls, song: Song) -> "SongInfo":
        return cls(**song._asdict())


class SongList(BaseModel):
    total: int
    songs: list[SongInfo]


class RefreshResponse(BaseModel):
    total: int

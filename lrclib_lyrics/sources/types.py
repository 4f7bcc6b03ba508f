from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TrackKey:
    artist: str
    title: str
    album: str = ""
    duration_ms: int | None = None

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "Unknown track"


@dataclass(frozen=True, slots=True)
class LyricsRecord:
    """One lrclib.net entry, reduced to the fields the parser needs."""

    id: int | None
    track_name: str
    artist_name: str
    album_name: str
    duration: float | None  # seconds
    instrumental: bool
    plain_lyrics: str | None = None
    synced_lyrics: str | None = None

    @property
    def has_synced_lyrics(self) -> bool:
        return bool(self.synced_lyrics)

    @property
    def has_plain_lyrics(self) -> bool:
        return bool(self.plain_lyrics)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "LyricsRecord":
        return cls(
            id=item.get("id"),
            track_name=item.get("trackName") or "",
            artist_name=item.get("artistName") or "",
            album_name=item.get("albumName") or "",
            duration=item.get("duration"),
            instrumental=bool(item.get("instrumental", False)),
            plain_lyrics=item.get("plainLyrics") or None,
            synced_lyrics=item.get("syncedLyrics") or None,
        )

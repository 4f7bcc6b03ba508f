from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LyricLine:
    text: str
    start_time: int | None = None  # ms


@dataclass(frozen=True, slots=True)
class KaraokeWord:
    word: str
    # ms since the previous word (or since the line start for the first word)
    relative_time: int


@dataclass(frozen=True, slots=True)
class KaraokeLine:
    words: tuple[KaraokeWord, ...]
    start_time: int = 0


@dataclass(frozen=True, slots=True)
class ParsedLyrics:
    unsynced: tuple[LyricLine, ...] = ()
    synced: tuple[LyricLine, ...] | None = None
    karaoke: tuple[KaraokeLine, ...] | None = None

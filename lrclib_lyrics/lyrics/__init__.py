from __future__ import annotations

from .model import KaraokeLine, KaraokeWord, LyricLine, ParsedLyrics
from .parse import PLACEHOLDER, parse_lyrics, parse_time

__all__ = [
    "KaraokeLine",
    "KaraokeWord",
    "LyricLine",
    "ParsedLyrics",
    "PLACEHOLDER",
    "parse_lyrics",
    "parse_time",
]

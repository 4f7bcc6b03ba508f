from __future__ import annotations

from .errors import LrcLibError, NoResultError, NotFoundError, RequestError
from .lrclib import LrcLibClient
from .types import LyricsRecord, TrackKey

__all__ = [
    "LrcLibClient",
    "LrcLibError",
    "LyricsRecord",
    "NoResultError",
    "NotFoundError",
    "RequestError",
    "TrackKey",
]

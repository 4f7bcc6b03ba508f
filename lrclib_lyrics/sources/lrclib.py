from __future__ import annotations

import logging
import time
from typing import Any

import requests

from lrclib_lyrics import __version__
from lrclib_lyrics.lyrics.model import LyricLine
from lrclib_lyrics.lyrics.parse import PLACEHOLDER, parse_lyrics

from .errors import LrcLibError, NoResultError, NotFoundError, RequestError
from .types import LyricsRecord, TrackKey

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://lrclib.net/api"
INSTRUMENTAL_TEXT = "♪ Instrumental ♪"


class LrcLibClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout_s: float = 10.0,
        max_retries: int = 3,
        backoff_base_s: float = 1.0,
        placeholder: str = PLACEHOLDER,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.max_retries = max(max_retries, 1)
        self.backoff_base_s = backoff_base_s
        self.placeholder = placeholder
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent or f"lrclib-lyrics v{__version__}"})

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        for attempt in range(1, self.max_retries + 1):
            try:
                r = self.session.get(url, params=params, timeout=self.timeout_s)
            except requests.RequestException as e:
                logger.warning("lrclib error (attempt %s/%s): %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise RequestError(f"Request error: {e}") from e
                time.sleep(self.backoff_base_s * attempt)
                continue

            if r.status_code == 404:
                raise NotFoundError("Track was not found")
            if not r.ok:
                raise RequestError(f"Request error: {r.status_code} {r.reason}")
            try:
                return r.json()
            except ValueError as e:
                raise RequestError("Response is not valid JSON") from e

        raise RequestError("Request error: no attempts made")

    def get(self, track: TrackKey) -> LyricsRecord:
        params: dict[str, Any] = {
            "track_name": track.title,
            "artist_name": track.artist,
        }
        if track.album:
            params["album_name"] = track.album
        if track.duration_ms:
            params["duration"] = track.duration_ms / 1000
        return LyricsRecord.from_api(self._get_json("/get", params))

    def get_by_id(self, lyrics_id: int) -> LyricsRecord:
        return LyricsRecord.from_api(self._get_json(f"/get/{lyrics_id}"))

    def search(
        self,
        *,
        q: str | None = None,
        track_name: str | None = None,
        artist_name: str | None = None,
        album_name: str | None = None,
    ) -> list[LyricsRecord]:
        """
        Search lyrics via /api/search.

        At least one of q or track_name is required.
        """
        if not q and not track_name:
            raise ValueError("At least one of 'q' or 'track_name' must be provided")

        params = {
            k: v
            for k, v in (
                ("q", q),
                ("track_name", track_name),
                ("artist_name", artist_name),
                ("album_name", album_name),
            )
            if v
        }
        data = self._get_json("/search", params)
        if not data:
            raise NoResultError("No result was found")
        return [LyricsRecord.from_api(item) for item in data]

    def lines(self, record: LyricsRecord, *, synced: bool) -> list[LyricLine] | None:
        """
        Parsed lines of one payload of `record`, None if that payload is missing.

        Instrumental records yield a single placeholder line.
        """
        if record.instrumental:
            return [LyricLine(text=INSTRUMENTAL_TEXT)]
        if synced:
            if not record.synced_lyrics:
                return None
            parsed = parse_lyrics(record.synced_lyrics, self.placeholder).synced
            return list(parsed) if parsed is not None else None
        if not record.plain_lyrics:
            return None
        return list(parse_lyrics(record.plain_lyrics, self.placeholder).unsynced)

    def get_synced(self, track: TrackKey) -> list[LyricLine] | None:
        try:
            record = self.get(track)
        except LrcLibError as e:
            logger.error("lrclib: synced lyrics for %s unavailable: %s", track.display, e)
            return None
        return self.lines(record, synced=True)

    def get_unsynced(self, track: TrackKey) -> list[LyricLine] | None:
        try:
            record = self.get(track)
        except LrcLibError as e:
            logger.error("lrclib: plain lyrics for %s unavailable: %s", track.display, e)
            return None
        return self.lines(record, synced=False)

from __future__ import annotations

from dataclasses import dataclass, field

import regex

from .model import KaraokeLine, KaraokeWord, LyricLine, ParsedLyrics

PLACEHOLDER = "♪"

_TS_BODY = r"(\d+):(\d+)(?:\.(\d+))?"
_TS_BODY_RE = regex.compile(_TS_BODY)
_SYNCED_RE = regex.compile(r"\[" + _TS_BODY + r"\]")  # [mm:ss] / [mm:ss.xx] / [mm:ss.xxx]
_KARAOKE_RE = regex.compile(r"<" + _TS_BODY + r">")  # <mm:ss.xx>
_META_TAG_RE = regex.compile(r"\[[A-Za-z]+:[^\]\n]*\]")  # [ar:...], [ti:...], [length:...]

_PLAIN, _BRACKET, _ANGLE = range(3)
_MARKER_CHARS = frozenset("0123456789:.")


@dataclass(frozen=True, slots=True)
class LyricsParseStats:
    lines_total: int
    lines_with_timestamps: int
    placeholder_lines: int
    karaoke_words: int


@dataclass(slots=True)
class _ScannedLine:
    blank: bool
    text: str = ""
    start_time: int | None = None
    # (word, ms) per angle marker; an empty word only moves the timing anchor
    marks: list[tuple[str, int]] = field(default_factory=list)
    tail: str = ""


def parse_time(text: str) -> int | None:
    """
    "mm:ss" / "mm:ss.f" / "mm:ss.fff" -> milliseconds, None if not a timestamp.

    Fraction digits beyond the third are dropped: "27.93" -> 27930, "1.2345" -> 1234.
    """
    m = _TS_BODY_RE.fullmatch(text)
    if m is None:
        return None
    frac = m.group(3) or ""
    return int(m.group(1)) * 60_000 + int(m.group(2)) * 1_000 + int(frac.ljust(3, "0")[:3])


def _scan_line(line: str) -> _ScannedLine:
    out = _ScannedLine(blank=not line.strip())
    if out.blank:
        return out

    plain: list[str] = []
    word: list[str] = []
    marker: list[str] = []
    state = _PLAIN
    leading = True

    def emit(chunk: str) -> None:
        nonlocal leading
        plain.append(chunk)
        word.append(chunk)
        if chunk.strip():
            leading = False

    i = 0
    while i < len(line):
        ch = line[i]
        if state == _PLAIN:
            if ch == "[" or ch == "<":
                state = _BRACKET if ch == "[" else _ANGLE
                marker = [ch]
            else:
                emit(ch)
            i += 1
            continue

        closer = "]" if state == _BRACKET else ">"
        if ch == closer:
            ms = parse_time("".join(marker[1:]))
            if ms is None or (state == _BRACKET and not leading):
                emit("".join(marker) + ch)
            elif state == _BRACKET:
                if out.start_time is None:
                    out.start_time = ms
            else:
                out.marks.append(("".join(word).strip(), ms))
                word = []
            state = _PLAIN
            i += 1
        elif ch in _MARKER_CHARS:
            marker.append(ch)
            i += 1
        else:
            # not a timestamp after all; re-read ch as plain text
            emit("".join(marker))
            state = _PLAIN

    if state != _PLAIN:
        emit("".join(marker))

    out.text = "".join(plain).strip()
    out.tail = "".join(word).strip()
    return out


def _next_start_time(scanned: list[_ScannedLine], idx: int) -> int:
    for nxt in scanned[idx + 1 :]:
        if not nxt.blank:
            return nxt.start_time or 0
    return 0


def _karaoke_line(scanned: list[_ScannedLine], idx: int) -> KaraokeLine | None:
    line = scanned[idx]
    start = line.start_time or 0
    marks = list(line.marks)
    if line.tail:
        marks.append((line.tail, _next_start_time(scanned, idx)))

    words: list[KaraokeWord] = []
    anchor = start
    for w, t_ms in marks:
        if w:
            words.append(KaraokeWord(word=w, relative_time=max(t_ms - anchor, 0)))
        anchor = t_ms

    if not words and line.start_time is None:
        return None
    return KaraokeLine(words=tuple(words), start_time=start)


def parse_lyrics(raw: str, placeholder: str = PLACEHOLDER) -> ParsedLyrics:
    """
    Parse a plain, LRC or karaoke (word-timed) payload.

    The first non-blank line decides the format for the whole payload:
    - `synced` is built only if it carries a [mm:ss.xx] marker
    - `karaoke` is built only if it carries a <mm:ss.xx> marker
    Undetected modes are None, detected modes are lists (possibly empty).
    `unsynced` always has one entry per line; lines left empty after
    stripping become `placeholder`.

    Never raises.
    """
    doc, _stats = parse_lyrics_with_stats(raw, placeholder)
    return doc


def parse_lyrics_with_stats(raw: str, placeholder: str = PLACEHOLDER) -> tuple[ParsedLyrics, LyricsParseStats]:
    lines = _META_TAG_RE.sub("", raw or "").strip().splitlines()

    first = next((ln for ln in lines if ln.strip()), "")
    synced_mode = _SYNCED_RE.search(first) is not None
    karaoke_mode = _KARAOKE_RE.search(first) is not None

    scanned = [_scan_line(ln) for ln in lines]

    unsynced: list[LyricLine] = []
    synced: list[LyricLine] = []
    karaoke: list[KaraokeLine] = []
    placeholders = 0

    for idx, line in enumerate(scanned):
        text = line.text
        if not text:
            text = placeholder
            placeholders += 1

        unsynced.append(LyricLine(text=text))
        if synced_mode and line.start_time is not None:
            synced.append(LyricLine(text=text, start_time=line.start_time))
        if karaoke_mode:
            kl = _karaoke_line(scanned, idx)
            if kl is not None:
                karaoke.append(kl)

    doc = ParsedLyrics(
        unsynced=tuple(unsynced),
        synced=tuple(synced) if synced_mode else None,
        karaoke=tuple(karaoke) if karaoke_mode else None,
    )
    stats = LyricsParseStats(
        lines_total=len(lines),
        lines_with_timestamps=sum(1 for ln in scanned if ln.start_time is not None),
        placeholder_lines=placeholders,
        karaoke_words=sum(len(kl.words) for kl in karaoke),
    )
    return doc, stats

from __future__ import annotations

import json

from .model import LyricLine, ParsedLyrics


def _line_dict(line: LyricLine) -> dict[str, object]:
    out: dict[str, object] = {"text": line.text}
    if line.start_time is not None:
        out["start_time"] = line.start_time
    return out


def export_json(doc: ParsedLyrics) -> str:
    return json.dumps(
        {
            "unsynced": [_line_dict(ln) for ln in doc.unsynced],
            "synced": None if doc.synced is None else [_line_dict(ln) for ln in doc.synced],
            "karaoke": None
            if doc.karaoke is None
            else [
                {
                    "start_time": kl.start_time,
                    "words": [{"word": w.word, "relative_time": w.relative_time} for w in kl.words],
                }
                for kl in doc.karaoke
            ],
        },
        ensure_ascii=False,
        indent=2,
    )


def export_text(doc: ParsedLyrics) -> str:
    out = [ln.text for ln in doc.unsynced]
    return "\n".join(out) + ("\n" if out else "")


def fmt_lrc_time(ms: int) -> str:
    m, rem = divmod(ms, 60_000)
    s, ms2 = divmod(rem, 1_000)
    # keep 2 decimals for compatibility
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(doc: ParsedLyrics) -> str:
    """
    Line-synced LRC. Payloads without timing fall back to plain text.
    """
    if doc.synced is None:
        return export_text(doc)
    out = [f"[{fmt_lrc_time(ln.start_time or 0)}]{ln.text}" for ln in doc.synced]
    return "\n".join(out) + ("\n" if out else "")


def _fmt_srt_time(ms: int) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(doc: ParsedLyrics, last_line_duration_ms: int = 2000) -> str:
    """
    End time is next start time, last line ends at +last_line_duration_ms.
    """
    ev = doc.synced or ()
    if not ev:
        return ""
    out: list[str] = []
    for i, ln in enumerate(ev, start=1):
        start = ln.start_time or 0
        if i < len(ev):
            end = max(ev[i].start_time or 0, start + 1)
        else:
            end = start + last_line_duration_ms
        out.append(str(i))
        out.append(f"{_fmt_srt_time(start)} --> {_fmt_srt_time(end)}")
        out.append(ln.text)
        out.append("")
    return "\n".join(out)

from __future__ import annotations

import json
from pathlib import Path

import typer

from lrclib_lyrics.challenge.errors import ChallengeAborted, InvalidChallengeError
from lrclib_lyrics.challenge.solver import ChallengeWorker
from lrclib_lyrics.config import AppConfig, load_config
from lrclib_lyrics.logging_setup import setup_logging
from lrclib_lyrics.lyrics.export import export_json, export_lrc, export_srt, export_text, fmt_lrc_time
from lrclib_lyrics.lyrics.parse import parse_lyrics, parse_lyrics_with_stats
from lrclib_lyrics.sources.errors import LrcLibError, NoResultError, NotFoundError
from lrclib_lyrics.sources.lrclib import LrcLibClient
from lrclib_lyrics.sources.types import TrackKey


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.callback()
def _main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    setup_logging(debug)


def _client(cfg: AppConfig) -> LrcLibClient:
    return LrcLibClient(
        base_url=cfg.api_url,
        timeout_s=cfg.api_timeout_s,
        max_retries=cfg.api_max_retries,
        backoff_base_s=cfg.api_backoff_base_s,
        placeholder=cfg.placeholder,
    )


@app.command()
def parse(lyrics_path: Path):
    """Parse a lyrics file and print stats."""
    cfg = load_config()
    text = lyrics_path.read_text(encoding="utf-8")
    doc, stats = parse_lyrics_with_stats(text, cfg.placeholder)
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
    typer.echo(f"placeholder_lines={stats.placeholder_lines}")
    typer.echo(f"karaoke_words={stats.karaoke_words}")
    typer.echo(f"synced={'yes' if doc.synced is not None else 'no'}")
    typer.echo(f"karaoke={'yes' if doc.karaoke is not None else 'no'}")


@app.command()
def export(
    lyrics_path: Path,
    fmt: str = typer.Option("json", "--format", case_sensitive=False, help="json|lrc|srt|txt"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Export lyrics to JSON/LRC/SRT/plain text."""
    cfg = load_config()
    doc = parse_lyrics(lyrics_path.read_text(encoding="utf-8"), cfg.placeholder)
    fmt_l = fmt.lower()
    if fmt_l == "json":
        data = export_json(doc) + "\n"
    elif fmt_l == "lrc":
        data = export_lrc(doc)
    elif fmt_l == "srt":
        data = export_srt(doc)
    elif fmt_l == "txt":
        data = export_text(doc)
    else:
        raise typer.BadParameter("format must be one of: json, lrc, srt, txt")

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def solve(
    prefix: str,
    target: str,
    timeout: float | None = typer.Option(None, "--timeout", help="Give up after this many seconds"),
    token: bool = typer.Option(False, "--token", help="Print prefix:nonce instead of the bare nonce"),
):
    """
    Solve a proof-of-work challenge (prefix + 64-char hex target).
    """
    if timeout is not None and timeout <= 0:
        raise typer.BadParameter("must be > 0", param_hint="--timeout")
    cfg = load_config()
    worker = ChallengeWorker(
        timeout_s=timeout if timeout is not None else cfg.solver_timeout_s,
        check_interval=cfg.solver_check_interval,
    )
    try:
        try:
            nonce = worker.submit(prefix, target).result()
        except KeyboardInterrupt:
            worker.cancel()
            raise
    except InvalidChallengeError as e:
        raise typer.BadParameter(str(e), param_hint="TARGET") from e
    except ChallengeAborted as e:
        typer.echo(f"Error: {e} ({e.nonces_tried} nonces tried)", err=True)
        raise typer.Exit(code=1) from e
    finally:
        worker.shutdown()

    typer.echo(f"{prefix}:{nonce}" if token else nonce)


@app.command()
def get(
    track: str = typer.Option(..., "--track", "-t", help="Track name"),
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    album: str = typer.Option("", "--album", help="Album name"),
    duration_ms: int | None = typer.Option(None, "--duration-ms", help="Track duration in milliseconds"),
    plain: bool = typer.Option(False, "--plain", help="Print plain lyrics even if synced ones exist"),
):
    """Fetch lyrics for a track and print them."""
    cfg = load_config()
    key = TrackKey(artist=artist, title=track, album=album, duration_ms=duration_ms)
    client = _client(cfg)

    try:
        record = client.get(key)
    except NotFoundError:
        record = None
    except LrcLibError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    lines = None
    if record is not None:
        # synced mode may be detected with no timed lines; fall back to plain then
        lines = None if plain else client.lines(record, synced=True)
        if not lines:
            lines = client.lines(record, synced=False)
    if not lines:
        typer.echo(f"No lyrics found for {key.display}", err=True)
        raise typer.Exit(code=1)

    for ln in lines:
        if ln.start_time is not None:
            typer.echo(f"[{fmt_lrc_time(ln.start_time)}] {ln.text}")
        else:
            typer.echo(ln.text)


@app.command()
def search(
    q: str | None = typer.Option(None, "--query", "-q", help="Search keyword in any field"),
    track: str | None = typer.Option(None, "--track", "-t", help="Search in track name"),
    artist: str | None = typer.Option(None, "--artist", "-a", help="Search in artist name"),
    album: str | None = typer.Option(None, "--album", help="Search in album name"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum results to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Search for lyrics in the lrclib database.

    At least one of --query or --track must be provided.
    """
    if not q and not track:
        typer.echo("Error: At least one of --query or --track must be provided", err=True)
        raise typer.Exit(code=1)

    cfg = load_config()
    try:
        results = _client(cfg).search(q=q, track_name=track, artist_name=artist, album_name=album)
    except NoResultError:
        results = []
    except LrcLibError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if not results:
        typer.echo("No results found")
        return

    results = results[:limit]

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": r.id,
                        "track_name": r.track_name,
                        "artist_name": r.artist_name,
                        "album_name": r.album_name,
                        "duration": r.duration,
                        "instrumental": r.instrumental,
                        "has_synced_lyrics": r.has_synced_lyrics,
                        "has_plain_lyrics": r.has_plain_lyrics,
                    }
                    for r in results
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    for i, r in enumerate(results, 1):
        synced = "✓" if r.has_synced_lyrics else "✗"
        plain = "✓" if r.has_plain_lyrics else "✗"
        duration_str = f"{int(r.duration) // 60}:{int(r.duration) % 60:02d}" if r.duration else "?"
        inst_str = " [instrumental]" if r.instrumental else ""
        typer.echo(f"{i}. {r.artist_name} - {r.track_name} ({duration_str}){inst_str}")
        if r.album_name:
            typer.echo(f"   Album: {r.album_name}")
        typer.echo(f"   Synced: {synced}  Plain: {plain}")
        if r.id:
            typer.echo(f"   ID: {r.id}")
        typer.echo()


def main() -> None:
    app()


if __name__ == "__main__":
    main()

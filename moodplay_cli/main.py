"""MoodPlay CLI - Main entry point."""

import asyncio
import sys
from pathlib import Path

import click
from rich.table import Table

from moodplay_core.config import get_settings
from moodplay_core.core.logging import setup_logging
from moodplay_core.emotion.base import Emotion
from moodplay_core.tracks.audius import AudiusTrackProvider
from moodplay_core.tracks.base import MOOD_GENRES, TrackFetchError
from moodplay_core.tracks.static import StaticTrackProvider

from . import __version__
from .output import console, print_error, print_json, print_report, print_success, print_tracks
from .replay import load_ticks, replay_session

EMOTION_CHOICES = click.Choice([e.value for e in Emotion], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="moodplay")
@click.option("--log-level", envvar="LOG_LEVEL", default="WARNING",
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Log level")
@click.option("--log-format", type=click.Choice(["json", "pretty", "simple"]), default="simple",
              help="Log output format")
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_format: str):
    """MoodPlay CLI - Emotion-driven music sessions from the command line.

    \b
    Examples:
      moodplay genres
      moodplay search happy --count 5
      moodplay replay session.json --offline
    """
    ctx.ensure_object(dict)
    settings = get_settings()
    setup_logging(level=log_level.upper(), format=log_format, service_name=settings.service_name)
    ctx.obj["settings"] = settings


@cli.command("genres")
def genres():
    """Show the genre keywords searched for each mood."""
    table = Table(title="Mood Genres", show_header=True, header_style="bold cyan")
    table.add_column("Mood", style="cyan")
    table.add_column("Genres")

    for emotion, keywords in MOOD_GENRES.items():
        table.add_row(emotion.value, ", ".join(keywords))

    console.print(table)


@cli.command("search")
@click.argument("mood", type=EMOTION_CHOICES)
@click.option("--count", "-n", default=3, show_default=True, type=click.IntRange(1, 50),
              help="Number of tracks")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def search(ctx: click.Context, mood: str, count: int, as_json: bool):
    """Find tracks for a mood on Audius."""
    settings = ctx.obj["settings"]

    async def run():
        provider = AudiusTrackProvider(settings.tracks)
        try:
            return await provider.fetch_tracks_for_mood(Emotion(mood.lower()), count)
        finally:
            await provider.close()

    try:
        tracks = asyncio.run(run())
    except TrackFetchError as e:
        print_error(f"Search failed: {e.message}")
        sys.exit(1)

    rows = [t.to_dict() for t in tracks]
    if as_json:
        print_json(rows)
    elif rows:
        print_tracks(rows, title=f"Tracks for {mood.lower()}")
    else:
        console.print(f"No music found for {mood.lower()} mood")


@cli.command("replay")
@click.argument("feed", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--offline", is_flag=True, help="Use the built-in demo catalogue instead of Audius")
@click.option("--interval-ms", default=500.0, show_default=True,
              help="Spacing for ticks without a timestamp")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def replay(ctx: click.Context, feed: Path, offline: bool, interval_ms: float, as_json: bool):
    """Replay a recorded emotion feed and print the queue and session report.

    FEED is a JSON list of {"emotion", "confidence", "timestamp_ms"} objects.
    """
    settings = ctx.obj["settings"]

    try:
        ticks = load_ticks(feed, interval_ms=interval_ms)
    except ValueError as e:
        print_error(f"Invalid feed: {e}")
        sys.exit(1)

    async def run():
        if offline:
            provider = StaticTrackProvider.demo(settings.tracks.tracks_per_mood)
        else:
            provider = AudiusTrackProvider(settings.tracks)
        try:
            return await replay_session(ticks, provider, settings)
        finally:
            await provider.close()

    result = asyncio.run(run())

    if as_json:
        print_json(result)
        return

    print_success(f"Replayed {len(ticks)} ticks")
    for note in result["notifications"]:
        if note["type"] in ("music.fetch_failed", "music.no_tracks_found", "playback.failed"):
            print_error(f"{note['type']}: {note.get('message', note.get('emotion', ''))}")

    queue = result["queue"]
    print_tracks(queue["tracks"], title="Queue", current_index=queue["current_index"])
    print_report(result["report"])


if __name__ == "__main__":
    cli()

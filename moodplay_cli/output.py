"""Output formatting utilities."""

import json
from typing import Any, Dict, List

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from moodplay_core.analytics.reports import format_track_time

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")


def print_json(data: Any) -> None:
    """Print plain JSON so the output stays machine-readable."""
    click.echo(json.dumps(data, indent=2, default=str))


def print_tracks(tracks: List[Dict[str, Any]], title: str = "Tracks", current_index: int = -1) -> None:
    if not tracks:
        console.print("[dim]No tracks[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Length", justify="right")

    for i, track in enumerate(tracks):
        marker = "▶ " if i == current_index else ""
        table.add_row(
            f"{marker}{i + 1}",
            escape(track["title"]),
            escape(track["artist"]),
            format_track_time(track["duration_seconds"]),
        )

    console.print(table)


def print_report(report: Dict[str, Any]) -> None:
    summary = Table(title="Session Summary", show_header=False)
    summary.add_column("Field", style="cyan")
    summary.add_column("Value")
    summary.add_row("Duration", report["duration"])
    summary.add_row("Detections", str(report["total_detections"]))
    summary.add_row("Emotion changes", str(report["emotion_changes"]))
    console.print(summary)

    if report["distribution"]:
        distribution = Table(title="Emotion Distribution", header_style="bold cyan")
        distribution.add_column("Emotion")
        distribution.add_column("Count", justify="right")
        distribution.add_column("Share", justify="right")
        for row in report["distribution"]:
            distribution.add_row(row["emotion"], str(row["count"]), f"{row['percentage']:.1f}%")
        console.print(distribution)

    styles = {"positive": "green", "neutral": "blue", "concern": "yellow"}
    for insight in report["insights"]:
        style = styles.get(insight["kind"], "white")
        console.print(f"[{style}]●[/{style}] [bold]{insight['title']}[/bold]")
        console.print(f"  {insight['description']}")
        console.print(f"  [dim]{insight['recommendation']}[/dim]")

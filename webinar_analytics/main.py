"""CLI interface for webinar analytics"""

import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from .config import config
from .models import AnalyticsResult
from .processors.analytics_service import AnalyticsService
from .storage import database

app = typer.Typer(
    name="webinar-analytics",
    help="Speaker, engagement and transcript analytics for recorded webinars",
)
console = Console()


def _setup_logging():
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _exit_on_failure(result: AnalyticsResult):
    if not result.ok:
        console.print(f"[red]Error ({result.status}):[/red] {result.message}", style="bold")
        raise typer.Exit(1)


@app.callback()
def main():
    """Configure logging before any command runs"""
    _setup_logging()


@app.command("init-db")
def init_db():
    """Create the database tables

    Example:
        python -m webinar_analytics.main init-db
    """
    database.init_database()
    console.print("[bold green]✓ Database initialized[/bold green]")


@app.command()
def speakers(
    webinar_id: str = typer.Argument(..., help="Webinar ID"),
    presenter_id: str = typer.Option(..., "--presenter-id", "-p", help="Owning presenter's user ID"),
):
    """Show per-speaker analytics for a webinar

    Example:
        python -m webinar_analytics.main speakers WEBINAR_ID -p USER_ID
    """
    result = AnalyticsService().get_speaker_analytics(webinar_id, presenter_id)
    _exit_on_failure(result)

    data = result.data
    table = Table(title=f"Speakers ({data.total_speakers}) - total {data.total_duration}")
    table.add_column("Speaker")
    table.add_column("Time", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Turns", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Sentiment", justify="right")

    for speaker in data.speakers:
        table.add_row(
            speaker.name,
            speaker.formatted_time,
            f"{speaker.speaking_percentage}%",
            str(speaker.turns),
            f"{speaker.avg_confidence}%",
            f"{speaker.avg_sentiment:+.2f}",
        )

    console.print(table)


@app.command()
def timeline(
    webinar_id: str = typer.Argument(..., help="Webinar ID"),
    presenter_id: str = typer.Option(..., "--presenter-id", "-p", help="Owning presenter's user ID"),
):
    """Show the engagement timeline for a webinar

    Example:
        python -m webinar_analytics.main timeline WEBINAR_ID -p USER_ID
    """
    result = AnalyticsService().get_engagement_timeline(webinar_id, presenter_id)
    _exit_on_failure(result)

    if not result.data:
        console.print("[yellow]No transcript segments for this webinar[/yellow]")
        return

    table = Table(title="Engagement timeline")
    table.add_column("Time")
    table.add_column("Segments", justify="right")
    table.add_column("Speakers", justify="right")
    table.add_column("Sentiment", justify="right")
    table.add_column("Engagement", justify="right")

    for point in result.data:
        table.add_row(
            point.time,
            str(point.segment_count),
            str(point.speaker_count),
            f"{point.sentiment:+.2f}",
            f"{point.engagement:.0%}",
        )

    console.print(table)


@app.command()
def export(
    webinar_id: str = typer.Argument(..., help="Webinar ID"),
    presenter_id: str = typer.Option(..., "--presenter-id", "-p", help="Owning presenter's user ID"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output text file (default: print to stdout)"
    ),
):
    """Export a webinar transcript as plain text

    Example:
        python -m webinar_analytics.main export WEBINAR_ID -p USER_ID -o transcript.txt
    """
    result = AnalyticsService().get_transcript_for_download(webinar_id, presenter_id)
    _exit_on_failure(result)

    document = result.data.document
    if output is None:
        console.print(document, markup=False, highlight=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document, encoding="utf-8")
    console.print(f"[bold green]✓ Transcript saved to {output.absolute()}[/bold green]")


if __name__ == "__main__":
    app()

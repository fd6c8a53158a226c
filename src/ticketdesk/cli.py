"""CLI entry point for TicketDesk."""

from __future__ import annotations

import os
from datetime import UTC, datetime

import click

from ticketdesk import __version__
from ticketdesk.logging import setup_logging
from ticketdesk.tickets.priority import assess_priority

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

RATING = click.IntRange(1, 5)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """TicketDesk - client ticketing dashboard."""
    pass


@main.command()
@click.option(
    "--host",
    default=lambda: os.environ.get("TICKETDESK_HOST", DEFAULT_HOST),
    show_default=f"$TICKETDESK_HOST or {DEFAULT_HOST}",
    help="Interface to bind",
)
@click.option(
    "--port",
    type=int,
    default=lambda: int(os.environ.get("TICKETDESK_PORT", DEFAULT_PORT)),
    show_default=f"$TICKETDESK_PORT or {DEFAULT_PORT}",
    help="Port to listen on",
)
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: $TICKETDESK_LOG_LEVEL or INFO)",
)
def serve(host: str, port: int, log_level: str | None) -> None:
    """Serve the dashboard API."""
    import uvicorn  # noqa: PLC0415

    setup_logging(level=log_level)
    uvicorn.run("ticketdesk.api.app:app", host=host, port=port, log_level="info")


@main.command()
@click.argument("q1", type=RATING)
@click.argument("q2", type=RATING)
@click.argument("q3", type=RATING)
@click.argument("q4", type=RATING)
def priority(q1: int, q2: int, q3: int, q4: int) -> None:
    """Show the priority score, level and deadline for four 1-5 ratings.

    Q1 business impact, Q2 users affected, Q3 blocker, Q4 turnaround.
    """
    assessment = assess_priority(q1, q2, q3, q4, created_at=datetime.now(UTC))
    click.echo(f"Score:    {assessment.score}")
    click.echo(f"Level:    {assessment.level.value}")
    click.echo(f"Deadline: {assessment.deadline.isoformat()}")


if __name__ == "__main__":
    main()

"""Lateness Evaluator - is a ticket overdue, and how many days are left."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from ticketdesk.tickets.models import TicketStatus

if TYPE_CHECKING:
    from ticketdesk.tickets.models import Ticket

# Statuses whose deadline is still being chased
ACTIVE_STATUSES = frozenset({TicketStatus.IN_PROGRESS, TicketStatus.TO_PROCESS, TicketStatus.NEW})


def parse_instant(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or instant. Naive values are taken as UTC.

    Returns None for empty or unparsable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def is_late(ticket: Ticket, now: datetime | None = None) -> bool:
    """Whether the ticket is overdue.

    OVERDUE is always late; active statuses are late once the deadline has
    passed; STANDBY and DONE never are.
    """
    if ticket.status == TicketStatus.OVERDUE:
        return True
    if ticket.status not in ACTIVE_STATUSES:
        return False
    deadline = parse_instant(ticket.deadline)
    if deadline is None:
        return False
    return (now or datetime.now(UTC)) > deadline


def days_remaining(deadline: str | None, now: datetime | None = None) -> int | None:
    """Whole days until the deadline, truncated toward zero; negative once overdue."""
    parsed = parse_instant(deadline)
    if parsed is None:
        return None
    return int((parsed - (now or datetime.now(UTC))) / timedelta(days=1))

"""Tickets - Domain model, priority/deadline engine and lateness evaluation."""

from ticketdesk.tickets.lateness import days_remaining, is_late, parse_instant
from ticketdesk.tickets.models import (
    Client,
    EmailStatus,
    PriorityLevel,
    Project,
    ProjectStatus,
    Ticket,
    TicketStatus,
    TicketType,
)
from ticketdesk.tickets.priority import (
    PriorityAssessment,
    assess_priority,
    compute_deadline,
    compute_priority_level,
    compute_priority_score,
    preview_priority,
)

__all__ = [
    "Client",
    "EmailStatus",
    "PriorityAssessment",
    "PriorityLevel",
    "Project",
    "ProjectStatus",
    "Ticket",
    "TicketStatus",
    "TicketType",
    "assess_priority",
    "compute_deadline",
    "compute_priority_level",
    "compute_priority_score",
    "days_remaining",
    "is_late",
    "parse_instant",
    "preview_priority",
]

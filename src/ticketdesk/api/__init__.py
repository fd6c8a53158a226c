"""REST API for TicketDesk."""

from ticketdesk.api.app import app, create_app
from ticketdesk.api.models import (
    APIResponse,
    DashboardResponse,
    SessionResponse,
    TicketResponse,
)

__all__ = [
    "APIResponse",
    "DashboardResponse",
    "SessionResponse",
    "TicketResponse",
    "app",
    "create_app",
]

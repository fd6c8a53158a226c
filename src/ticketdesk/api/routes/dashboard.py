"""Dashboard endpoint: the authenticated client's projects and tickets."""

from fastapi import APIRouter, Query

from ticketdesk.api.dependencies import ResolverDep
from ticketdesk.api.models import (
    APIResponse,
    DashboardResponse,
    client_to_response,
    project_to_response,
    ticket_to_response,
)
from ticketdesk.resolution import NotAuthenticatedError

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=APIResponse[DashboardResponse])
def get_dashboard(
    resolver: ResolverDep,
    search: str | None = Query(None, description="Filter tickets by title or description"),
) -> APIResponse[DashboardResponse]:
    """Get projects and tickets, optionally filtered by a search term."""
    snapshot = resolver.snapshot()
    if snapshot.client is None:
        raise NotAuthenticatedError("No client is logged in")

    tickets = snapshot.tickets
    term = (search or "").strip().lower()
    if term:
        tickets = [
            t for t in tickets if term in t.title.lower() or term in t.description.lower()
        ]

    return APIResponse(
        data=DashboardResponse(
            client=client_to_response(snapshot.client),
            projects=[project_to_response(p) for p in snapshot.projects],
            tickets=[ticket_to_response(t, snapshot.projects) for t in tickets],
        )
    )

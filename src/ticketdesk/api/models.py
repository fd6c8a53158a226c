"""Pydantic models for the dashboard REST API."""

from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ticketdesk.resolution.models import ResolutionState
from ticketdesk.session_store.models import ActivitySignal
from ticketdesk.tickets.lateness import days_remaining, is_late
from ticketdesk.tickets.models import (
    EmailStatus,
    PriorityLevel,
    ProjectStatus,
    TicketStatus,
    TicketType,
)

if TYPE_CHECKING:
    from ticketdesk.intake import IntakeWizard
    from ticketdesk.resolution.models import DeskSnapshot
    from ticketdesk.tickets.models import Client, Project, Ticket

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Workspace models


class ClientResponse(BaseModel):
    """Response model for the authenticated client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    first_name: str
    last_name: str
    email: str
    company: str
    email_status: EmailStatus
    project_ids: list[str]


class ProjectResponse(BaseModel):
    """Response model for a project."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    client_id: str
    manager_id: str
    status: ProjectStatus
    ticket_ids: list[str]
    ticket_count: int


class TicketResponse(BaseModel):
    """Response model for a ticket, with its lateness evaluated."""

    id: str
    title: str
    description: str
    type: TicketType
    project_id: str
    project_name: str
    client_id: str
    freelancer_id: str | None
    q1: int
    q2: int
    q3: int
    q4: int
    priority_score: float
    priority_level: PriorityLevel
    created_at: str
    deadline: str
    status: TicketStatus
    notes: str | None
    is_late: bool
    days_remaining: int | None


class SessionResponse(BaseModel):
    """Where the resolution flow stands."""

    state: ResolutionState
    loading: bool
    client: ClientResponse | None
    location: str


class DashboardResponse(BaseModel):
    """Projects and tickets of the authenticated client."""

    client: ClientResponse
    projects: list[ProjectResponse]
    tickets: list[TicketResponse]


def client_to_response(client: "Client") -> ClientResponse:
    """Convert a Client to ClientResponse."""
    return ClientResponse.model_validate(client)


def project_to_response(project: "Project") -> ProjectResponse:
    """Convert a Project to ProjectResponse."""
    return ProjectResponse(**asdict(project), ticket_count=len(project.ticket_ids))


def ticket_to_response(
    ticket: "Ticket", projects: "list[Project] | None" = None, now: datetime | None = None
) -> TicketResponse:
    """Convert a Ticket to TicketResponse, naming its project by id when possible."""
    fields: dict[str, Any] = asdict(ticket)
    for project in projects or []:
        if project.id == ticket.project_id:
            fields["project_name"] = project.name
            break
    return TicketResponse(
        **fields,
        is_late=is_late(ticket, now=now),
        days_remaining=days_remaining(ticket.deadline, now=now),
    )


def snapshot_to_session(snapshot: "DeskSnapshot") -> SessionResponse:
    """Convert a DeskSnapshot to SessionResponse."""
    return SessionResponse(
        state=snapshot.state,
        loading=snapshot.loading,
        client=client_to_response(snapshot.client) if snapshot.client else None,
        location=snapshot.location.url,
    )


# Session requests


class MountRequest(BaseModel):
    """Request model for opening the dashboard at a location."""

    location: str = Field(default="/", max_length=2048)


class LoginRequest(BaseModel):
    """Request model for logging in by email."""

    email: str = Field(..., min_length=3, max_length=320)


class ActivityRequest(BaseModel):
    """Request model for a user-activity signal."""

    signal: ActivitySignal


class ActivityResponse(BaseModel):
    """Whether the activity refreshed the session."""

    refreshed: bool


class VisibilityRequest(BaseModel):
    """Request model for a page visibility change."""

    visible: bool


class VisibilityResponse(BaseModel):
    """Whether a reconciliation was scheduled."""

    scheduled: bool


# Intake models


class IntakeDetailsRequest(BaseModel):
    """Step 1 fields. Validated by the wizard so errors come back per field."""

    title: str | None = None
    description: str | None = None
    type: str | None = None
    project_id: str | None = None


class IntakeAnswersRequest(BaseModel):
    """Step 2 ratings."""

    q1: int | None = None
    q2: int | None = None
    q3: int | None = None
    q4: int | None = None


class PreviewResponse(BaseModel):
    """Live priority score and level."""

    score: float
    level: PriorityLevel


class IntakeStateResponse(BaseModel):
    """Current wizard state."""

    step: str
    details: dict[str, Any] | None
    answers: dict[str, int]
    preview: PreviewResponse
    ticket: TicketResponse | None


def wizard_to_response(wizard: "IntakeWizard", projects: "list[Project]") -> IntakeStateResponse:
    """Convert the wizard state to IntakeStateResponse."""
    score, level = wizard.preview()
    details = wizard.details
    ticket = wizard.created_ticket
    return IntakeStateResponse(
        step=wizard.step.value,
        details=details.model_dump(mode="json") if details else None,
        answers=wizard.answers,
        preview=PreviewResponse(score=score, level=level),
        ticket=ticket_to_response(ticket, projects) if ticket else None,
    )

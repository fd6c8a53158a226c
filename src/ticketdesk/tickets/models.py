"""Domain models for clients, projects and tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class _WireEnum(StrEnum):
    """StrEnum whose values are the Integration Endpoint's wire strings.

    Lookup also accepts the member name, ignoring case and separators, so
    "in_progress" and "InProgress" resolve like "En cours".
    """

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if not isinstance(value, str):
            return None
        folded = value.strip().casefold()
        compact = "".join(ch for ch in folded if ch.isalnum())
        for member in cls:
            if member.value.casefold() == folded:
                return member
            if member.name.replace("_", "").casefold() == compact:
                return member
        return None


class PriorityLevel(_WireEnum):
    """Priority band derived from the intake answers."""

    LOW = "Faible"
    MEDIUM = "Moyenne"
    HIGH = "Forte"


class TicketStatus(_WireEnum):
    """Ticket lifecycle status."""

    NEW = "Nouveau"
    STANDBY = "Stand-By"
    TO_PROCESS = "A traiter"
    IN_PROGRESS = "En cours"
    OVERDUE = "Hors délai"
    DONE = "Traité"


class TicketType(_WireEnum):
    """Kind of request a ticket carries."""

    BUG = "Bug"
    FEATURE = "Nouvelle fonctionnalité"
    SUPPORT = "Support"
    DESIGN = "Design"
    DEVELOPMENT = "Développement"


class ProjectStatus(_WireEnum):
    """Project lifecycle status."""

    IN_PROGRESS = "En cours"
    DONE = "Terminé"
    PAUSED = "En pause"


class EmailStatus(_WireEnum):
    """Deliverability of the client's email address."""

    VALID = "Valid"
    INVALID = "Invalid"
    PENDING_UPDATE = "En attente de mise à jour"


@dataclass
class Client:
    """Identity record of an authenticated client."""

    id: str
    last_name: str = ""
    first_name: str = ""
    email: str = ""
    company: str = ""
    email_status: EmailStatus = EmailStatus.VALID
    project_ids: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Display name, "First Last"."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass
class Project:
    """A project owned by a client."""

    id: str
    name: str
    client_id: str
    description: str = ""
    manager_id: str = ""
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    ticket_ids: list[str] = field(default_factory=list)


@dataclass
class Ticket:
    """A support ticket.

    Dates are ISO-8601 strings as exchanged with the Integration Endpoint.
    """

    id: str
    title: str
    description: str
    type: TicketType
    project_id: str
    client_id: str
    q1: int
    q2: int
    q3: int
    q4: int
    priority_score: float
    priority_level: PriorityLevel
    created_at: str
    deadline: str
    status: TicketStatus = TicketStatus.NEW
    project_name: str = ""
    freelancer_id: str | None = None
    notes: str | None = None


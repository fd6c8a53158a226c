"""Wire payloads exchanged with the Integration Endpoint.

The client-data response arrives in one of two shapes:

Nested::

    {"found": true,
     "client": {"id": "cli_1", "email": "...", ...},
     "projects": [...] | "<JSON string>",
     "tickets": [...] | "<JSON string>"}

Flat (identity at top level, ``found`` optional)::

    {"id": "cli_1", "email": "...", "nom": "...", ...,
     "projects": [...] | "<JSON string>",
     "tickets": [...] | "<JSON string>"}

``classify_response`` tags a raw body with its shape and ``parse_client_data``
turns either into the canonical ``ClientData``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

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

logger = logging.getLogger("ticketdesk.integration")

E = TypeVar("E", bound=StrEnum)

_DMY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Keys of the flat shape that are not part of the client record
_COLLECTION_KEYS = ("found", "projects", "tickets")


class ResponseShape(StrEnum):
    """Which of the accepted wire shapes a client-data response has."""

    NESTED = "nested"
    FLAT = "flat"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class RawClientResponse:
    """A client-data response tagged with its shape, before normalization."""

    shape: ResponseShape
    found: bool
    client_record: dict[str, Any] | None
    projects: Any = None
    tickets: Any = None

    @property
    def accepted(self) -> bool:
        """Authoritative if found, or if it carries a usable client identity."""
        if self.client_record is None:
            return False
        return self.found or bool(self.client_record.get("id"))


@dataclass
class ClientData:
    """Canonical result of a client-data fetch."""

    accepted: bool
    client: Client | None = None
    projects: list[Project] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)


# --- Field helpers ---


def normalize_date(value: Any) -> Any:
    """Rewrite DD/MM/YYYY as YYYY-MM-DD; anything else passes through unchanged."""
    if not isinstance(value, str):
        return value
    match = _DMY_PATTERN.match(value.strip())
    if not match:
        return value
    day, month, year = match.groups()
    return f"{year}-{int(month):02d}-{int(day):02d}"


def unwrap_id(value: Any) -> str | None:
    """Linked-record ids sometimes arrive as a one-element list; take the first element."""
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None or value == "":
        return None
    return str(value)


def _id_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and v != ""]
    return []


def _enum_or(enum_cls: type[E], value: Any, default: E) -> E:
    if value is None or value == "":
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug("Unknown %s value %r, using %s", enum_cls.__name__, value, default.name)
        return default


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_list_field(value: Any, field_name: str) -> list[dict[str, Any]]:
    """Accept a list or a JSON-encoded list; anything unusable yields [].

    A JSON parse failure is logged and is not fatal.
    """
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            logger.error("Could not parse %s JSON string: %s", field_name, e)
            return []
    if not isinstance(value, list):
        logger.warning("Ignoring %s: expected a list, got %s", field_name, type(value).__name__)
        return []
    return [item for item in value if isinstance(item, dict)]


# --- Records ---


def client_from_payload(record: dict[str, Any]) -> Client:
    """Build a Client from its wire record."""
    return Client(
        id=_as_str(unwrap_id(record.get("id"))),
        last_name=_as_str(record.get("nom")),
        first_name=_as_str(record.get("prenom")),
        email=_as_str(record.get("email")),
        company=_as_str(record.get("entreprise")),
        email_status=_enum_or(EmailStatus, record.get("statutEmail"), EmailStatus.VALID),
        project_ids=_id_list(record.get("projectIds")),
    )


def normalize_project(record: dict[str, Any], client_id: str) -> Project:
    """Build a Project, filling the defaults the endpoint may omit."""
    return Project(
        id=_as_str(unwrap_id(record.get("id"))),
        name=_as_str(record.get("nom")),
        description=_as_str(record.get("description")),
        client_id=unwrap_id(record.get("clientId")) or client_id,
        manager_id=_as_str(unwrap_id(record.get("chefDeProjetId"))),
        status=_enum_or(ProjectStatus, record.get("statut"), ProjectStatus.IN_PROGRESS),
        ticket_ids=_id_list(record.get("ticketIds")),
    )


def normalize_ticket(record: dict[str, Any]) -> Ticket:
    """Build a Ticket, filling the defaults the endpoint may omit."""
    return Ticket(
        id=_as_str(unwrap_id(record.get("id"))),
        title=_as_str(record.get("titre")),
        description=_as_str(record.get("description")),
        type=_enum_or(TicketType, record.get("type"), TicketType.SUPPORT),
        project_id=_as_str(unwrap_id(record.get("projectId"))),
        project_name=_as_str(record.get("projectName")),
        client_id=_as_str(unwrap_id(record.get("clientId"))),
        freelancer_id=unwrap_id(record.get("freelanceId")),
        q1=_as_int(record.get("q1")),
        q2=_as_int(record.get("q2")),
        q3=_as_int(record.get("q3")),
        q4=_as_int(record.get("q4")),
        priority_score=_as_float(record.get("priorityScore")),
        priority_level=_enum_or(PriorityLevel, record.get("priorityLevel"), PriorityLevel.MEDIUM),
        created_at=_as_str(record.get("createdAt")),
        deadline=_as_str(normalize_date(record.get("deadline"))),
        status=_enum_or(TicketStatus, record.get("statut"), TicketStatus.NEW),
        notes=record.get("notes"),
    )


def ticket_to_payload(ticket: Ticket) -> dict[str, Any]:
    """Serialize a Ticket the way the submission webhook expects it."""
    payload: dict[str, Any] = {
        "id": ticket.id,
        "titre": ticket.title,
        "description": ticket.description,
        "type": ticket.type.value,
        "projectId": ticket.project_id,
        "clientId": ticket.client_id,
        "q1": ticket.q1,
        "q2": ticket.q2,
        "q3": ticket.q3,
        "q4": ticket.q4,
        "priorityScore": ticket.priority_score,
        "priorityLevel": ticket.priority_level.value,
        "createdAt": ticket.created_at,
        "deadline": ticket.deadline,
        "statut": ticket.status.value,
    }
    if ticket.project_name:
        payload["projectName"] = ticket.project_name
    if ticket.freelancer_id:
        payload["freelanceId"] = ticket.freelancer_id
    if ticket.notes:
        payload["notes"] = ticket.notes
    return payload


# --- Response ---


def classify_response(raw: Any) -> RawClientResponse:
    """Tag a decoded response body with its wire shape."""
    if not isinstance(raw, dict):
        return RawClientResponse(shape=ResponseShape.UNRECOGNIZED, found=False, client_record=None)

    found = raw.get("found") is True
    nested = raw.get("client")
    if isinstance(nested, dict):
        return RawClientResponse(
            shape=ResponseShape.NESTED,
            found=found,
            client_record=nested,
            projects=raw.get("projects"),
            tickets=raw.get("tickets"),
        )

    record = {k: v for k, v in raw.items() if k not in _COLLECTION_KEYS and k != "client"}
    if record.get("id") or (found and record):
        return RawClientResponse(
            shape=ResponseShape.FLAT,
            found=found,
            client_record=record,
            projects=raw.get("projects"),
            tickets=raw.get("tickets"),
        )

    return RawClientResponse(
        shape=ResponseShape.UNRECOGNIZED,
        found=found,
        client_record=None,
        projects=raw.get("projects"),
        tickets=raw.get("tickets"),
    )


def parse_client_data(raw: Any) -> ClientData:
    """Normalize any accepted response shape into ClientData.

    Responses that are not accepted yield ClientData(accepted=False).
    """
    tagged = classify_response(raw)
    if not tagged.accepted or tagged.client_record is None:
        return ClientData(accepted=False)

    client = client_from_payload(tagged.client_record)
    projects = [
        normalize_project(record, client.id)
        for record in parse_list_field(tagged.projects, "projects")
    ]
    tickets = [normalize_ticket(record) for record in parse_list_field(tagged.tickets, "tickets")]
    logger.debug(
        "Parsed %s client response: %d project(s), %d ticket(s)",
        tagged.shape,
        len(projects),
        len(tickets),
    )
    return ClientData(accepted=True, client=client, projects=projects, tickets=tickets)

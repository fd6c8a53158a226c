"""Data models for the Client Resolution flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from urllib.parse import parse_qs, urlsplit, urlunsplit

from ticketdesk.tickets.models import Client, Project, Ticket

CLIENT_ID_PARAM = "clientId"


class ResolutionState(StrEnum):
    """Where the flow stands."""

    RESOLVING = "resolving"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Location:
    """The page URL the dashboard was opened with."""

    url: str = "/"

    @property
    def client_id(self) -> str | None:
        """The clientId query parameter, if any."""
        values = parse_qs(urlsplit(self.url).query).get(CLIENT_ID_PARAM)
        if not values or not values[0].strip():
            return None
        return values[0].strip()

    def without_query(self) -> Location:
        """Same location with query string and fragment stripped."""
        parts = urlsplit(self.url)
        return Location(urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", "")))


@dataclass
class DeskSnapshot:
    """Point-in-time copy of the resolved workspace.

    Attributes:
        state: Current resolution state.
        loading: Whether a resolution is in flight.
        client: The authenticated client, if any.
        projects: The client's projects.
        tickets: The client's tickets, newest first.
        location: Current page location.
    """

    state: ResolutionState
    loading: bool
    client: Client | None = None
    projects: list[Project] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)
    location: Location = field(default_factory=Location)

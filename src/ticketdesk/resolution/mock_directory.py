"""Fixed in-memory directory used when the Integration Endpoint cannot answer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from ticketdesk.integration.payloads import ClientData
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


@dataclass
class MockDirectory:
    """Clients with their projects and tickets."""

    clients: list[Client] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)

    def find_client(self, email: str | None = None, client_id: str | None = None) -> Client | None:
        """Match by email (case-insensitive) or by client id."""
        wanted_email = email.strip().casefold() if email else None
        for client in self.clients:
            if wanted_email and client.email.casefold() == wanted_email:
                return client
            if client_id and client.id == client_id:
                return client
        return None

    def lookup(self, email: str | None = None, client_id: str | None = None) -> ClientData | None:
        """Full client data for a match, shaped like an accepted endpoint answer."""
        client = self.find_client(email=email, client_id=client_id)
        if client is None:
            return None
        return ClientData(
            accepted=True,
            client=replace(client, project_ids=list(client.project_ids)),
            projects=[replace(p) for p in self.projects if p.client_id == client.id],
            tickets=[replace(t) for t in self.tickets if t.client_id == client.id],
        )


def build_mock_directory(now: datetime | None = None) -> MockDirectory:
    """Demo data; ticket dates are relative to now so one ticket is always late."""
    now = now or datetime.now(UTC)
    return MockDirectory(
        clients=[
            Client(
                id="cli_1",
                last_name="Dupont",
                first_name="Jean",
                email="jean.dupont@startup.io",
                company="Startup IO",
                email_status=EmailStatus.VALID,
                project_ids=["proj_1", "proj_2"],
            )
        ],
        projects=[
            Project(
                id="proj_1",
                name="Refonte Site Web",
                description="Refonte complète du site vitrine avec React.",
                client_id="cli_1",
                manager_id="pm_1",
                status=ProjectStatus.IN_PROGRESS,
                ticket_ids=["tick_1", "tick_2"],
            ),
            Project(
                id="proj_2",
                name="Application Mobile MVP",
                description="Développement du MVP de l'application mobile.",
                client_id="cli_1",
                manager_id="pm_1",
                status=ProjectStatus.PAUSED,
            ),
        ],
        tickets=[
            Ticket(
                id="tick_1",
                title="Bug affichage menu mobile",
                description="Le menu hamburger ne s'ouvre pas sur iPhone.",
                type=TicketType.BUG,
                project_id="proj_1",
                client_id="cli_1",
                freelancer_id="free_1",
                q1=5,
                q2=5,
                q3=5,
                q4=5,
                priority_score=5.0,
                priority_level=PriorityLevel.HIGH,
                created_at=(now - timedelta(days=3)).isoformat(),
                deadline=(now - timedelta(days=1)).isoformat(),
                status=TicketStatus.IN_PROGRESS,
            ),
            Ticket(
                id="tick_2",
                title="Ajout page contact",
                description="Créer une page de contact avec formulaire.",
                type=TicketType.FEATURE,
                project_id="proj_1",
                client_id="cli_1",
                q1=2,
                q2=1,
                q3=1,
                q4=2,
                priority_score=1.5,
                priority_level=PriorityLevel.LOW,
                created_at=now.isoformat(),
                deadline=(now + timedelta(days=7)).isoformat(),
                status=TicketStatus.NEW,
            ),
        ],
    )

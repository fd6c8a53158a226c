"""Integration tests: resolution and intake against a fake webhook server."""

import json

import httpx
import pytest

from ticketdesk.config import DeskConfig
from ticketdesk.intake import IntakeStep, IntakeWizard
from ticketdesk.integration import IntegrationClient
from ticketdesk.resolution import ClientResolver, ResolutionState
from ticketdesk.session_store import SessionStore
from ticketdesk.tickets import EmailStatus, TicketStatus

TICKET_URL = "https://hook.example.com/tickets"
CLIENT_URL = "https://hook.example.com/clients"


class FakeWebhooks:
    """Records requests and answers like the automation service."""

    def __init__(self, email_status: str = "Valid") -> None:
        self.email_status = email_status
        self.client_requests: list[dict] = []
        self.tickets: list[dict] = []
        self.fail_lookups = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if str(request.url) == TICKET_URL:
            self.tickets.append(body)
            return httpx.Response(200, text="Accepted")

        self.client_requests.append(body)
        if self.fail_lookups:
            return httpx.Response(500, text="Scenario failed")
        if body.get("email") != "alice@acme.test" and body.get("clientId") != "rec_42":
            return httpx.Response(200, json={"found": False})
        # Flat shape with collections serialized as JSON strings
        return httpx.Response(
            200,
            json={
                "found": True,
                "id": "rec_42",
                "nom": "Durand",
                "prenom": "Alice",
                "email": "alice@acme.test",
                "entreprise": "Acme",
                "statutEmail": self.email_status,
                "projectIds": ["rec_p1"],
                "projects": json.dumps(
                    [{"id": "rec_p1", "nom": "Portal", "statut": "En cours", "ticketIds": []}]
                ),
                "tickets": json.dumps(
                    [
                        {
                            "id": "rec_t1",
                            "titre": "Login page slow",
                            "description": "Takes 10s",
                            "type": "Bug",
                            "projectId": ["rec_p1"],
                            "clientId": ["rec_42"],
                            "priorityLevel": "Moyenne",
                            "priorityScore": 3,
                            "statut": "A traiter",
                            "deadline": "31/12/2099",
                        }
                    ]
                ),
            },
        )


@pytest.fixture
def webhooks() -> FakeWebhooks:
    """Fake automation service."""
    return FakeWebhooks()


@pytest.fixture
def integration(webhooks: FakeWebhooks):
    """IntegrationClient whose HTTP transport is the fake service."""
    client = IntegrationClient(ticket_webhook_url=TICKET_URL, client_data_webhook_url=CLIENT_URL)
    client._client = httpx.Client(transport=httpx.MockTransport(webhooks.handler))
    yield client
    client.close()


@pytest.fixture
def store(clock):
    """Create an in-memory SessionStore."""
    s = SessionStore(":memory:", clock=clock)
    yield s
    s.close()


@pytest.fixture
def resolver(integration: IntegrationClient, store: SessionStore, fake_timers) -> ClientResolver:
    """Resolver talking to the fake service."""
    return ClientResolver(integration, store, fake_timers, config=DeskConfig())


@pytest.fixture
def wizard(resolver: ClientResolver) -> IntakeWizard:
    """Wizard wired to the resolver."""
    return IntakeWizard(
        on_create=resolver.submit_ticket, projects=lambda: resolver.snapshot().projects
    )


@pytest.mark.integration
class TestWebhookResolution:
    """Resolution through the client data webhook."""

    def test_link_resolves_from_webhook(
        self, resolver: ClientResolver, webhooks: FakeWebhooks, store: SessionStore
    ) -> None:
        """A clientId link is looked up, normalized and remembered by email."""
        assert resolver.mount("/?clientId=rec_42") == ResolutionState.AUTHENTICATED

        assert webhooks.client_requests[0]["clientId"] == "rec_42"
        assert isinstance(webhooks.client_requests[0]["_t"], int)
        snapshot = resolver.snapshot()
        assert snapshot.client is not None
        assert snapshot.client.name == "Alice Durand"
        assert [p.name for p in snapshot.projects] == ["Portal"]
        assert snapshot.tickets[0].deadline == "2099-12-31"
        assert snapshot.tickets[0].status == TicketStatus.TO_PROCESS
        token = store.load_session()
        assert token is not None
        assert token.email == "alice@acme.test"

    def test_restart_resumes_session(
        self, integration: IntegrationClient, store: SessionStore, fake_timers
    ) -> None:
        """A second resolver over the same store resumes by email."""
        first = ClientResolver(integration, store, fake_timers)
        first.resolve_client(email="alice@acme.test")
        first.close()

        second = ClientResolver(integration, store, fake_timers)

        assert second.mount("/") == ResolutionState.AUTHENTICATED
        assert second.client is not None
        assert second.client.id == "rec_42"

    def test_webhook_outage_uses_mock_directory(
        self, resolver: ClientResolver, webhooks: FakeWebhooks
    ) -> None:
        """A 500 from the service falls back to the demo client."""
        webhooks.fail_lookups = True

        assert resolver.resolve_client(email="jean.dupont@startup.io") is True
        assert resolver.client is not None
        assert resolver.client.id == "cli_1"

    def test_reconcile_during_outage_keeps_client(
        self, resolver: ClientResolver, webhooks: FakeWebhooks, fake_timers
    ) -> None:
        """A visibility re-fetch that hits a 500 keeps the webhook client logged in."""
        resolver.resolve_client(email="alice@acme.test")
        webhooks.fail_lookups = True

        assert resolver.on_visibility_change(True) is True
        fake_timers.run_pending()

        snapshot = resolver.snapshot()
        assert snapshot.state == ResolutionState.AUTHENTICATED
        assert snapshot.client is not None
        assert snapshot.client.id == "rec_42"
        assert [p.name for p in snapshot.projects] == ["Portal"]


@pytest.mark.integration
class TestWebhookTicketCreation:
    """Intake submission through the ticket webhook."""

    def _create(self, wizard: IntakeWizard) -> None:
        wizard.submit_details(
            title="Add SSO",
            description="Log in with Google",
            type="Nouvelle fonctionnalité",
            project_id="rec_p1",
        )
        wizard.submit({"q1": 4, "q2": 4, "q3": 4, "q4": 4})

    def test_ticket_sent_then_reconciled(
        self,
        resolver: ClientResolver,
        wizard: IntakeWizard,
        webhooks: FakeWebhooks,
        fake_timers,
    ) -> None:
        """The new ticket is shown at once, posted in the background, then re-fetched."""
        resolver.resolve_client(email="alice@acme.test")
        lookups_before = len(webhooks.client_requests)

        self._create(wizard)

        assert wizard.step == IntakeStep.CONFIRMATION
        assert resolver.snapshot().tickets[0].title == "Add SSO"
        assert webhooks.tickets == []

        fake_timers.run_pending()

        assert len(webhooks.tickets) == 1
        sent = webhooks.tickets[0]
        assert sent["titre"] == "Add SSO"
        assert sent["clientId"] == "rec_42"
        assert sent["projectName"] == "Portal"
        assert sent["priorityScore"] == 4.0
        assert sent["priorityLevel"] == "Forte"
        assert sent["statut"] == "Nouveau"
        assert len(webhooks.client_requests) == lookups_before + 1

    def test_invalid_email_ticket_on_standby(
        self, resolver: ClientResolver, wizard: IntakeWizard, webhooks: FakeWebhooks, fake_timers
    ) -> None:
        """Clients with an invalid email submit stand-by tickets."""
        webhooks.email_status = "Invalid"
        resolver.resolve_client(email="alice@acme.test")
        assert resolver.client is not None
        assert resolver.client.email_status == EmailStatus.INVALID

        self._create(wizard)
        fake_timers.run_pending()

        assert webhooks.tickets[0]["statut"] == "Stand-By"

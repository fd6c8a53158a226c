"""Fixtures for route tests: a bare app over a real resolver and wizard."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from ticketdesk.api.app import build_wizard
from ticketdesk.api.dependencies import get_resolver, get_wizard
from ticketdesk.api.models import APIResponse
from ticketdesk.api.routes import dashboard, intake, session
from ticketdesk.config import DeskConfig
from ticketdesk.intake import IntakeStepError, IntakeValidationError, IntakeWizard
from ticketdesk.integration import IntegrationClient
from ticketdesk.resolution import ClientResolver, NotAuthenticatedError, build_mock_directory
from ticketdesk.session_store import SessionStore

MOCK_EMAIL = "jean.dupont@startup.io"


@pytest.fixture
def integration() -> MagicMock:
    """Integration client with no webhook answers."""
    mock = MagicMock(spec=IntegrationClient)
    mock.fetch_full_client_data.return_value = None
    return mock


@pytest.fixture
def store(clock):
    """Create an in-memory SessionStore."""
    s = SessionStore(":memory:", clock=clock)
    yield s
    s.close()


@pytest.fixture
def resolver(integration: MagicMock, store: SessionStore, fake_timers) -> ClientResolver:
    """Resolver over the mock directory."""
    return ClientResolver(
        integration=integration,
        session_store=store,
        timers=fake_timers,
        config=DeskConfig(),
        mock_directory=build_mock_directory(datetime(2025, 1, 15, tzinfo=UTC)),
    )


@pytest.fixture
def wizard(resolver: ClientResolver) -> IntakeWizard:
    """Wizard wired to the resolver the way the app wires it."""
    return build_wizard(resolver)


@pytest.fixture
def app(resolver: ClientResolver, wizard: IntakeWizard):
    """Create a test FastAPI app with overridden dependencies."""
    app = FastAPI()

    def override_get_resolver():
        yield resolver

    def override_get_wizard():
        yield wizard

    app.dependency_overrides[get_resolver] = override_get_resolver
    app.dependency_overrides[get_wizard] = override_get_wizard

    @app.exception_handler(IntakeValidationError)
    async def intake_validation_handler(request: Request, exc: IntakeValidationError):
        return JSONResponse(
            status_code=422,
            content=APIResponse[dict](data={"fields": exc.fields}, error=str(exc)).model_dump(),
        )

    @app.exception_handler(IntakeStepError)
    async def intake_step_handler(request: Request, exc: IntakeStepError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=APIResponse[None](data=None, error="Not authenticated").model_dump(),
        )

    app.include_router(session.router, prefix="/api/v1")
    app.include_router(dashboard.router, prefix="/api/v1")
    app.include_router(intake.router, prefix="/api/v1")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def logged_in(client: TestClient) -> TestClient:
    """Client after logging in as the demo client."""
    response = client.post("/api/v1/session/login", json={"email": MOCK_EMAIL})
    assert response.json()["data"]["state"] == "authenticated"
    return client

"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticketdesk import __version__
from ticketdesk.api.dependencies import (
    close_resolver,
    close_wizard,
    init_resolver,
    init_wizard,
)
from ticketdesk.api.models import APIResponse
from ticketdesk.api.routes import dashboard, intake, session
from ticketdesk.config import DeskConfig
from ticketdesk.intake import IntakeStepError, IntakeValidationError, IntakeWizard
from ticketdesk.integration import IntegrationClient
from ticketdesk.resolution import ClientResolver, NotAuthenticatedError
from ticketdesk.session_store import SessionStore
from ticketdesk.timers import TimerRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from ticketdesk.timers import Timers


def build_resolver(config: DeskConfig, timers: Timers | None = None) -> ClientResolver:
    """Wire a ClientResolver with its session store and integration client."""
    session_store = SessionStore(
        db_path=config.session_db_path,
        key=config.session_key,
        inactivity_timeout=config.inactivity_timeout,
    )
    integration = IntegrationClient(
        ticket_webhook_url=config.ticket_webhook_url,
        client_data_webhook_url=config.client_data_webhook_url,
        timeout=config.http_timeout_seconds,
    )
    return ClientResolver(
        integration=integration,
        session_store=session_store,
        timers=timers or TimerRegistry(),
        config=config,
    )


def build_wizard(resolver: ClientResolver) -> IntakeWizard:
    """Wire an IntakeWizard to the resolver's projects and ticket creation.

    The draft is discarded whenever the resolver drops its workspace.
    """
    wizard = IntakeWizard(
        on_create=resolver.submit_ticket,
        projects=lambda: resolver.snapshot().projects,
    )
    resolver.add_reset_listener(wizard.cancel)
    return wizard


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    config = app.state.config if hasattr(app.state, "config") else DeskConfig.from_env()
    timers = app.state.timers if hasattr(app.state, "timers") else None
    resolver = init_resolver(build_resolver(config, timers))
    init_wizard(build_wizard(resolver))

    yield
    # Shutdown
    close_wizard()
    close_resolver()


def create_app(config: DeskConfig | None = None, timers: Timers | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Runtime configuration; read from the environment at startup if omitted
        timers: Scheduler for delayed work; a thread-backed registry if omitted
    """
    app = FastAPI(
        title="TicketDesk API",
        description="REST API for TicketDesk - Client Ticketing Dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    if config is not None:
        app.state.config = config
    if timers is not None:
        app.state.timers = timers

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(IntakeValidationError)
    async def intake_validation_handler(
        _request: Request, exc: IntakeValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=APIResponse[dict](data={"fields": exc.fields}, error=str(exc)).model_dump(),
        )

    @app.exception_handler(IntakeStepError)
    async def intake_step_handler(_request: Request, exc: IntakeStepError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(
        _request: Request, _exc: NotAuthenticatedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=APIResponse[None](data=None, error="Not authenticated").model_dump(),
        )

    # Include routers
    app.include_router(session.router, prefix="/api/v1")
    app.include_router(dashboard.router, prefix="/api/v1")
    app.include_router(intake.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()

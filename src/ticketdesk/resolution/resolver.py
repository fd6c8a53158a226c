"""ClientResolver - turns a URL parameter or stored session into a resolved workspace."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from ticketdesk.config import DeskConfig
from ticketdesk.integration import IntegrationError, parse_client_data
from ticketdesk.resolution.exceptions import NotAuthenticatedError
from ticketdesk.resolution.mock_directory import build_mock_directory
from ticketdesk.resolution.models import DeskSnapshot, Location, ResolutionState
from ticketdesk.session_store import InactivityMonitor
from ticketdesk.tickets.models import EmailStatus, TicketStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketdesk.integration import ClientData, IntegrationClient
    from ticketdesk.resolution.mock_directory import MockDirectory
    from ticketdesk.session_store import ActivitySignal, SessionStore
    from ticketdesk.tickets.models import Client, Project, Ticket
    from ticketdesk.timers import TimerHandle, Timers

logger = logging.getLogger("ticketdesk.resolution")


class ClientResolver:
    """State machine behind the dashboard: Resolving, Unauthenticated, Authenticated.

    Holds the in-memory workspace (client, projects, tickets) and owns the
    side effects around it: session persistence, the inactivity monitor,
    optimistic ticket creation and delayed reconciliation with the
    Integration Endpoint.

    Every resolution takes a generation number; a response that comes back
    after a newer resolution (or a logout) started is discarded.

    Listeners added with add_reset_listener run whenever the workspace is
    dropped: on logout (explicit or through inactivity) and when a different
    client is resolved.
    """

    def __init__(
        self,
        integration: IntegrationClient,
        session_store: SessionStore,
        timers: Timers,
        config: DeskConfig | None = None,
        mock_directory: MockDirectory | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            integration: Client for the Integration Endpoint
            session_store: Where the session token is persisted
            timers: Scheduler for delayed reconciliation and the inactivity check
            config: Runtime configuration (delays, fallback switch)
            mock_directory: Fallback directory; built from demo data if omitted
        """
        self.integration = integration
        self.session_store = session_store
        self.timers = timers
        self.config = config or DeskConfig()
        self.mock_directory = mock_directory or build_mock_directory()
        self.monitor = InactivityMonitor(
            store=session_store,
            timers=timers,
            on_expired=self.logout,
            check_interval=self.config.check_interval_seconds,
        )

        self._lock = threading.RLock()
        self._generation = 0
        self._state = ResolutionState.RESOLVING
        self._loading = True
        self._client: Client | None = None
        self._projects: list[Project] = []
        self._tickets: list[Ticket] = []
        self._location = Location()
        self._reconcile_handles: set[TimerHandle] = set()
        self._reset_listeners: list[Callable[[], None]] = []

    def add_reset_listener(self, callback: Callable[[], None]) -> None:
        """Call callback (outside the resolver lock) whenever the workspace is dropped."""
        self._reset_listeners.append(callback)

    def _notify_reset(self) -> None:
        for callback in list(self._reset_listeners):
            callback()

    # --- Read access ---

    @property
    def state(self) -> ResolutionState:
        with self._lock:
            return self._state

    @property
    def client(self) -> Client | None:
        with self._lock:
            return self._client

    @property
    def is_authenticated(self) -> bool:
        return self.state == ResolutionState.AUTHENTICATED

    def snapshot(self) -> DeskSnapshot:
        """Copy of the current workspace, safe to hand to other threads."""
        with self._lock:
            return DeskSnapshot(
                state=self._state,
                loading=self._loading,
                client=self._client,
                projects=list(self._projects),
                tickets=list(self._tickets),
                location=self._location,
            )

    # --- Transitions ---

    def mount(self, location: str | Location = "/") -> ResolutionState:
        """Initial resolution when the dashboard opens.

        A clientId query parameter wins over a stored session; with neither,
        the flow goes straight to Unauthenticated.
        """
        if isinstance(location, str):
            location = Location(location)
        with self._lock:
            self._location = location

        client_id = location.client_id
        if client_id:
            logger.info("Resolving client from direct link (clientId=%s)", client_id)
            self.resolve_client(client_id=client_id)
            return self.state

        token = self.session_store.get_valid_session()
        if token is not None:
            logger.info("Resolving client from stored session (%s)", token.email)
            self.resolve_client(email=token.email)
            return self.state

        with self._lock:
            self._state = ResolutionState.UNAUTHENTICATED
            self._loading = False
        return ResolutionState.UNAUTHENTICATED

    def resolve_client(self, email: str | None = None, client_id: str | None = None) -> bool:
        """Resolve a client by email and/or id, falling back to the mock directory.

        Returns:
            True if a client was resolved and applied.
        """
        return self._resolve(email=email, client_id=client_id, refresh=False)

    def _resolve(self, email: str | None, client_id: str | None, refresh: bool) -> bool:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._loading = True
            if self._state != ResolutionState.AUTHENTICATED:
                self._state = ResolutionState.RESOLVING

        data = self._fetch(email=email, client_id=client_id)
        source = "integration endpoint"
        if (data is None or not data.accepted) and self.config.use_mock_fallback:
            data = self.mock_directory.lookup(email=email, client_id=client_id)
            source = "mock directory"

        with self._lock:
            if generation != self._generation:
                logger.info("Discarding stale resolution result (generation %d)", generation)
                return False

            self._loading = False
            previous = self._client
            if data is None or not data.accepted or data.client is None:
                if refresh and previous is not None:
                    # Best effort: a failed refresh leaves the workspace as it is.
                    logger.warning(
                        "Reconciliation for client %s failed, keeping current data", previous.id
                    )
                    return False
                logger.info("No client found for email=%s clientId=%s", email, client_id)
                self._clear_workspace()
                self._state = ResolutionState.UNAUTHENTICATED
                resolved = None
            else:
                self._apply(data.client, data)
                self._state = ResolutionState.AUTHENTICATED
                self._location = self._location.without_query()
                resolved = self._client

        switched = previous is not None and (resolved is None or resolved.id != previous.id)
        if switched:
            self._notify_reset()

        if resolved is None:
            self.monitor.stop()
            return False

        logger.info("Client %s resolved from %s", resolved.id, source)
        if resolved.email:
            self.session_store.save_session(resolved.email)
        self.monitor.start()
        return True

    def _fetch(self, email: str | None, client_id: str | None) -> ClientData | None:
        try:
            raw = self.integration.fetch_full_client_data(email=email, client_id=client_id)
        except IntegrationError as e:
            logger.error("Client data fetch failed: %s", e)
            return None
        if raw is None:
            return None
        return parse_client_data(raw)

    def _apply(self, client: Client, data: ClientData) -> None:
        """Take the fetched client.

        For the client already shown, lists are replaced only when the new ones
        are non-empty. A different client starts from an empty workspace.
        """
        if self._client is not None and self._client.id != client.id:
            logger.info("Switching client %s -> %s", self._client.id, client.id)
            self._clear_workspace()
        self._client = client
        if data.projects:
            self._projects = list(data.projects)
        else:
            logger.debug("Empty project list received, keeping %d in memory", len(self._projects))
        if data.tickets:
            self._tickets = list(data.tickets)
        else:
            logger.debug("Empty ticket list received, keeping %d in memory", len(self._tickets))

    def _clear_workspace(self) -> None:
        self._client = None
        self._projects = []
        self._tickets = []

    def logout(self) -> None:
        """End the session: forget the client, stored session and URL parameters.

        Pending reconciliations are cancelled. Tickets already queued for
        sending are still sent.
        """
        with self._lock:
            self._generation += 1
            self._clear_workspace()
            self._state = ResolutionState.UNAUTHENTICATED
            self._loading = False
            self._location = self._location.without_query()

        self.monitor.stop()
        self._cancel_reconciles()
        self.session_store.clear_session()
        self._notify_reset()
        logger.info("Logged out")

    def close(self) -> None:
        """Teardown: deregister the monitor and every pending timer."""
        self.monitor.stop()
        self.timers.cancel_all()

    # --- Activity and reconciliation ---

    def record_activity(self, signal: ActivitySignal | str) -> bool:
        """Forward a user-activity signal to the inactivity monitor."""
        return self.monitor.record_activity(signal)

    def on_visibility_change(self, visible: bool) -> bool:
        """Schedule a re-resolution when the page becomes visible again.

        Returns:
            True if a reconciliation was scheduled.
        """
        if not visible or not self.is_authenticated:
            return False
        self.schedule_reconcile()
        return True

    def schedule_reconcile(self) -> None:
        """Re-resolve the current client after the configured delay."""
        handle: TimerHandle | None = None

        def run() -> None:
            with self._lock:
                self._reconcile_handles.discard(handle)
            self.reconcile()

        handle = self.timers.call_later(self.config.reconcile_delay_seconds, run)
        with self._lock:
            self._reconcile_handles.add(handle)

    def _cancel_reconciles(self) -> None:
        with self._lock:
            handles, self._reconcile_handles = self._reconcile_handles, set()
        for handle in handles:
            handle.cancel()

    def reconcile(self) -> bool:
        """Re-fetch the current client to pick up backend-side changes.

        Best effort: if the fetch fails or finds nothing, the current workspace
        and session stay as they are.
        """
        client = self.client
        if client is None:
            return False
        if client.email:
            return self._resolve(email=client.email, client_id=None, refresh=True)
        return self._resolve(email=None, client_id=client.id, refresh=True)

    # --- Ticket creation ---

    def submit_ticket(self, ticket: Ticket) -> Ticket:
        """Apply a ticket from the intake optimistically and forward it.

        The ticket is bound to the authenticated client, put on stand-by when
        the client's email is invalid, and prepended to the local list. Sending
        happens in the background; failures are only logged.

        Raises:
            NotAuthenticatedError: If no client is resolved
        """
        with self._lock:
            if self._state != ResolutionState.AUTHENTICATED or self._client is None:
                raise NotAuthenticatedError("Cannot create a ticket without a logged-in client")
            status = ticket.status
            if self._client.email_status == EmailStatus.INVALID:
                status = TicketStatus.STANDBY
            created = replace(ticket, client_id=self._client.id, status=status)
            self._tickets.insert(0, created)

        logger.info("Ticket %s created (status=%s)", created.id, created.status.name)
        self.timers.call_later(0, lambda: self._forward(created))
        return created

    def _forward(self, ticket: Ticket) -> None:
        try:
            self.integration.send_ticket(ticket)
        except IntegrationError as e:
            logger.error("Failed to forward ticket %s: %s", ticket.id, e)
            # A re-fetch would return lists without this ticket and replace the
            # optimistic copy, so reconciliation only follows a successful send.
            return
        if self.is_authenticated:
            self.schedule_reconcile()

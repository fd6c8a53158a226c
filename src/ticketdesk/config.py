"""Runtime configuration for TicketDesk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

DEFAULT_SESSION_KEY = "ticketdesk_session"
DEFAULT_SESSION_DB = "ticketdesk.db"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DeskConfig:
    """Configuration passed to the session, integration and resolution components.

    Attributes:
        ticket_webhook_url: Integration Endpoint receiving new tickets. Empty disables sending.
        client_data_webhook_url: Integration Endpoint returning full client data.
            Empty disables lookups (resolution then relies on the mock directory).
        session_db_path: SQLite file backing the session store (":memory:" for tests).
        session_key: Fixed key the session token is stored under.
        inactivity_timeout: Idle window after which the session expires.
        check_interval_seconds: Period of the inactivity check while logged in.
        reconcile_delay_seconds: Delay before re-resolving the client after a change.
        http_timeout_seconds: Timeout for Integration Endpoint calls.
        use_mock_fallback: Whether the mock directory is consulted when the endpoint fails.
    """

    ticket_webhook_url: str = ""
    client_data_webhook_url: str = ""
    session_db_path: str = DEFAULT_SESSION_DB
    session_key: str = DEFAULT_SESSION_KEY
    inactivity_timeout: timedelta = timedelta(minutes=30)
    check_interval_seconds: float = 60.0
    reconcile_delay_seconds: float = 1.0
    http_timeout_seconds: float = 30.0
    use_mock_fallback: bool = True

    @classmethod
    def from_env(cls) -> DeskConfig:
        """Build a configuration from TICKETDESK_* environment variables."""
        return cls(
            ticket_webhook_url=os.environ.get("TICKETDESK_TICKET_WEBHOOK_URL", ""),
            client_data_webhook_url=os.environ.get("TICKETDESK_CLIENT_DATA_WEBHOOK_URL", ""),
            session_db_path=os.environ.get("TICKETDESK_SESSION_DB", DEFAULT_SESSION_DB),
            session_key=os.environ.get("TICKETDESK_SESSION_KEY", DEFAULT_SESSION_KEY),
            inactivity_timeout=timedelta(
                minutes=float(os.environ.get("TICKETDESK_INACTIVITY_TIMEOUT_MINUTES", "30"))
            ),
            check_interval_seconds=float(
                os.environ.get("TICKETDESK_CHECK_INTERVAL_SECONDS", "60")
            ),
            reconcile_delay_seconds=float(
                os.environ.get("TICKETDESK_RECONCILE_DELAY_SECONDS", "1.0")
            ),
            http_timeout_seconds=float(os.environ.get("TICKETDESK_HTTP_TIMEOUT_SECONDS", "30")),
            use_mock_fallback=_env_bool("TICKETDESK_USE_MOCK_FALLBACK", True),
        )

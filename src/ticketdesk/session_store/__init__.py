"""Session Store - Durable client session token with inactivity expiry."""

from ticketdesk.session_store.models import ActivitySignal, SessionToken
from ticketdesk.session_store.monitor import InactivityMonitor
from ticketdesk.session_store.store import SessionStore

__all__ = [
    "ActivitySignal",
    "InactivityMonitor",
    "SessionStore",
    "SessionToken",
]

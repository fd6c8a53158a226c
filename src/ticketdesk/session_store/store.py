"""SessionStore - persists the client session token with an inactivity expiry."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from ticketdesk.config import DEFAULT_SESSION_KEY
from ticketdesk.session_store.database import Database
from ticketdesk.session_store.models import SessionToken, StoredEntry

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("ticketdesk.session_store")

DEFAULT_INACTIVITY_TIMEOUT = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class SessionStore:
    """Session token storage under a single fixed key.

    The stored value is JSON text {"email": ..., "lastActive": epoch-millis}.
    Anything that does not parse to that shape is treated as absent and deleted.
    """

    def __init__(
        self,
        db_path: str = "ticketdesk.db",
        key: str = DEFAULT_SESSION_KEY,
        inactivity_timeout: timedelta = DEFAULT_INACTIVITY_TIMEOUT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the store, creating the backing table if needed.

        Args:
            db_path: Path to SQLite database file (":memory:" for tests)
            key: Key the session token is stored under
            inactivity_timeout: Idle time after which a session is expired
            clock: Source of the current time (aware UTC datetimes)
        """
        self.key = key
        self.inactivity_timeout = inactivity_timeout
        self._clock = clock
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Raw entry access ---

    def _read_raw(self) -> str | None:
        session = self._db.get_session()
        try:
            entry = session.get(StoredEntry, self.key)
            return entry.value if entry is not None else None
        finally:
            session.close()

    def write_raw(self, value: str) -> None:
        """Overwrite the stored text as-is."""
        session = self._db.get_session()
        try:
            entry = session.get(StoredEntry, self.key)
            if entry is None:
                session.add(StoredEntry(key=self.key, value=value))
            else:
                entry.value = value
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _delete(self) -> bool:
        session = self._db.get_session()
        try:
            entry = session.get(StoredEntry, self.key)
            if entry is None:
                return False
            session.delete(entry)
            session.commit()
            return True
        finally:
            session.close()

    # --- Session operations ---

    def save_session(self, email: str) -> SessionToken:
        """Store a fresh session for email, replacing any previous one."""
        token = SessionToken(email=email, last_active=_to_millis(self._clock()))
        self.write_raw(json.dumps(token.to_json()))
        logger.info("Session saved for %s", email)
        return token

    def load_session(self) -> SessionToken | None:
        """Return the stored session, expired or not.

        Malformed data is deleted and reported as no session.
        """
        raw = self._read_raw()
        if raw is None:
            return None
        try:
            return SessionToken.from_json(json.loads(raw))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Discarding malformed stored session: %s", e)
            self._delete()
            return None

    def is_expired(self, token: SessionToken, now: datetime | None = None) -> bool:
        """True once more than the inactivity timeout has passed since last activity."""
        now = now or self._clock()
        return now - token.last_active_at > self.inactivity_timeout

    def get_valid_session(self) -> SessionToken | None:
        """Return the stored session only if it has not expired; expired ones are removed."""
        token = self.load_session()
        if token is None:
            return None
        if self.is_expired(token):
            logger.info("Stored session for %s expired", token.email)
            self._delete()
            return None
        return token

    def touch_session(self) -> SessionToken | None:
        """Refresh lastActive to now, only if a session exists."""
        token = self.load_session()
        if token is None:
            return None
        refreshed = SessionToken(email=token.email, last_active=_to_millis(self._clock()))
        self.write_raw(json.dumps(refreshed.to_json()))
        return refreshed

    def session_expired(self) -> bool:
        """Whether a stored session exists and is past its inactivity window."""
        token = self.load_session()
        return token is not None and self.is_expired(token)

    def clear_session(self) -> None:
        """Remove the stored session."""
        if self._delete():
            logger.info("Session cleared")

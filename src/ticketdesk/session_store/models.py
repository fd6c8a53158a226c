"""Models for the Session Store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class StoredEntry(Base):
    """A durable key/value entry, JSON text in value."""

    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<StoredEntry(key={self.key!r})>"


class ActivitySignal(StrEnum):
    """User activity that keeps a session alive."""

    POINTER_MOVE = "pointer_move"
    KEY_PRESS = "key_press"
    CLICK = "click"


@dataclass(frozen=True)
class SessionToken:
    """The persisted session: who is logged in and when they were last active.

    Attributes:
        email: Email the client was resolved with.
        last_active: Epoch milliseconds of the last recorded activity.
    """

    email: str
    last_active: int

    @property
    def last_active_at(self) -> datetime:
        """last_active as an aware UTC datetime."""
        return datetime.fromtimestamp(self.last_active / 1000, tz=UTC)

    def to_json(self) -> dict[str, Any]:
        """Wire form stored under the session key."""
        return {"email": self.email, "lastActive": self.last_active}

    @classmethod
    def from_json(cls, data: Any) -> SessionToken:
        """Parse the stored wire form.

        Raises:
            ValueError: If the data does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Session must be an object, got {type(data).__name__}")
        email = data.get("email")
        last_active = data.get("lastActive")
        if not isinstance(email, str) or not email:
            raise ValueError("Session has no email")
        if isinstance(last_active, bool) or not isinstance(last_active, int | float):
            raise ValueError("Session has no numeric lastActive")
        return cls(email=email, last_active=int(last_active))

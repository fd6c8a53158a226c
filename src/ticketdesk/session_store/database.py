"""SQLite backing for the Session Store's key/value entries."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ticketdesk.session_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY = ":memory:"


class Database:
    """Lazily opened SQLite engine plus a session factory.

    The file plays the role browser local storage plays for a web client:
    it survives restarts of the dashboard process.
    """

    def __init__(self, db_path: str = "ticketdesk.db") -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory DB.
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.db_path == MEMORY:
                # One shared connection, usable from timer threads and TestClient
                self._engine = create_engine(
                    "sqlite:///:memory:",
                    echo=False,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            else:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    echo=False,
                    connect_args={"check_same_thread": False},
                )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.session_factory()

    def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

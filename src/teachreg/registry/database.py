"""Database connection manager for the Registration Store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from teachreg.registry.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY = ":memory:"
POOL_SIZE = 10


def to_url(database: str) -> str:
    """Turn a SQLite path or ``:memory:`` into a SQLAlchemy URL.

    Strings that already carry a scheme (``dialect+driver://``) are returned as is.
    """
    if "://" in database:
        return database
    if database == MEMORY:
        return "sqlite:///:memory:"
    return f"sqlite:///{database}"


class Database:
    """Database connection manager.

    Accepts any SQLAlchemy URL. SQLite databases get WAL mode and foreign
    keys switched on for every connection; server databases get a bounded
    connection pool.
    """

    def __init__(self, database_url: str = "teachreg.db") -> None:
        """Initialize database connection.

        Args:
            database_url: SQLAlchemy URL, SQLite file path, or ":memory:".
        """
        self.database_url = to_url(database_url)
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool:
        url = make_url(self.database_url)
        return self.is_sqlite and url.database in (None, "", MEMORY)

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.is_memory:
                # One connection shared across threads; callers must serialize transactions
                self._engine = create_engine(
                    self.database_url,
                    echo=False,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            elif self.is_sqlite:
                db_file = make_url(self.database_url).database
                if db_file:
                    Path(db_file).parent.mkdir(parents=True, exist_ok=True)
                self._engine = create_engine(
                    self.database_url,
                    echo=False,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    self.database_url,
                    echo=False,
                    pool_size=POOL_SIZE,
                    pool_pre_ping=True,
                )

            if self.is_sqlite:

                @event.listens_for(self._engine, "connect")
                def set_sqlite_pragma(dbapi_connection: object, _connection_record: object) -> None:
                    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()

        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session.

        Returns:
            A new SQLAlchemy session.
        """
        return self.session_factory()

    def foreign_keys_enabled(self) -> bool:
        """Check whether SQLite enforces foreign keys (always True elsewhere)."""
        if not self.is_sqlite:
            return True
        with self.engine.connect() as conn:
            return bool(conn.execute(text("PRAGMA foreign_keys")).scalar())

    def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

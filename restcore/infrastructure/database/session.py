"""Database engine and session lifecycle management.

The dispatch core runs synchronously in the transport's thread pool, so the
user store uses SQLAlchemy's synchronous engine. ``_DatabaseManager`` keeps a
single engine and session factory for the process.

SQLite URLs get ``check_same_thread=False`` because sessions are opened on
thread pool workers; in-memory SQLite additionally uses ``StaticPool`` so all
threads share the one database.
"""

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restcore.core.config import get_settings
from restcore.infrastructure.constants import POOL_RECYCLE_SECONDS
from restcore.infrastructure.database.models import Base


def _engine_options(database_url: str) -> dict[str, Any]:
    """Driver-specific engine options for ``database_url``."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_recycle": POOL_RECYCLE_SECONDS}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in {None, "", ":memory:"}:
        options["poolclass"] = StaticPool
    return options


def create_database_engine(database_url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine for the user store.

    Args:
        database_url: Optional database URL. If not provided, uses the
            configured database URL from settings.

    Returns:
        Engine: Configured engine instance.
    """
    db_config = get_settings().database_config
    url = database_url or db_config.database_url

    engine = create_engine(
        url,
        pool_pre_ping=db_config.pool_pre_ping,
        echo=db_config.echo,
        **_engine_options(url),
    )

    logger.info("Created database engine for {}", engine.url.get_backend_name())
    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> Engine:
        """Get or create the engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._session_factory is None:
                    self._session_factory = sessionmaker(
                        engine, expire_on_commit=False
                    )
                    logger.info("Created session factory")
        return self._session_factory

    def close(self) -> None:
        """Dispose of the engine and forget the session factory."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self.reset()

    def reset(self) -> None:
        """Reset the manager state. Used primarily for testing."""
        self._engine = None
        self._session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> Engine:
    """Get or create the global engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the global session factory."""
    return _db_manager.get_session_factory()


@contextmanager
def session_scope(
    session_factory: sessionmaker[Session] | None = None,
) -> Generator[Session]:
    """Open a session that commits on success and rolls back on error.

    Args:
        session_factory: Factory to open the session from; the global one
            by default.

    Yields:
        Generator[Session]: Database session for performing operations.

    Raises:
        Exception: Any exception raised inside the block is re-raised after
            rollback.

    Example:
        with session_scope() as session:
            user = UserRepository(session).get_by_username("alice")
    """
    factory = session_factory or get_session_factory()
    with factory() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            logger.debug("Database session rolled back due to error")
            raise


def init_schema(engine: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database schema initialized")


def close_database() -> None:
    """Close the global engine and its connections."""
    _db_manager.close()


def check_database_connection(engine: Engine | None = None) -> tuple[bool, str | None]:
    """Check if the database connection is available.

    Args:
        engine: Engine to check; the global one by default.

    Returns:
        tuple[bool, str | None]: Whether the check succeeded, and the error
            message if it failed.
    """
    try:
        engine = engine or get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).scalar()
    except SQLAlchemyError as e:
        return False, str(e)
    else:
        return True, None

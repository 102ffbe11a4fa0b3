"""Database engine and session management."""
import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.models.tables import Base
from src.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

# Process-wide engine and session factory, built on first use
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def create_db_engine(database_url: str) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///data/event_reg.db"

    Returns:
        Engine: configured engine

    Behavior:
        - SQLite connections may be shared across Streamlit script threads
        - In-memory SQLite uses a single shared connection so every session
          sees the same database
        - Parent directory of a SQLite file is created if missing
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    database = url.database or ""
    if database in ("", ":memory:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    dir_path = os.path.dirname(database)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    return create_engine(url, connect_args={"check_same_thread": False})


def init_db(engine: Engine) -> None:
    """Create the event and registration tables if they do not exist."""
    Base.metadata.create_all(engine)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to the engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session_factory(database_url: str) -> sessionmaker:
    """
    Get the process-wide session factory, creating the schema on first call.

    Args:
        database_url: URL used only when the engine does not exist yet

    Returns:
        sessionmaker bound to the shared engine
    """
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    _engine = create_db_engine(database_url)
    init_db(_engine)
    _session_factory = build_session_factory(_engine)
    return _session_factory


def _reset_engine() -> None:
    """Dispose the shared engine so the next call rebuilds it."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Context manager for one unit of work.

    Usage:
        with session_scope(factory) as session:
            session.add(record)

    Behavior:
        - Commits when the block finishes
        - Rolls back and re-raises IntegrityError so callers can map
          constraint violations to user-facing errors
        - Rolls back and wraps any other SQLAlchemy error in StorageError
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Database operation failed")
        raise StorageError(f"Database operation failed: {e}") from e
    finally:
        session.close()

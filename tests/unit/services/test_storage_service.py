"""Unit tests for database engine and session helpers."""
import pytest
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError, OperationalError

from src.models.tables import EventRecord, RegistrationRecord
from src.services import storage_service
from src.services.storage_service import (
    build_session_factory,
    create_db_engine,
    get_session_factory,
    init_db,
    session_scope,
)
from src.utils.exceptions import StorageError


class TestCreateEngine:
    """Test engine creation."""

    def test_file_database_creates_parent_directory(self, tmp_path):
        """Test a SQLite file path gets its directory created."""
        db_path = tmp_path / "nested" / "event_reg.db"
        engine = create_db_engine(f"sqlite:///{db_path}")
        init_db(engine)

        assert db_path.parent.exists()
        assert set(inspect(engine).get_table_names()) == {"event", "registration"}
        engine.dispose()

    def test_in_memory_database_is_shared_between_sessions(self):
        """Test separate sessions see the same in-memory data."""
        engine = create_db_engine("sqlite://")
        init_db(engine)
        factory = build_session_factory(engine)

        with session_scope(factory) as session:
            session.add(EventRecord(event_name="AI Summit", category="Tech", event_date=1,
                                    registration_start=0, registration_end=10))

        with session_scope(factory) as session:
            assert session.execute(select(EventRecord.event_name)).scalar_one() == "AI Summit"
        engine.dispose()


class TestSessionScope:
    """Test unit-of-work behavior."""

    def test_unique_violation_is_reraised_and_rolled_back(self, session_factory):
        """Test IntegrityError propagates and nothing is committed."""
        row = dict(full_name="Ada", email="a@b.com", college_name="C", department="D",
                   event_id=1, created=1)
        with session_scope(session_factory) as session:
            session.add(RegistrationRecord(**row))

        with pytest.raises(IntegrityError):
            with session_scope(session_factory) as session:
                session.add(RegistrationRecord(**row))

        with session_scope(session_factory) as session:
            assert session.query(RegistrationRecord).count() == 1

    def test_other_database_errors_become_storage_error(self, session_factory):
        """Test non-constraint errors are wrapped."""
        with pytest.raises(StorageError, match="Database operation failed"):
            with session_scope(session_factory) as session:
                raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))


class TestSharedFactory:
    """Test the process-wide session factory cache."""

    def test_factory_is_cached_until_reset(self, monkeypatch):
        """Test repeated calls reuse the engine."""
        monkeypatch.setattr(storage_service, "_engine", None)
        monkeypatch.setattr(storage_service, "_session_factory", None)

        first = get_session_factory("sqlite://")
        second = get_session_factory("sqlite:///ignored.db")
        assert first is second

        storage_service._reset_engine()
        assert storage_service._session_factory is None

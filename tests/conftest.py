"""Shared fixtures: in-memory database, frozen clock and event seeding."""
import pytest

from src.models.tables import EventRecord
from src.services.event_catalog import EventCatalog
from src.services.registration_service import RegistrationWorkflow
from src.services.registration_store import RegistrationStore
from src.services.report_service import AdminReportService
from src.services.storage_service import (
    build_session_factory,
    create_db_engine,
    init_db,
    session_scope,
)
from src.utils.date_utils import FixedClock, to_timestamp

# Registration window used by most tests: April 2024, event on 1 May 2024
WINDOW_START = to_timestamp("2024-04-01 00:00")
WINDOW_END = to_timestamp("2024-04-30 23:59")
INSIDE_WINDOW = to_timestamp("2024-04-15 12:00")
AFTER_WINDOW = to_timestamp("2024-06-01 00:00")
MAY_1 = to_timestamp("2024-05-01")
MAY_2 = to_timestamp("2024-05-02")


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def clock():
    """Clock frozen inside the April 2024 registration window."""
    return FixedClock(INSIDE_WINDOW)


@pytest.fixture
def add_event(session_factory):
    """Insert an event row and return its id."""

    def _add_event(
        name="AI Summit",
        category="Tech",
        event_date=MAY_1,
        registration_start=WINDOW_START,
        registration_end=WINDOW_END,
    ):
        record = EventRecord(
            event_name=name,
            category=category,
            event_date=event_date,
            registration_start=registration_start,
            registration_end=registration_end,
        )
        with session_scope(session_factory) as session:
            session.add(record)
            session.flush()
            return record.id

    return _add_event


@pytest.fixture
def delete_event(session_factory):
    """Remove an event row, leaving its registrations behind."""

    def _delete_event(event_id):
        with session_scope(session_factory) as session:
            session.delete(session.get(EventRecord, event_id))

    return _delete_event


@pytest.fixture
def catalog(session_factory, clock):
    return EventCatalog(session_factory, clock)


@pytest.fixture
def store(session_factory, clock):
    return RegistrationStore(session_factory, clock)


@pytest.fixture
def workflow(catalog, store, clock):
    return RegistrationWorkflow(catalog, store, clock)


@pytest.fixture
def reports(catalog, store):
    return AdminReportService(catalog, store)

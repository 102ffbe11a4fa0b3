"""Wiring of settings, clock, storage and services for the app."""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import sessionmaker

from src.services.event_catalog import EventCatalog
from src.services.registration_service import RegistrationWorkflow
from src.services.registration_store import RegistrationStore
from src.services.report_service import AdminReportService
from src.services.storage_service import get_session_factory
from src.utils.config import Settings, get_settings
from src.utils.date_utils import Clock, SystemClock


@dataclass
class Services:
    """Service objects shared by the Streamlit pages."""

    settings: Settings
    catalog: EventCatalog
    store: RegistrationStore
    workflow: RegistrationWorkflow
    reports: AdminReportService


# Built once per process
_services: Optional[Services] = None


def build_services(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    session_factory: Optional[sessionmaker] = None,
) -> Services:
    """
    Assemble the services.

    Args:
        settings: Defaults to get_settings()
        clock: Defaults to SystemClock()
        session_factory: Defaults to the shared factory for settings.database_url

    Returns:
        Services sharing one clock and one session factory
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()
    session_factory = session_factory or get_session_factory(settings.database_url)

    catalog = EventCatalog(session_factory, clock, tz_name=settings.timezone)
    store = RegistrationStore(session_factory, clock)

    return Services(
        settings=settings,
        catalog=catalog,
        store=store,
        workflow=RegistrationWorkflow(catalog, store, clock),
        reports=AdminReportService(catalog, store, tz_name=settings.timezone),
    )


def get_services() -> Services:
    """Return the process-wide services, building them on first use."""
    global _services

    if _services is None:
        _services = build_services()
    return _services


def _clear_services() -> None:
    """Forget the cached services (tests)."""
    global _services
    _services = None

"""Read-only queries over the event table."""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from src.models.event import Event
from src.models.tables import EventRecord
from src.services.storage_service import session_scope
from src.utils.date_utils import Clock, format_date
from src.utils.exceptions import InvalidEventError


class EventCatalog:
    """
    Lookups used by the registration form and the admin filters.

    Empty results are returned as empty collections, never as errors.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Clock,
        logger: Optional[logging.Logger] = None,
        tz_name: str = "UTC",
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._tz_name = tz_name

    def is_registration_open(self, now: Optional[int] = None) -> Optional[Event]:
        """
        Find an event whose registration window contains now.

        Args:
            now: Unix timestamp; defaults to the injected clock

        Returns:
            Event with the lowest id among open ones, or None when every
            window is closed
        """
        now = self._clock.now() if now is None else now
        stmt = (
            select(EventRecord)
            .where(EventRecord.registration_start <= now)
            .where(EventRecord.registration_end >= now)
            .order_by(EventRecord.id)
        )
        with session_scope(self._session_factory) as session:
            for record in session.execute(stmt).scalars():
                event = self._to_event(record)
                if event is not None:
                    return event
        return None

    def list_categories(self) -> List[str]:
        """Distinct non-blank categories, case preserved, sorted for display."""
        stmt = (
            select(EventRecord.category)
            .where(func.trim(EventRecord.category) != "")
            .distinct()
            .order_by(EventRecord.category)
        )
        with session_scope(self._session_factory) as session:
            return list(session.execute(stmt).scalars())

    def list_dates(
        self,
        category: str,
        open_only: bool = True,
        now: Optional[int] = None,
    ) -> Dict[int, str]:
        """
        Distinct event dates for a category.

        Args:
            category: Category label, matched exactly
            open_only: Keep only dates of events whose window contains now
            now: Unix timestamp; defaults to the injected clock

        Returns:
            Dict of timestamp -> "DD Mon YYYY", ascending by date
        """
        stmt = (
            select(EventRecord.event_date)
            .where(EventRecord.category == category)
            .distinct()
            .order_by(EventRecord.event_date)
        )
        if open_only:
            now = self._clock.now() if now is None else now
            stmt = stmt.where(EventRecord.registration_start <= now).where(
                EventRecord.registration_end >= now
            )

        with session_scope(self._session_factory) as session:
            timestamps = list(session.execute(stmt).scalars())

        return {ts: format_date(ts, self._tz_name) for ts in timestamps}

    def list_all_dates(self) -> Dict[int, str]:
        """Every distinct event date, used by the admin date filter."""
        stmt = select(EventRecord.event_date).distinct().order_by(EventRecord.event_date)
        with session_scope(self._session_factory) as session:
            timestamps = list(session.execute(stmt).scalars())
        return {ts: format_date(ts, self._tz_name) for ts in timestamps}

    def list_event_names(self, category: str, event_date: int) -> Dict[int, str]:
        """
        Events matching both category and exact event date.

        Returns:
            Dict of event id -> event name
        """
        stmt = (
            select(EventRecord.id, EventRecord.event_name)
            .where(EventRecord.category == category)
            .where(EventRecord.event_date == event_date)
            .order_by(EventRecord.id)
        )
        with session_scope(self._session_factory) as session:
            result = {row.id: row.event_name for row in session.execute(stmt)}

        self._logger.info(
            "Loaded event names | Category: %s | Date: %s | Count: %d",
            category,
            event_date,
            len(result),
        )
        return result

    def list_events(self, event_date: Optional[int] = None) -> Dict[int, str]:
        """Event id -> name, optionally restricted to one event date."""
        stmt = select(EventRecord.id, EventRecord.event_name).order_by(EventRecord.id)
        if event_date is not None:
            stmt = stmt.where(EventRecord.event_date == event_date)
        with session_scope(self._session_factory) as session:
            return {row.id: row.event_name for row in session.execute(stmt)}

    def get_event(self, event_id: int) -> Optional[Event]:
        """Look up one event; None if it was deleted, never existed or is malformed."""
        with session_scope(self._session_factory) as session:
            record = session.get(EventRecord, event_id)
            return self._to_event(record) if record is not None else None

    def get_events(self, event_ids) -> Dict[int, Event]:
        """Batch lookup keyed by id; missing or malformed events are absent."""
        ids = {event_id for event_id in event_ids if event_id is not None}
        if not ids:
            return {}
        stmt = select(EventRecord).where(EventRecord.id.in_(ids))
        with session_scope(self._session_factory) as session:
            events = (self._to_event(record) for record in session.execute(stmt).scalars())
            return {event.id: event for event in events if event is not None}

    def _to_event(self, record: EventRecord) -> Optional[Event]:
        """Map a row to an Event; rows the model rejects are logged and skipped."""
        try:
            return Event(
                id=record.id,
                name=record.event_name,
                category=record.category,
                event_date=record.event_date,
                registration_start=record.registration_start,
                registration_end=record.registration_end,
            )
        except InvalidEventError as e:
            self._logger.warning("Skipping malformed event | ID: %s | Reason: %s", record.id, e)
            return None

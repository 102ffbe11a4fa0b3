"""Read/write queries over the registration table."""
import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from src.models.registration import Registration, RegistrationFilter
from src.models.tables import EventRecord, RegistrationRecord
from src.services.storage_service import session_scope
from src.utils.date_utils import Clock
from src.utils.exceptions import DuplicateRegistrationError
from src.utils.validation import normalize_email

logger = logging.getLogger(__name__)


class RegistrationStore:
    """
    Persistence for registrations.

    The (email, event_id) pair is unique at the table level; ``exists`` is a
    convenience for friendly validation messages, ``insert`` is the
    authoritative check.
    """

    def __init__(self, session_factory: sessionmaker, clock: Clock):
        self._session_factory = session_factory
        self._clock = clock

    def exists(self, email: str, event_id: int) -> bool:
        """Return True if the email is already registered for the event."""
        stmt = (
            select(func.count(RegistrationRecord.id))
            .where(RegistrationRecord.email == normalize_email(email))
            .where(RegistrationRecord.event_id == event_id)
        )
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).scalar_one() > 0

    def insert(self, registration: Registration) -> int:
        """
        Persist a new registration.

        Args:
            registration: Registration without id; created defaults to now

        Returns:
            int: id assigned by the database

        Raises:
            DuplicateRegistrationError: If (email, event_id) already exists
        """
        email = normalize_email(registration.email)
        record = RegistrationRecord(
            full_name=registration.full_name.strip(),
            email=email,
            college_name=registration.college_name.strip(),
            department=registration.department.strip(),
            event_id=registration.event_id,
            created=registration.created if registration.created is not None else self._clock.now(),
        )
        try:
            with session_scope(self._session_factory) as session:
                session.add(record)
                session.flush()
                new_id = record.id
        except IntegrityError as e:
            logger.warning(
                "Duplicate registration rejected by store | Email: %s | Event: %s",
                email,
                registration.event_id,
            )
            raise DuplicateRegistrationError(email, registration.event_id) from e

        registration.id = new_id
        registration.created = record.created
        return new_id

    def list(self, filters: Optional[RegistrationFilter] = None) -> List[Registration]:
        """
        Registrations matching the filters, newest first.

        Filtering by event_date joins the event table, so registrations whose
        event no longer exists drop out of date-filtered results.
        """
        stmt = self._apply_filters(select(RegistrationRecord), filters).order_by(
            RegistrationRecord.created.desc(), RegistrationRecord.id.desc()
        )
        with session_scope(self._session_factory) as session:
            return [_to_registration(r) for r in session.execute(stmt).scalars()]

    def count_all(self, filters: Optional[RegistrationFilter] = None) -> int:
        """Number of registrations matching the filters."""
        stmt = self._apply_filters(select(func.count(RegistrationRecord.id)), filters)
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).scalar_one()

    @staticmethod
    def _apply_filters(stmt, filters: Optional[RegistrationFilter]):
        if filters is None:
            return stmt
        if filters.event_id is not None:
            stmt = stmt.where(RegistrationRecord.event_id == filters.event_id)
        if filters.event_date is not None:
            stmt = stmt.join_from(
                RegistrationRecord, EventRecord, EventRecord.id == RegistrationRecord.event_id
            ).where(
                EventRecord.event_date == filters.event_date
            )
        return stmt


def _to_registration(record: RegistrationRecord) -> Registration:
    return Registration(
        id=record.id,
        full_name=record.full_name,
        email=record.email,
        college_name=record.college_name,
        department=record.department,
        event_id=record.event_id,
        created=record.created,
    )

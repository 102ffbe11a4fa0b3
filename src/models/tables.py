"""SQLAlchemy table definitions for events and registrations.

Timestamps are stored as integer Unix seconds. ``registration.event_id`` is
a logical reference only: deleting an event leaves its registrations in
place, and reports render them with placeholder event data.
"""
from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for the registration schema."""


class EventRecord(Base):
    """Row in the ``event`` table, maintained by the event-management process."""

    __tablename__ = "event"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    event_date: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    registration_start: Mapped[int] = mapped_column(Integer, nullable=False)
    registration_end: Mapped[int] = mapped_column(Integer, nullable=False)


class RegistrationRecord(Base):
    """Row in the ``registration`` table.

    Indexes:
        - uq_registration_email_event: (email, event_id) UNIQUE
        - idx_registration_created: (created) for newest-first listings
    """

    __tablename__ = "registration"
    __table_args__ = (
        UniqueConstraint("email", "event_id", name="uq_registration_email_event"),
        Index("idx_registration_created", "created"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    college_name: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False)
    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created: Mapped[int] = mapped_column(Integer, nullable=False)

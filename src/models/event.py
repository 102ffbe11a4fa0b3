"""Event data model."""
from dataclasses import dataclass

from src.utils.exceptions import InvalidEventError


@dataclass
class Event:
    """Event that accepts registrations during its registration window."""

    id: int
    name: str
    category: str
    event_date: int  # Unix timestamp of the event day
    registration_start: int
    registration_end: int

    def __post_init__(self):
        """Validate event data."""
        if not self.name or not self.name.strip():
            raise InvalidEventError("Event name cannot be empty")
        if self.registration_start > self.registration_end:
            raise InvalidEventError(
                f"Registration start ({self.registration_start}) is after "
                f"registration end ({self.registration_end})"
            )

    def is_registration_open(self, now: int) -> bool:
        """Return True if now falls inside the inclusive registration window."""
        return self.registration_start <= now <= self.registration_end

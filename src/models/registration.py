"""Registration data model."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Registration:
    """A person signed up for one event."""

    full_name: str
    email: str
    college_name: str
    department: str
    event_id: int
    id: Optional[int] = None
    created: Optional[int] = None  # Unix timestamp, set on insert

    def __post_init__(self):
        """Validate registration data."""
        if not self.full_name or not self.full_name.strip():
            raise ValueError("Full name cannot be empty")
        if not self.email or not self.email.strip():
            raise ValueError("Email cannot be empty")
        if self.event_id is None:
            raise ValueError("Event id is required")


@dataclass
class RegistrationFilter:
    """Optional admin filters; None means no restriction."""

    event_id: Optional[int] = None
    event_date: Optional[int] = None

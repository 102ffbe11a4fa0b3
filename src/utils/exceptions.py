"""Custom exception classes."""


class RegistrationError(Exception):
    """Base class for event registration errors."""
    pass


class DuplicateRegistrationError(RegistrationError):
    """Raised when an email is already registered for an event."""

    def __init__(self, email: str, event_id: int):
        super().__init__(f"{email} is already registered for event {event_id}")
        self.email = email
        self.event_id = event_id


class InvalidEventError(RegistrationError):
    """Raised when event data violates the registration window rules."""
    pass


class StorageError(RegistrationError):
    """Raised when the database cannot complete an operation."""
    pass

"""Registration workflow: window check, form fields, validation and persistence."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.models.event import Event
from src.models.registration import Registration
from src.services.event_catalog import EventCatalog
from src.services.filter_resolver import (
    DependentOptions,
    FieldSpec,
    Selection,
    normalize_selection,
    resolve_dependent_options,
    resolve_selection,
    with_placeholder,
)
from src.services.registration_store import RegistrationStore
from src.utils.date_utils import Clock
from src.utils.exceptions import DuplicateRegistrationError
from src.utils.validation import (
    is_blank,
    validate_email,
    validate_letters_only,
    validate_required,
)

STATUS_CLOSED = "closed"
STATUS_REJECTED = "rejected"
STATUS_ACCEPTED = "accepted"

CLOSED_MESSAGE = "Registration is currently closed."
SUCCESS_MESSAGE = "Registration successful."
DUPLICATE_MESSAGE = "You have already registered for this event."
INVALID_DATE_MESSAGE = "Please select a valid event date."
INVALID_EVENT_MESSAGE = "Please select a valid event."

FIELD_LABELS = {
    "full_name": "Full Name",
    "email": "Email Address",
    "college": "College Name",
    "department": "Department",
    "category": "Category",
    "event_date": "Event Date",
    "event_name": "Event Name",
}

LETTERS_ONLY_FIELDS = ("full_name", "college", "department")


@dataclass
class RegistrationSubmission:
    """Raw values submitted from the public form."""

    full_name: str = ""
    email: str = ""
    college: str = ""
    department: str = ""
    category: str = ""
    event_date: object = None
    event_name: object = None  # selected event id

    @property
    def selection(self) -> Selection:
        return normalize_selection(self.category, self.event_date, self.event_name)


@dataclass
class RegistrationForm:
    """What the public page should render for the current selections."""

    closed: bool
    message: str = ""
    open_event: Optional[Event] = None
    fields: List[FieldSpec] = field(default_factory=list)
    selection: Selection = field(default_factory=Selection)
    options: DependentOptions = field(default_factory=DependentOptions)

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


@dataclass
class RegistrationResult:
    """Outcome of one submission attempt."""

    status: str
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    registration_id: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.status == STATUS_ACCEPTED


class RegistrationWorkflow:
    """
    Drive one registration attempt.

    States:
        WindowCheck -> Closed | Open
        Open -> FieldEntry -> Validating -> Rejected | Accepted
    """

    def __init__(
        self,
        catalog: EventCatalog,
        store: RegistrationStore,
        clock: Clock,
        logger: Optional[logging.Logger] = None,
    ):
        self._catalog = catalog
        self._store = store
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def check_window(self) -> Optional[Event]:
        """Return an event with an open registration window, or None."""
        return self._catalog.is_registration_open(self._clock.now())

    def build_form(
        self,
        category=None,
        event_date=None,
        event_name=None,
        previous: Optional[Selection] = None,
    ) -> RegistrationForm:
        """
        Describe the form for the current selections.

        Args:
            category: Chosen category (raw widget value)
            event_date: Chosen event date timestamp (raw widget value)
            event_name: Chosen event id (raw widget value)
            previous: Selections from the previous rerun, used to clear
                downstream choices after an upstream change

        Returns:
            RegistrationForm with closed=True and no fields when no window
            is open; otherwise the seven required fields with resolved
            dropdown options
        """
        open_event = self.check_window()
        if open_event is None:
            return RegistrationForm(closed=True, message=CLOSED_MESSAGE)

        current = normalize_selection(category, event_date, event_name)
        selection, options = resolve_selection(self._catalog, current, previous)

        fields = [
            FieldSpec("full_name", FIELD_LABELS["full_name"]),
            FieldSpec("email", FIELD_LABELS["email"], kind="email"),
            FieldSpec("college", FIELD_LABELS["college"]),
            FieldSpec("department", FIELD_LABELS["department"]),
            FieldSpec(
                "category",
                FIELD_LABELS["category"],
                kind="select",
                options_provider=self._category_options,
            ),
            FieldSpec(
                "event_date",
                FIELD_LABELS["event_date"],
                kind="select",
                options_provider=lambda: with_placeholder(options.dates),
            ),
            FieldSpec(
                "event_name",
                FIELD_LABELS["event_name"],
                kind="select",
                options_provider=lambda: with_placeholder(options.event_names),
            ),
        ]

        return RegistrationForm(
            closed=False,
            open_event=open_event,
            fields=fields,
            selection=selection,
            options=options,
        )

    def _category_options(self) -> Dict[str, str]:
        return with_placeholder({c: c for c in self._catalog.list_categories()})

    def validate(self, submission: RegistrationSubmission) -> Dict[str, str]:
        """
        Run every check and collect all failures.

        Args:
            submission: Submitted form values

        Returns:
            Dict of field name -> error message; empty when valid
        """
        errors: Dict[str, str] = {}

        for name, label in FIELD_LABELS.items():
            is_valid, message = validate_required(getattr(submission, name), label)
            if not is_valid:
                errors[name] = message

        for name in LETTERS_ONLY_FIELDS:
            if name in errors:
                continue
            is_valid, message = validate_letters_only(getattr(submission, name), FIELD_LABELS[name])
            if not is_valid:
                errors[name] = message

        if "email" not in errors:
            is_valid, message = validate_email(submission.email)
            if not is_valid:
                errors["email"] = message

        selection = submission.selection
        if selection.category and selection.event_date is not None:
            options = resolve_dependent_options(
                self._catalog, selection.category, selection.event_date
            )
            if selection.event_date not in options.dates:
                errors.setdefault("event_date", INVALID_DATE_MESSAGE)
            elif selection.event_id is not None and selection.event_id not in options.event_names:
                errors.setdefault("event_name", INVALID_EVENT_MESSAGE)
        elif not is_blank(submission.event_date) and selection.event_date is None:
            errors.setdefault("event_date", INVALID_DATE_MESSAGE)

        if not is_blank(submission.event_name) and selection.event_id is None:
            errors.setdefault("event_name", INVALID_EVENT_MESSAGE)

        if "email" not in errors and selection.event_id is not None:
            if self._store.exists(submission.email, selection.event_id):
                errors["email"] = DUPLICATE_MESSAGE

        return errors

    def submit(self, submission: RegistrationSubmission) -> RegistrationResult:
        """
        Validate and persist one submission.

        Returns:
            RegistrationResult
            - status "closed" when no registration window is open
            - status "rejected" with field errors; nothing is stored
            - status "accepted" with the new registration id
        """
        if self.check_window() is None:
            return RegistrationResult(status=STATUS_CLOSED, message=CLOSED_MESSAGE)

        errors = self.validate(submission)
        if errors:
            self._logger.info("Registration rejected | Fields: %s", ", ".join(sorted(errors)))
            return RegistrationResult(status=STATUS_REJECTED, errors=errors)

        event_id = submission.selection.event_id
        registration = Registration(
            full_name=submission.full_name,
            email=submission.email,
            college_name=submission.college,
            department=submission.department,
            event_id=event_id,
        )

        try:
            registration_id = self._store.insert(registration)
        except DuplicateRegistrationError:
            return RegistrationResult(
                status=STATUS_REJECTED,
                errors={"email": DUPLICATE_MESSAGE},
            )

        self._logger.info(
            "Registration accepted | Id: %s | Event: %s",
            registration_id,
            event_id,
        )
        return RegistrationResult(
            status=STATUS_ACCEPTED,
            message=SUCCESS_MESSAGE,
            registration_id=registration_id,
        )

"""Cascading dropdown resolution for the registration form and admin filters.

The chain is category -> event date -> event name. A change upstream only
recomputes the option sets below it, and selections that no longer belong to
their option set are cleared rather than carried along.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from src.services.event_catalog import EventCatalog
from src.utils.date_utils import parse_timestamp

SELECT_PLACEHOLDER = "- Select -"
ALL_PLACEHOLDER = "- All -"

FIELD_KINDS = ("text", "email", "select")


@dataclass
class FieldSpec:
    """Typed descriptor for one form field."""

    name: str
    label: str
    kind: str = "text"
    required: bool = True
    options_provider: Optional[Callable[[], Dict]] = None

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind: {self.kind}")
        if self.kind != "select" and self.options_provider is not None:
            raise ValueError(f"Only select fields take options: {self.name}")

    def options(self) -> Dict:
        """Resolve the option set; fields without a provider have none."""
        if self.options_provider is None:
            return {}
        return self.options_provider()


@dataclass
class Selection:
    """Current choices in the cascading chain; None means not chosen."""

    category: Optional[str] = None
    event_date: Optional[int] = None
    event_id: Optional[int] = None


@dataclass
class DependentOptions:
    """Option sets for the fields that depend on upstream choices."""

    dates: Dict[int, str] = field(default_factory=dict)
    event_names: Dict[int, str] = field(default_factory=dict)


@dataclass
class AdminFilterOptions:
    """Admin filter choices after dropping an event that no longer fits."""

    dates: Dict[int, str]
    events: Dict[int, str]
    event_date: Optional[int] = None
    event_id: Optional[int] = None


def normalize_selection(category=None, event_date=None, event_id=None) -> Selection:
    """Build a Selection from raw widget values, treating blanks as unset."""
    category = category.strip() if isinstance(category, str) else category
    return Selection(
        category=category or None,
        event_date=parse_timestamp(event_date),
        event_id=parse_timestamp(event_id),
    )


def resolve_dependent_options(
    catalog: EventCatalog,
    category: Optional[str],
    event_date: Optional[int],
) -> DependentOptions:
    """
    Compute the options for the date and event name fields.

    Args:
        catalog: Event lookups
        category: Chosen category, or None
        event_date: Chosen event date timestamp, or None

    Returns:
        DependentOptions where dates are empty until a category is chosen
        and event names are empty until both category and date are chosen
    """
    if not category:
        return DependentOptions()

    dates = catalog.list_dates(category)
    if event_date is None:
        return DependentOptions(dates=dates)

    return DependentOptions(
        dates=dates,
        event_names=catalog.list_event_names(category, event_date),
    )


def clear_stale_selections(
    previous: Optional[Selection],
    current: Selection,
    options: DependentOptions,
) -> Selection:
    """
    Drop downstream choices invalidated by an upstream change.

    Behavior:
        - Category changed: date and event are cleared
        - Date changed: event is cleared
        - A date or event missing from its current option set is cleared
    """
    category = current.category
    event_date = current.event_date
    event_id = current.event_id

    if previous is not None:
        if previous.category != category:
            event_date = None
            event_id = None
        elif previous.event_date != event_date:
            event_id = None

    if event_date is not None and event_date not in options.dates:
        event_date = None
        event_id = None
    if event_id is not None and event_id not in options.event_names:
        event_id = None

    return Selection(category=category, event_date=event_date, event_id=event_id)


def with_placeholder(options: Dict, placeholder: str = SELECT_PLACEHOLDER) -> Dict:
    """Prefix an option mapping with the empty placeholder entry."""
    merged = {"": placeholder}
    merged.update(options)
    return merged


def resolve_admin_filters(
    catalog: EventCatalog,
    event_date: Optional[int],
    event_id: Optional[int],
) -> AdminFilterOptions:
    """
    Compute admin filter options.

    Dates always list every event date. Events are restricted to the chosen
    date when one is set; a chosen event outside that set is dropped.
    """
    dates = catalog.list_all_dates()
    if event_date is not None and event_date not in dates:
        event_date = None

    events = catalog.list_events(event_date)
    if event_id is not None and event_id not in events:
        event_id = None

    return AdminFilterOptions(dates=dates, events=events, event_date=event_date, event_id=event_id)


def resolve_selection(
    catalog: EventCatalog,
    current: Selection,
    previous: Optional[Selection] = None,
):
    """
    Resolve one round of the cascade for a form rerun.

    Returns:
        Tuple of (selection with stale choices cleared, options for that
        selection)
    """
    options = resolve_dependent_options(catalog, current.category, current.event_date)
    selection = clear_stale_selections(previous, current, options)

    if selection.event_date != current.event_date:
        options = resolve_dependent_options(catalog, selection.category, selection.event_date)

    return selection, options

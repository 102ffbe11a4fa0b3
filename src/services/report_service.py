"""Admin registration report and CSV export."""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.models.registration import Registration, RegistrationFilter
from src.services.event_catalog import EventCatalog
from src.services.filter_resolver import AdminFilterOptions, resolve_admin_filters
from src.services.registration_store import RegistrationStore
from src.utils.date_utils import format_date, format_datetime

logger = logging.getLogger(__name__)

MISSING_VALUE = "-"

EXPORT_FILENAME = "event_registrations.csv"
EXPORT_CONTENT_TYPE = "text/csv"
EXPORT_HEADER = [
    "ID",
    "Full Name",
    "Email",
    "College",
    "Department",
    "Event Name",
    "Event Date",
    "Registered On",
]

TABLE_COLUMNS = ["Name", "Email", "Event", "College", "Department", "Submitted"]


@dataclass
class ReportRow:
    """One registration as shown in the admin table."""

    full_name: str
    email: str
    event_name: str
    college_name: str
    department: str
    registered_on: str

    def as_table_row(self) -> Dict[str, str]:
        return dict(zip(TABLE_COLUMNS, [
            self.full_name,
            self.email,
            self.event_name,
            self.college_name,
            self.department,
            self.registered_on,
        ]))


@dataclass
class CsvExport:
    """CSV download payload with its HTTP-style metadata."""

    content: str
    filename: str = EXPORT_FILENAME
    content_type: str = EXPORT_CONTENT_TYPE
    row_count: int = 0
    headers: Dict[str, str] = field(init=False)

    def __post_init__(self):
        self.headers = {
            "Content-Type": self.content_type,
            "Content-Disposition": f'attachment; filename="{self.filename}"',
        }

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


class AdminReportService:
    """Filterable registration list and export for administrators."""

    def __init__(self, catalog: EventCatalog, store: RegistrationStore, tz_name: str = "UTC"):
        self._catalog = catalog
        self._store = store
        self._tz_name = tz_name

    def filter_options(self, event_date=None, event_id=None) -> AdminFilterOptions:
        """Options for the date and event filters, see resolve_admin_filters."""
        return resolve_admin_filters(self._catalog, event_date, event_id)

    def list_rows(self, filters: Optional[RegistrationFilter] = None) -> List[ReportRow]:
        """
        Registrations for the admin table, newest first.

        Registrations whose event is gone render the event name as "-".
        """
        registrations = self._store.list(filters)
        events = self._catalog.get_events(r.event_id for r in registrations)

        rows = []
        for registration in registrations:
            event = events.get(registration.event_id)
            rows.append(ReportRow(
                full_name=registration.full_name,
                email=registration.email,
                event_name=event.name if event else MISSING_VALUE,
                college_name=registration.college_name,
                department=registration.department,
                registered_on=self._format_created(registration),
            ))
        return rows

    def count(self, filters: Optional[RegistrationFilter] = None) -> int:
        """Total registrations matching the filters."""
        return self._store.count_all(filters)

    def export_csv(self, filters: Optional[RegistrationFilter] = None) -> CsvExport:
        """
        Serialize registrations to CSV.

        Args:
            filters: Optional filters; None exports every registration

        Returns:
            CsvExport whose content starts with the fixed 8-column header,
            followed by one line per registration, newest first
        """
        registrations = self._store.list(filters)
        events = self._catalog.get_events(r.event_id for r in registrations)

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_HEADER)

        for registration in registrations:
            event = events.get(registration.event_id)
            writer.writerow([
                registration.id,
                registration.full_name,
                registration.email,
                registration.college_name,
                registration.department,
                event.name if event else MISSING_VALUE,
                format_date(event.event_date, self._tz_name) if event else MISSING_VALUE,
                self._format_created(registration),
            ])

        logger.info("Exported registrations | Count: %d", len(registrations))
        return CsvExport(content=buffer.getvalue(), row_count=len(registrations))

    def _format_created(self, registration: Registration) -> str:
        if registration.created is None:
            return MISSING_VALUE
        return format_datetime(registration.created, self._tz_name)

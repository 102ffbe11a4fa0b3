"""Admin registration list with filters and CSV export."""
import logging
import traceback
from typing import Dict, List

import streamlit as st

from src.models.registration import RegistrationFilter
from src.services.container import get_services
from src.services.filter_resolver import ALL_PLACEHOLDER, with_placeholder
from src.services.report_service import ReportRow
from src.utils.date_utils import parse_timestamp

logger = logging.getLogger(__name__)

DATE_FILTER_KEY = "admin_filter_event_date"
EVENT_FILTER_KEY = "admin_filter_event_id"


def _show_admin_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Admin panel error during %s", context)

    st.error(f"❌ {context} failed: {error}")
    with st.expander("🔍 Error details", expanded=False):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def _table_records(rows: List[ReportRow]) -> List[Dict[str, str]]:
    """Rows shaped for st.dataframe."""
    return [row.as_table_row() for row in rows]


def _total_label(count: int) -> str:
    return f"**Total registrations:** {count}"


def _render_filters(reports) -> RegistrationFilter:
    """Render date/event selectors and return the effective filter."""
    state = st.session_state
    options = reports.filter_options(
        event_date=parse_timestamp(state.get(DATE_FILTER_KEY)),
        event_id=parse_timestamp(state.get(EVENT_FILTER_KEY)),
    )

    if state.get(DATE_FILTER_KEY) not in ("", None) and options.event_date is None:
        state[DATE_FILTER_KEY] = ""
    # Drop an event choice that is not offered under the chosen date
    if state.get(EVENT_FILTER_KEY) not in ("", None) and options.event_id is None:
        state[EVENT_FILTER_KEY] = ""

    date_options = with_placeholder(options.dates, ALL_PLACEHOLDER)
    event_options = with_placeholder(options.events, ALL_PLACEHOLDER)

    st.markdown("### Filters")
    col1, col2 = st.columns(2)
    with col1:
        st.selectbox(
            "Event Date",
            options=list(date_options.keys()),
            format_func=lambda value: date_options.get(value, str(value)),
            key=DATE_FILTER_KEY,
        )
    with col2:
        st.selectbox(
            "Event Name",
            options=list(event_options.keys()),
            format_func=lambda value: event_options.get(value, str(value)),
            key=EVENT_FILTER_KEY,
        )

    return RegistrationFilter(event_id=options.event_id, event_date=options.event_date)


def render_admin_panel() -> None:
    """Render the registration report page."""
    st.markdown("## 📋 Event Registrations")
    reports = get_services().reports

    try:
        filters = _render_filters(reports)
        rows = reports.list_rows(filters)
        total = reports.count(filters)
    except Exception as error:
        _show_admin_exception(error, "Loading registrations")
        return

    try:
        export = reports.export_csv()
        st.download_button(
            "📥 Export CSV",
            data=export.to_bytes(),
            file_name=export.filename,
            mime=export.content_type,
            type="primary",
            key="admin_export_csv",
        )
    except Exception as error:
        _show_admin_exception(error, "Exporting registrations")

    if rows:
        st.dataframe(_table_records(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No registrations found")

    st.markdown(_total_label(total))

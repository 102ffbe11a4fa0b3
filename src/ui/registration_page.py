"""Public event registration page."""
import logging
from typing import Any, Dict, Mapping, Optional

import streamlit as st

from src.services.container import get_services
from src.services.filter_resolver import FieldSpec, Selection
from src.services.registration_service import (
    RegistrationForm,
    RegistrationSubmission,
)
from src.ui.html_utils import notice_html

logger = logging.getLogger(__name__)

KEY_PREFIX = "registration_form_"
PREVIOUS_SELECTION_KEY = "registration_previous_selection"
ERRORS_KEY = "registration_errors"
REJECTED_VALUES_KEY = "registration_rejected_values"
FEEDBACK_KEY = "registration_feedback"

SUBMISSION_FIELDS = (
    "full_name",
    "email",
    "college",
    "department",
    "category",
    "event_date",
    "event_name",
)


def _widget_key(name: str) -> str:
    """Build session-state key for a form field widget."""
    return f"{KEY_PREFIX}{name}"


def _submission_values(state: Mapping[str, Any]) -> Dict[str, Any]:
    """Current widget values keyed by field name, text stripped."""
    values = {}
    for name in SUBMISSION_FIELDS:
        value = state.get(_widget_key(name))
        if isinstance(value, str):
            value = value.strip()
        values[name] = value if value is not None else ""
    return values


def _submission_from_state(state: Mapping[str, Any]) -> RegistrationSubmission:
    """Read the current widget values into a submission."""
    return RegistrationSubmission(**_submission_values(state))


def _outstanding_errors(
    errors: Mapping[str, str],
    rejected_values: Mapping[str, Any],
    current_values: Mapping[str, Any],
) -> Dict[str, str]:
    """Errors of the last rejected submit for fields the user has not edited since."""
    return {
        name: message
        for name, message in errors.items()
        if rejected_values.get(name) == current_values.get(name)
    }


def _selection_state_updates(selection: Selection) -> Dict[str, Any]:
    """Widget values that mirror a resolved selection; "" is the placeholder."""
    return {
        _widget_key("event_date"): selection.event_date if selection.event_date is not None else "",
        _widget_key("event_name"): selection.event_id if selection.event_id is not None else "",
    }


def _closed_notice_html(message: str) -> str:
    return notice_html(message, "registration-closed")


def _render_field(spec: FieldSpec, error: Optional[str]) -> None:
    """Render one widget according to its descriptor."""
    label = f"{spec.label}*" if spec.required else spec.label
    key = _widget_key(spec.name)

    if spec.kind == "select":
        options = spec.options()
        st.selectbox(
            label,
            options=list(options.keys()),
            format_func=lambda value, labels=options: labels.get(value, str(value)),
            key=key,
        )
    else:
        st.text_input(
            label,
            key=key,
            placeholder="name@example.com" if spec.kind == "email" else None,
        )

    if error:
        st.error(error)


def _clear_form_state() -> None:
    for name in SUBMISSION_FIELDS:
        st.session_state.pop(_widget_key(name), None)
    st.session_state.pop(PREVIOUS_SELECTION_KEY, None)
    st.session_state.pop(ERRORS_KEY, None)
    st.session_state.pop(REJECTED_VALUES_KEY, None)


def _render_feedback() -> None:
    feedback = st.session_state.pop(FEEDBACK_KEY, None)
    if feedback:
        st.success(f"✅ {feedback}")


def render_registration_page() -> None:
    """Render the registration form, or the closed notice when no window is open."""
    st.markdown("## 🎓 Event Registration")
    _render_feedback()

    workflow = get_services().workflow
    state = st.session_state

    form: RegistrationForm = workflow.build_form(
        category=state.get(_widget_key("category")),
        event_date=state.get(_widget_key("event_date")),
        event_name=state.get(_widget_key("event_name")),
        previous=state.get(PREVIOUS_SELECTION_KEY),
    )

    if form.closed:
        st.markdown(_closed_notice_html(form.message), unsafe_allow_html=True)
        return

    # Widgets are not instantiated yet in this run, so cleared selections can be written back
    for key, value in _selection_state_updates(form.selection).items():
        if key in state and state[key] != value:
            state[key] = value
    state[PREVIOUS_SELECTION_KEY] = form.selection

    errors = _outstanding_errors(
        state.get(ERRORS_KEY) or {},
        state.get(REJECTED_VALUES_KEY) or {},
        _submission_values(state),
    )
    state[ERRORS_KEY] = errors
    for spec in form.fields:
        _render_field(spec, errors.get(spec.name))

    if st.button("Register", type="primary", key=f"{KEY_PREFIX}submit"):
        submission = _submission_from_state(state)
        result = workflow.submit(submission)

        if result.accepted:
            _clear_form_state()
            state[FEEDBACK_KEY] = result.message
            st.rerun()
        elif result.errors:
            state[ERRORS_KEY] = result.errors
            state[REJECTED_VALUES_KEY] = _submission_values(state)
            st.rerun()
        else:
            logger.info("Submission refused | Status: %s", result.status)
            st.warning(result.message)

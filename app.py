"""
University event registration app
Public registration form and admin registration report
"""
import logging
import streamlit as st

from src.ui.registration_page import render_registration_page
from src.ui.admin_panel import render_admin_panel
from src.utils.config import configure_logging, get_settings

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


# Streamlit page configuration
st.set_page_config(
    page_title="Event Registration",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="collapsed"
)

PAGES = {
    "register": render_registration_page,
    "admin": render_admin_panel,
}


def initialize_session_state():
    """Initialize session state defaults."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "register"

        # Handle URL query parameter for a direct admin link
        if st.query_params.get("page") in PAGES:
            st.session_state.current_page = st.query_params["page"]


def apply_custom_css():
    """Apply custom CSS styles."""
    st.markdown("""
        <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
        }

        .registration-closed {
            background: #f59e0b30;
            border-left: 4px solid #f59e0b;
            border-radius: 8px;
            padding: 12px 16px;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """Render navigation buttons."""
    nav_col1, nav_col2, _ = st.columns([1, 1, 3], gap="small")

    with nav_col1:
        if st.button("📝 Register", use_container_width=True, key="nav_register"):
            st.session_state.current_page = "register"

    with nav_col2:
        if st.button("📋 Registrations", use_container_width=True, key="nav_admin"):
            st.session_state.current_page = "admin"


def render_current_page():
    """Render the page selected in session state."""
    try:
        render = PAGES.get(st.session_state.current_page)
        if render is None:
            st.error(f"Unknown page: {st.session_state.current_page}")
            if st.button("Back to registration"):
                st.session_state.current_page = "register"
                st.rerun()
            return

        render()

    except Exception as e:
        # Error boundary
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again later")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to registration"):
            st.session_state.current_page = "register"
            st.rerun()


def main():
    """Application entry point."""
    try:
        initialize_session_state()
        apply_custom_css()
        render_navigation()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("The application hit an error, please reload the page")
        st.code(str(e))

        if st.button("🔄 Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()

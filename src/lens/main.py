"""
Main Streamlit application for Lens.

This is the entry point for the photo album web application.
"""

import streamlit as st

from lens.config import get_debug_mode
from lens.logging_config import configure_structured_logging, get_logger
from lens.ui.components.common import render_footer, render_header, render_sidebar
from lens.ui.components.error_display import control_flow_exceptions, error_context, get_error_display_manager
from lens.ui.handlers.auth import authenticate_user
from lens.ui.pages.about import render_about_page
from lens.ui.pages.album_editor import render_edit_album_page, render_manage_album_page, render_new_album_page
from lens.ui.pages.albums import render_album_page, render_albums_page
from lens.ui.pages.auth import render_login_page, render_signup_page
from lens.ui.pages.dashboard import render_dashboard_albums_page, render_dashboard_page, render_studio_page
from lens.ui.pages.explore import render_explore_page
from lens.ui.pages.home import render_home_page
from lens.ui.pages.not_found import render_not_found_page
from lens.ui.pages.profile import render_profile_page

configure_structured_logging()
logger = get_logger(__name__)
error_display = get_error_display_manager()

PAGE_RENDERERS = {
    "home": render_home_page,
    "explore": render_explore_page,
    "albums": render_albums_page,
    "album": render_album_page,
    "profile": render_profile_page,
    "about": render_about_page,
    "login": render_login_page,
    "signup": render_signup_page,
    "dashboard": render_dashboard_page,
    "dashboard_albums": render_dashboard_albums_page,
    "new_album": render_new_album_page,
    "manage_album": render_manage_album_page,
    "edit_album": render_edit_album_page,
    "studio": render_studio_page,
}

SESSION_DEFAULTS = {
    "authenticated": False,
    "user_id": None,
    "user_email": None,
    "user_username": None,
    "auth_error": None,
    "current_page": "home",
    "album_id": None,
    "username": None,
}


def initialize_session_state() -> None:
    """Fill in the session keys every page relies on."""
    for key, value in SESSION_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value


def apply_query_params() -> None:
    """Open a shared link such as ?page=album&album_id=... or ?page=profile&username=..."""
    params = st.query_params
    page = params.get("page")
    if not page:
        return

    st.session_state.current_page = page
    for key in ("album_id", "username"):
        if params.get(key):
            st.session_state[key] = params.get(key)
    params.clear()


def render_main_content() -> None:
    """Render the main content area based on current page with error handling."""
    current_page = st.session_state.current_page

    with error_context(f"Failed to load page '{current_page}'."):
        renderer = PAGE_RENDERERS.get(current_page)
        if renderer is None:
            logger.warning("unknown_page", page=current_page)
            render_not_found_page()
        else:
            renderer()


def main() -> None:
    """Main application entry point."""
    logger.info("application_starting", page="main")

    try:
        st.set_page_config(
            page_title="Lens - Photo Albums",
            page_icon="📷",
            layout="wide",
            initial_sidebar_state="expanded",
            menu_items={
                "Get Help": None,
                "Report a bug": None,
                "About": "Lens - a lightweight studio for organizing and sharing photo albums",
            },
        )

        initialize_session_state()
        apply_query_params()

        with error_context("Authentication failed."):
            authenticate_user()

        logger.info(
            "session_initialized",
            authenticated=st.session_state.authenticated,
            current_page=st.session_state.current_page,
            user_email=st.session_state.user_email,
        )

        render_header()
        render_sidebar()

        with st.container():
            render_main_content()

        render_footer()

        if get_debug_mode():
            with st.expander("Debug Info"):
                st.write("Session State:", st.session_state)

    except Exception as e:
        if isinstance(e, control_flow_exceptions()):
            raise
        logger.error("critical_application_error", error=str(e))
        error_display.display_exception(e, context={"operation": "main_application"}, show_details=True)

        if st.button("🔄 Restart application", type="primary"):
            st.rerun()


if __name__ == "__main__":
    main()

"""Authentication handlers for the Lens application."""

import streamlit as st
import structlog

from lens.error_handling import AuthenticationError, ValidationError
from lens.services.auth import AuthService, UserInfo
from lens.services.store import get_lens_store
from lens.ui.components.common import navigate, render_error_message

logger = structlog.get_logger()


def get_auth_service() -> AuthService:
    """Get the authentication service of the current Streamlit session."""
    if "auth_service" not in st.session_state:
        st.session_state.auth_service = AuthService(get_lens_store())
    return st.session_state.auth_service


def _store_session_user(user: UserInfo | None) -> None:
    st.session_state.authenticated = user is not None
    st.session_state.user_id = user.user_id if user else None
    st.session_state.user_email = user.email if user else None
    st.session_state.user_username = user.username if user else None


def authenticate_user() -> bool:
    """
    Sync the session state with the session's signed-in user.

    Returns:
        bool: True if a user is signed in
    """
    service = get_auth_service()
    _store_session_user(service.get_current_user())
    return service.is_authenticated()


def get_current_user() -> UserInfo | None:
    return get_auth_service().get_current_user()


def handle_sign_in(email: str, password: str) -> bool:
    """
    Sign in with the login form values.

    Returns:
        bool: True if signed in, False if the credentials were rejected
    """
    try:
        user = get_auth_service().sign_in(email, password)
    except AuthenticationError as e:
        st.session_state.auth_error = e.user_message
        return False

    _store_session_user(user)
    st.session_state.auth_error = None
    logger.info("authentication_success", user_id=user.user_id)
    return True


def handle_sign_up(email: str, password: str, username: str, full_name: str) -> bool:
    """
    Register with the sign-up form values.

    Returns:
        bool: True if the account was created and signed in
    """
    try:
        user = get_auth_service().sign_up(email, password, username, full_name)
    except ValidationError as e:
        st.session_state.auth_error = e.user_message
        return False

    _store_session_user(user)
    st.session_state.auth_error = None
    return True


def handle_logout() -> None:
    """Handle user logout."""
    get_auth_service().sign_out()

    _store_session_user(None)
    st.session_state.auth_error = None

    logger.info("user_logout")
    navigate("home")


def require_authentication() -> bool:
    """
    Require authentication for dashboard pages.

    Returns:
        bool: True if authenticated, False otherwise
    """
    if not st.session_state.authenticated:
        render_error_message(
            error_type="Sign in required",
            message="Please sign in to open your dashboard.",
        )

        if st.button("Sign in", use_container_width=True, type="primary", key="require_auth_login"):
            navigate("login")

        return False

    return True

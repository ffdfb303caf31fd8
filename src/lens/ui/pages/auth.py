"""Sign-in and sign-up pages."""

import streamlit as st

from lens.ui.components.common import navigate
from lens.ui.handlers.auth import handle_sign_in, handle_sign_up


def _render_auth_error() -> None:
    if st.session_state.get("auth_error"):
        st.error(st.session_state.auth_error)


def render_login_page() -> None:
    """Render the email and password sign-in form."""
    if st.session_state.authenticated:
        navigate("dashboard")

    st.markdown("## Sign in")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", use_container_width=True, type="primary")

    if submitted and handle_sign_in(email, password):
        navigate("dashboard")

    _render_auth_error()

    if st.button("No account yet? Sign up", key="login_to_signup", type="tertiary"):
        st.session_state.auth_error = None
        navigate("signup")


def render_signup_page() -> None:
    """Render the account registration form."""
    if st.session_state.authenticated:
        navigate("dashboard")

    st.markdown("## Create your account")

    with st.form("signup_form"):
        full_name = st.text_input("Full name")
        username = st.text_input("Username", help="3-30 characters: lowercase letters, numbers, '.', '_' or '-'")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password", help="At least 8 characters")
        submitted = st.form_submit_button("Sign up", use_container_width=True, type="primary")

    if submitted and handle_sign_up(email, password, username, full_name):
        navigate("dashboard")

    _render_auth_error()

    if st.button("Already have an account? Sign in", key="signup_to_login", type="tertiary"):
        st.session_state.auth_error = None
        navigate("login")

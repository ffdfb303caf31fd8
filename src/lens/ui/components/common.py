"""Reusable UI components for the Lens application."""

from typing import Any

import streamlit as st

from lens import __version__
from lens.logging_config import get_logger
from lens.models.album import Album

logger = get_logger(__name__)

PUBLIC_PAGES = {"🏠 Home": "home", "🧭 Explore": "explore", "🗂️ Albums": "albums", "ℹ️ About": "about"}
DASHBOARD_PAGES = {
    "📊 Dashboard": "dashboard",
    "📁 My albums": "dashboard_albums",
    "➕ New album": "new_album",
    "🖼️ Studio": "studio",
}


def navigate(page: str, **params: Any) -> None:
    """Switch to a page, passing parameters such as album_id or username through session state."""
    logger.info("page_navigation", from_page=st.session_state.get("current_page"), to_page=page, **params)
    st.session_state.current_page = page
    for key, value in params.items():
        st.session_state[key] = value
    st.rerun()


def render_empty_state(
    title: str,
    description: str,
    icon: str = "📭",
    action_text: str | None = None,
    action_page: str | None = None,
) -> None:
    """
    Render an empty state message with optional action button.

    Args:
        title: Main title for the empty state
        description: Description text
        icon: Emoji icon to display
        action_text: Text for action button (optional)
        action_page: Page to navigate to when action button is clicked (optional)
    """
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 4rem; margin-bottom: 1rem;'>{icon}</div>
            <h3 style='color: #666; margin-bottom: 1rem;'>{title}</h3>
            <p style='color: #888; margin-bottom: 2rem;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )

        if action_text and action_page:
            if st.button(action_text, use_container_width=True, type="primary", key=f"empty_{action_page}"):
                navigate(action_page)


def render_error_message(error_type: str, message: str, details: str | None = None) -> None:
    """
    Render a standardized error message.

    Args:
        error_type: Type of error (e.g., "Authentication required")
        message: Main error message
        details: Additional error details (optional)
    """
    st.error(f"**{error_type}:** {message}")

    if details:
        with st.expander("🔍 Details"):
            st.code(details)


def render_privacy_badge(album: Album) -> None:
    if album.is_public:
        st.markdown(":green-background[Public]")
    else:
        st.markdown(":orange-background[Private]")


def render_album_cards(
    albums: list[Album],
    cover_urls: dict[str, str | None],
    target_page: str = "album",
    show_privacy: bool = False,
    show_owner: bool = True,
    columns: int = 3,
    key_prefix: str = "album_card",
) -> None:
    """
    Render albums as a grid of cards with cover image, title and counts.

    Args:
        albums: Albums to show, in display order
        cover_urls: Displayable cover URL per album id
        target_page: Page opened by a card's button
        show_privacy: Show the public/private badge
        show_owner: Show the owner's username
        columns: Cards per row
        key_prefix: Widget key prefix, unique per page
    """
    for start in range(0, len(albums), columns):
        cols = st.columns(columns)
        for col, album in zip(cols, albums[start : start + columns]):
            with col, st.container(border=True):
                cover = cover_urls.get(album.id)
                if cover:
                    st.image(cover, use_container_width=True)
                else:
                    st.caption("No cover yet")

                st.markdown(f"**{album.display_title}**")
                st.caption(album.description or "No description.")

                if show_privacy:
                    render_privacy_badge(album)
                if show_owner:
                    st.caption(f"By {album.owner_username or 'User'}")
                st.caption(f"{album.images_count}/5 items" if show_privacy else f"{album.images_count} images")

                if st.button("Open", key=f"{key_prefix}_{album.id}", use_container_width=True):
                    navigate(target_page, album_id=album.id)


def render_header() -> None:
    """Render the application header."""
    st.markdown("# 📷 Lens")
    st.divider()


def render_sidebar() -> None:
    """Render the application sidebar with navigation, search and the account section."""
    from lens.ui.components.search import render_album_search
    from lens.ui.handlers.auth import handle_logout

    with st.sidebar:
        st.markdown("### 📷 Lens")
        st.caption("Lens Studio")
        st.divider()

        render_album_search()
        st.divider()

        current_page = st.session_state.current_page

        st.subheader("Browse")
        _render_nav_buttons(PUBLIC_PAGES, current_page)

        st.divider()

        if st.session_state.authenticated:
            st.subheader("Studio")
            _render_nav_buttons(DASHBOARD_PAGES, current_page)

            st.divider()
            username = st.session_state.get("user_username")
            st.markdown(f"📧 {st.session_state.user_email}")
            if username and st.button("👤 My profile", use_container_width=True, key="nav_own_profile"):
                navigate("profile", username=username)
            if st.button("🚪 Sign out", use_container_width=True, key="nav_sign_out"):
                handle_logout()
        else:
            st.subheader("🔐 Account")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Sign in", use_container_width=True, key="nav_login"):
                    navigate("login")
            with col2:
                if st.button("Sign up", use_container_width=True, key="nav_signup", type="primary"):
                    navigate("signup")

            if st.session_state.auth_error:
                st.error(st.session_state.auth_error)


def _render_nav_buttons(pages: dict[str, str], current_page: str) -> None:
    for page_name, page_key in pages.items():
        if st.button(
            page_name,
            key=f"nav_{page_key}",
            use_container_width=True,
            type="primary" if page_key == current_page else "secondary",
        ):
            navigate(page_key)


def render_footer() -> None:
    """Render the application footer."""
    st.divider()

    st.markdown(
        f"""
    <div style='text-align: center; color: #666; font-size: 0.8em;'>
        <strong>Lens v{__version__}</strong>
    </div>
    """,
        unsafe_allow_html=True,
    )

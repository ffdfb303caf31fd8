"""Dashboard pages: overview, the user's albums and the studio."""

import streamlit as st

from lens.services.albums import get_album_service
from lens.ui.components.common import navigate, render_album_cards, render_empty_state
from lens.ui.components.gallery import render_gallery_grid
from lens.ui.handlers.albums import (
    album_cover_urls,
    explore_image_info,
    explore_image_src,
    load_owner_albums,
    load_studio_images,
)
from lens.ui.handlers.auth import get_auth_service, require_authentication


def render_dashboard_page() -> None:
    """Render the signed-in user's library overview."""
    if not require_authentication():
        return

    profile = get_auth_service().get_profile(st.session_state.user_id)
    stats = get_album_service().dashboard_stats(st.session_state.user_id)

    st.markdown("## Dashboard")
    st.caption(f"Welcome back, {profile.full_name or profile.username or 'there'}. Quick overview of your library.")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Albums", stats["albums"])
    with col2:
        st.metric("Images", stats["images"])

    st.divider()

    col1, col2 = st.columns(2)
    with col1:
        if st.button("➕ New album", use_container_width=True, type="primary", key="dashboard_new_album"):
            navigate("new_album")
    with col2:
        if st.button("📁 My albums", use_container_width=True, key="dashboard_my_albums"):
            navigate("dashboard_albums")

    if profile.username and st.button("👤 View profile", key="dashboard_profile", type="tertiary"):
        navigate("profile", username=profile.username)


def render_dashboard_albums_page() -> None:
    """Render the cards of all the user's albums, private ones included."""
    if not require_authentication():
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        st.markdown("## My albums")
        st.caption("Organize your photos into collections.")
    with col2:
        if st.button("➕ New album", use_container_width=True, type="primary", key="my_albums_new"):
            navigate("new_album")

    albums = load_owner_albums(st.session_state.user_id)
    if not albums:
        render_empty_state(
            title="You don't have any albums yet.",
            description="Create an album to start collecting images.",
            icon="📁",
            action_text="Create album",
            action_page="new_album",
        )
        return

    render_album_cards(
        albums,
        album_cover_urls(albums),
        target_page="manage_album",
        show_privacy=True,
        show_owner=False,
        key_prefix="my_album",
    )


def render_studio_page() -> None:
    """Render every image across the user's albums."""
    if not require_authentication():
        return

    st.markdown("## Studio")
    st.caption("Browse all images across your albums.")

    render_gallery_grid(
        load_studio_images(st.session_state.user_id),
        key="studio",
        get_src=explore_image_src,
        get_info=explore_image_info,
        title="All Album Images",
        empty_message="Upload images to an album to see them here.",
        layout="masonry",
    )

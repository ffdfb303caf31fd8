"""Public album browser and album view pages."""

import streamlit as st

from lens.logging_config import get_logger
from lens.ui.components.common import navigate, render_album_cards, render_empty_state, render_privacy_badge
from lens.ui.components.gallery import render_gallery_grid
from lens.ui.handlers.albums import (
    album_cover_urls,
    album_image_info,
    album_image_src,
    load_album,
    load_public_albums,
)
from lens.ui.pages.not_found import render_not_found_page

logger = get_logger(__name__)


def render_albums_page() -> None:
    """Render the cards of all public albums, newest first."""
    st.markdown("## Public Albums")
    st.caption("Discover collections shared by the community.")

    albums = load_public_albums()
    if not albums:
        render_empty_state(
            title="No public albums yet.",
            description="Albums appear here once their owners make them public.",
            icon="🗂️",
        )
        return

    render_album_cards(albums, album_cover_urls(albums), key_prefix="public_album")


def render_album_page() -> None:
    """Render a single album for its owner, or for anyone when it is public."""
    album_id = st.session_state.get("album_id")
    album = load_album(album_id)

    if album is None:
        render_not_found_page("Album not found.")
        return

    viewer_id = st.session_state.get("user_id")
    if not album.can_view(viewer_id):
        logger.info("private_album_blocked", album_id=album.id, viewer_id=viewer_id)
        render_not_found_page("This album is private.")
        return

    if st.button("← Back to albums", key="album_back"):
        navigate("albums")

    st.markdown(f"## {album.display_title}")
    st.caption("Public album" if album.is_public else "Private album")
    if album.description:
        st.markdown(album.description)

    col1, col2 = st.columns([3, 1])
    with col1:
        if album.owner_username and st.button(f"By {album.owner_username}", key="album_owner", type="tertiary"):
            navigate("profile", username=album.owner_username)
    with col2:
        if album.is_owned_by(viewer_id):
            render_privacy_badge(album)
            if st.button("⚙️ Manage", use_container_width=True, key="album_manage"):
                navigate("manage_album", album_id=album.id)

    render_gallery_grid(
        album.images,
        key=f"album_{album.id}",
        get_src=album_image_src,
        get_info=album_image_info(album),
        title=album.display_title,
        show_header=False,
    )

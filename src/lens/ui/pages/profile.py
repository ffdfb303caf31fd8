"""Public profile page, addressed by username."""

import streamlit as st

from lens.services.albums import profile_stats
from lens.ui.components.common import render_album_cards, render_empty_state
from lens.ui.handlers.albums import album_cover_urls, load_profile, load_profile_albums
from lens.ui.pages.not_found import render_not_found_page


def render_profile_page() -> None:
    """Render a user's profile with stats and album cards."""
    username = st.session_state.get("username") or ""
    profile = load_profile(username)

    if profile is None:
        render_not_found_page()
        return

    is_owner = bool(st.session_state.get("user_id")) and st.session_state.user_id == profile.uid
    albums = load_profile_albums(profile.uid, is_owner)

    st.markdown(f"## {profile.display_name}")
    st.caption(f"@{profile.username}")

    stats = profile_stats(albums, is_owner)
    for col, stat in zip(st.columns(len(stats)), stats):
        with col:
            st.metric(stat.label, stat.value)

    st.divider()

    if not albums:
        render_empty_state(
            title="No albums yet.",
            description="Albums show up here once they are created." if is_owner else "Nothing public to show.",
            icon="🗂️",
        )
        return

    render_album_cards(
        albums,
        album_cover_urls(albums),
        show_privacy=is_owner,
        show_owner=False,
        key_prefix="profile_album",
    )

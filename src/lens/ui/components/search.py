"""Sidebar search over public album titles."""

import streamlit as st

from lens.services.search import search_albums
from lens.ui.components.common import navigate
from lens.ui.handlers.albums import load_public_albums


def render_album_search() -> None:
    term = st.text_input(
        "Search",
        key="album_search_term",
        placeholder="Search public albums by title...",
        label_visibility="collapsed",
    )

    if not term.strip():
        return

    results = search_albums(load_public_albums(include_empty=True), term)
    if not results:
        st.caption("No public albums found.")
        return

    for result in results:
        if st.button(
            f"{result.title} · {result.images_count} images",
            key=f"search_result_{result.id}",
            use_container_width=True,
        ):
            st.session_state.pop("album_search_term", None)
            navigate("album", album_id=result.id)

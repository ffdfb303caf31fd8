"""Home page for the Lens application."""

import streamlit as st

from lens.ui.components.common import navigate


def render_home_page() -> None:
    """Render the landing page."""
    st.markdown("## Curate your albums in light, share them in moments.")
    st.caption("Lens keeps your photo albums in one place, private by default and public when you are ready.")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🗂️ Browse albums", use_container_width=True, type="primary", key="home_browse"):
            navigate("albums")
    with col2:
        if st.button("🧭 Explore images", use_container_width=True, key="home_explore"):
            navigate("explore")

    st.divider()

    with st.container(border=True):
        st.markdown("### Build your next story")
        st.markdown("Group up to five images into an album, add a description and choose who can see it.")

        if st.session_state.authenticated:
            if st.button("🖼️ Explore the studio", use_container_width=True, key="home_studio"):
                navigate("studio")
        elif st.button("Create an account", use_container_width=True, key="home_signup"):
            navigate("signup")

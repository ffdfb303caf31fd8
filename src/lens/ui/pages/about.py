"""About page for the Lens application."""

import streamlit as st


def render_about_page() -> None:
    st.markdown("## About Lens")
    st.markdown("Lens is a lightweight studio for organizing and sharing photo albums.")

    col1, col2, col3 = st.columns(3)
    with col1, st.container(border=True):
        st.markdown("**Albums**")
        st.caption("Collect up to five images per album with a title and description.")
    with col2, st.container(border=True):
        st.markdown("**Privacy**")
        st.caption("Albums start private. Make them public to show them on your profile and in Explore.")
    with col3, st.container(border=True):
        st.markdown("**Sharing**")
        st.caption("Every user gets a profile page at their username.")

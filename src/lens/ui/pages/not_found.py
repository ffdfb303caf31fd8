"""Fallback page for unknown or inaccessible pages."""

import streamlit as st

from lens.ui.components.common import navigate


def render_not_found_page(message: str = "The page you are looking for does not exist or is private.") -> None:
    st.markdown(
        """
    <div style='text-align: center; padding: 2rem 0;'>
        <div style='font-size: 3rem; font-weight: 700;'>404</div>
        <h3>Page not found</h3>
    </div>
    """,
        unsafe_allow_html=True,
    )
    st.markdown(f"<p style='text-align: center; color: #888;'>{message}</p>", unsafe_allow_html=True)

    col1, col2, col3 = st.columns([1, 1, 1])
    with col2:
        if st.button("🏠 Go home", use_container_width=True, type="primary", key="not_found_home"):
            navigate("home")

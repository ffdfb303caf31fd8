"""Explore page: a community gallery of images from public albums."""

import streamlit as st

from lens.ui.components.gallery import render_gallery_grid
from lens.ui.handlers.albums import explore_image_info, explore_image_src, load_explore_images


def render_explore_page() -> None:
    """Render every image of every public album in one gallery."""
    st.markdown("## Explore")
    st.caption("A curated stream of images from public albums.")

    images = load_explore_images()

    render_gallery_grid(
        images,
        key="explore",
        get_src=explore_image_src,
        get_info=explore_image_info,
        title="Community Gallery",
        description="Only images from public albums are shown here.",
        empty_message="No public images yet.",
    )

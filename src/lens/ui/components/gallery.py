"""Gallery grid and lightbox components for the Lens application."""

import html
from collections.abc import Callable
from functools import partial
from typing import Any, TypeVar

import streamlit as st

from lens.logging_config import get_logger
from lens.services.image_processor import get_image_processor
from lens.utils.gallery_layout import (
    DEFAULT_ROW_GAP,
    DEFAULT_ROW_HEIGHT,
    GalleryImage,
    GalleryLayout,
    ImageInfo,
    compute_justified_rows,
    compute_masonry_columns,
    normalize_images,
)
from lens.utils.lightbox import LightboxState

logger = get_logger(__name__)

T = TypeVar("T")

# Streamlit cannot measure the rendered width; rows are laid out for this width and scaled by st.columns
CONTAINER_WIDTH = 1100
PAN_STEP = 80


def _lightbox_state(key: str, count: int) -> LightboxState:
    state_key = f"{key}_lightbox"
    state = st.session_state.get(state_key)
    if not isinstance(state, LightboxState) or state.count != count:
        state = LightboxState(count=count)
        st.session_state[state_key] = state
    return state


def _pan(state: LightboxState, dx: float, dy: float) -> None:
    state.pointer_down(0, 0)
    state.pointer_move(dx, dy)
    state.pointer_up()


def _render_lightbox_body(key: str, images: list[GalleryImage], title: str | None) -> None:
    state: LightboxState = st.session_state[f"{key}_lightbox"]
    details = state.describe(images, gallery_title=title)
    if details is None:
        return

    current = images[state.index]
    st.markdown(
        f"""
    <div style='height: 70vh; overflow: hidden; display: flex; align-items: center;
                justify-content: center; background: rgba(0,0,0,0.5); border-radius: 1rem;'>
        <img src="{html.escape(current.src, quote=True)}" alt="{html.escape(current.alt, quote=True)}"
             style='max-height: 68vh; max-width: 100%; object-fit: contain; border-radius: 0.75rem;
                    transform: {state.transform()}; transition: transform 0.3s ease;'/>
    </div>
    """,
        unsafe_allow_html=True,
    )

    meta = []
    if details.size:
        meta.append(details.size)
    if details.dimensions:
        meta.append(f"{details.dimensions[0]}×{details.dimensions[1]}")
    if details.album_title:
        meta.append(f"Album: {details.album_title}")
    st.markdown(f"**{details.title}**")
    if meta:
        st.caption(" · ".join(meta))

    if details.owner_username:
        if st.button(f"By {details.owner_username}", key=f"{key}_lb_owner", type="tertiary"):
            state.close()
            st.session_state.current_page = "profile"
            st.session_state.username = details.owner_username
            st.rerun()
    elif details.owner_label:
        st.caption(details.owner_label)

    nav = st.columns([1, 1, 2, 1, 1, 1, 1])
    with nav[0]:
        if st.button("◀", key=f"{key}_lb_prev", disabled=not state.can_go_prev):
            state.handle_key("ArrowLeft")
            st.rerun(scope="fragment")
    with nav[1]:
        if st.button("▶", key=f"{key}_lb_next", disabled=not state.can_go_next):
            state.handle_key("ArrowRight")
            st.rerun(scope="fragment")
    with nav[2]:
        st.caption(details.counter)
    with nav[3]:
        if st.button("➖", key=f"{key}_lb_zoom_out", disabled=not state.can_zoom_out):
            state.zoom_out()
            st.rerun(scope="fragment")
    with nav[4]:
        if st.button("↺", key=f"{key}_lb_reset"):
            state.reset()
            st.rerun(scope="fragment")
    with nav[5]:
        if st.button("➕", key=f"{key}_lb_zoom_in", disabled=not state.can_zoom_in):
            state.zoom_in()
            st.rerun(scope="fragment")
    with nav[6]:
        if st.button("✕", key=f"{key}_lb_close"):
            state.close()
            st.rerun()

    if state.scale > 1:
        pan = st.columns(4)
        for col, (label, dx, dy) in zip(
            pan, [("←", -PAN_STEP, 0), ("↑", 0, -PAN_STEP), ("↓", 0, PAN_STEP), ("→", PAN_STEP, 0)]
        ):
            with col:
                if st.button(label, key=f"{key}_lb_pan_{label}", use_container_width=True):
                    _pan(state, dx, dy)
                    st.rerun(scope="fragment")


def _close_lightbox(key: str) -> None:
    state = st.session_state.get(f"{key}_lightbox")
    if isinstance(state, LightboxState):
        state.close()


def _show_lightbox(key: str, images: list[GalleryImage], title: str | None) -> None:
    # Esc, the dialog's own close button and clicks outside it all close the lightbox state
    dialog = st.dialog("Image preview", width="large", on_dismiss=partial(_close_lightbox, key))
    dialog(_render_lightbox_body)(key, images, title)


@st.cache_data(ttl=3600, show_spinner=False)
def measure_image(src: str) -> tuple[int, int] | None:
    """Pixel dimensions of an image stored without them."""
    return get_image_processor().fetch_dimensions(src)


def _measure_missing(images: list[GalleryImage], state: LightboxState) -> None:
    for image in images:
        if (image.info and image.info.dimensions) or image.src in state.measured:
            continue
        dimensions = measure_image(image.src)
        if dimensions:
            state.record_dimensions(image.src, *dimensions)


def _render_item(
    key: str,
    image: GalleryImage,
    index: int,
    state: LightboxState,
    enable_lightbox: bool,
    is_disabled: Callable[[Any, int], bool] | None,
    overlay: Callable[[Any, int], None] | None,
) -> None:
    disabled = is_disabled(image.original, index) if is_disabled else False

    if disabled:
        st.markdown(
            f"<img src='{html.escape(image.src, quote=True)}' alt='{html.escape(image.alt, quote=True)}' "
            "style='width: 100%; border-radius: 0.75rem; opacity: 0.6; filter: grayscale(1);'/>",
            unsafe_allow_html=True,
        )
    else:
        st.image(image.src, caption=None, use_container_width=True)

    if overlay:
        overlay(image.original, index)

    if enable_lightbox and not disabled:
        if st.button("🔍", key=f"{key}_open_{index}", help=f"Open image {index + 1}"):
            state.open_at(index)
            st.rerun()


def render_gallery_grid(
    images: list[T],
    key: str,
    get_src: Callable[[T, int], str | None] | None = None,
    get_alt: Callable[[T, int], str | None] | None = None,
    get_info: Callable[[T, int], ImageInfo] | None = None,
    title: str = "Gallery",
    description: str | None = None,
    show_header: bool = True,
    empty_message: str = "No images yet.",
    enable_lightbox: bool = True,
    is_disabled: Callable[[T, int], bool] | None = None,
    overlay: Callable[[T, int], None] | None = None,
    layout: GalleryLayout = "justified",
    row_height: int = DEFAULT_ROW_HEIGHT,
    row_gap: int = DEFAULT_ROW_GAP,
) -> list[GalleryImage[T]]:
    """
    Render images in a justified (or masonry) grid with an optional lightbox.

    Args:
        images: Image records of any shape
        key: Widget key prefix, unique per page
        get_src: Source resolver
        get_alt: Alt text resolver
        get_info: Lightbox info resolver
        title: Heading, also used for fallback alt texts
        description: Text below the heading
        show_header: Show heading and image count
        empty_message: Text shown when there are no images
        enable_lightbox: Allow opening images in the lightbox
        is_disabled: Items for which this returns True are dimmed and cannot be opened
        overlay: Renders per-item controls under the image, e.g. a remove button
        layout: "justified" or "masonry"
        row_height: Target row height for the justified layout
        row_gap: Gap between items for the justified layout

    Returns:
        The normalized gallery items
    """
    normalized = normalize_images(images, title, get_src, get_alt, get_info)
    state = _lightbox_state(key, len(normalized))

    if show_header:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.subheader(title)
            if description:
                st.caption(description)
        with col2:
            st.caption(f"{len(normalized)} images")

    if not normalized:
        st.info(empty_message)
        return normalized

    _measure_missing(normalized, state)

    if layout == "masonry":
        columns = compute_masonry_columns(normalized, columns=3)
        for col, items in zip(st.columns(len(columns)), columns):
            with col:
                for item in items:
                    _render_item(key, item.image, item.index, state, enable_lightbox, is_disabled, overlay)
    else:
        rows = compute_justified_rows(normalized, CONTAINER_WIDTH, row_height, row_gap, dimensions=state.measured)
        for row in rows:
            widths = [item.width(row.height) for item in row.items]
            # A short trailing row keeps its natural width
            used = sum(widths) + row_gap * (len(widths) - 1)
            if used < CONTAINER_WIDTH:
                widths.append(CONTAINER_WIDTH - used)
            cols = st.columns(widths, gap="small")
            for col, item in zip(cols, row.items):
                with col:
                    _render_item(key, item.image, item.index, state, enable_lightbox, is_disabled, overlay)

    if enable_lightbox and state.open:
        _show_lightbox(key, normalized, title)

    return normalized

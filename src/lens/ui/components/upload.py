"""Image selection component for album forms."""

import streamlit as st

from lens.logging_config import get_logger
from lens.services.image_processor import MAX_IMAGES, ImageFile, get_image_processor
from lens.ui.components.error_display import get_error_display_manager

logger = get_logger(__name__)

ACCEPTED_EXTENSIONS = ["jpg", "jpeg", "png", "webp"]


def render_image_uploader(key: str, max_files: int = MAX_IMAGES, current_count: int = 0) -> list[ImageFile]:
    """
    Render a multi-file picker and return the files that pass validation.

    Args:
        key: Widget key
        max_files: Maximum number of images in the album
        current_count: Images the album already keeps

    Returns:
        Accepted files in selection order
    """
    uploaded_files = st.file_uploader(
        "Drag & drop images or click to select",
        type=ACCEPTED_EXTENSIONS,
        accept_multiple_files=True,
        key=key,
        help="JPEG, PNG or WebP, up to 5MB each",
    )

    if not uploaded_files:
        return []

    files = [ImageFile.from_uploaded_file(uploaded) for uploaded in uploaded_files]
    accepted, errors = get_image_processor().validate_selection(files, max_files=max_files, current_count=current_count)

    get_error_display_manager().display_messages(errors)

    if accepted:
        st.caption("Selected: " + ", ".join(file.name for file in accepted))

    return accepted

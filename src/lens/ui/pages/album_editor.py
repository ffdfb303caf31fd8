"""Album forms: create, manage and edit."""

import streamlit as st

from lens.error_handling import AuthenticationError, AuthorizationError, LensError
from lens.logging_config import get_logger
from lens.models.album import PRIVACY_VALUES, Album, AlbumImage
from lens.services.albums import get_album_service
from lens.services.image_processor import MAX_IMAGES
from lens.ui.components.common import navigate, render_privacy_badge
from lens.ui.components.error_display import get_error_display_manager
from lens.ui.components.gallery import render_gallery_grid
from lens.ui.components.upload import render_image_uploader
from lens.ui.handlers.albums import album_image_info, album_image_src, load_album, refresh_album_caches
from lens.ui.handlers.auth import get_auth_service, get_current_user, require_authentication
from lens.ui.pages.not_found import render_not_found_page

logger = get_logger(__name__)
error_display = get_error_display_manager()


def _privacy_label(value: str) -> str:
    return "🌍 Public" if value == "public" else "🔒 Private"


def _uploader_key(name: str) -> str:
    """Uploader widget key; bumping the counter empties the widget after a save."""
    counter = st.session_state.get(f"{name}_uploader_counter", 0)
    return f"{name}_uploader_{counter}"


def _reset_uploader(name: str) -> None:
    st.session_state[f"{name}_uploader_counter"] = st.session_state.get(f"{name}_uploader_counter", 0) + 1


def _load_editable_album() -> Album | None:
    """Load the album in session state, rendering an error page unless the user owns it."""
    album = load_album(st.session_state.get("album_id"))
    if album is None:
        render_not_found_page("Album not found.")
        return None
    try:
        get_auth_service().ensure_owner(album)
    except (AuthenticationError, AuthorizationError) as e:
        error_display.display_error(e.get_error_info())
        return None
    return album


def render_new_album_page() -> None:
    """Render the form that creates an album with up to five images."""
    if not require_authentication():
        return

    st.markdown("## New album")

    title = st.text_input("Title", key="new_album_title")
    description = st.text_area("Description", key="new_album_description")
    privacy = st.radio(
        "Privacy", PRIVACY_VALUES, format_func=_privacy_label, horizontal=True, key="new_album_privacy"
    )

    st.caption(f"You can add up to {MAX_IMAGES} more image(s).")
    files = render_image_uploader(_uploader_key("new_album"), max_files=MAX_IMAGES)

    if st.button("Create album", type="primary", use_container_width=True, key="new_album_submit"):
        try:
            with st.spinner("Creating album..."):
                album = get_album_service().create_album(get_current_user(), title, description, privacy, files)
        except LensError as e:
            error_display.display_error(e.get_error_info())
            refresh_album_caches()
            return

        refresh_album_caches()
        _reset_uploader("new_album")
        for key in ("new_album_title", "new_album_description", "new_album_privacy"):
            st.session_state.pop(key, None)
        navigate("manage_album", album_id=album.id)


def render_manage_album_page() -> None:
    """Render an owned album with per-image removal and album deletion."""
    if not require_authentication():
        return

    album = _load_editable_album()
    if album is None:
        return

    if st.button("← My albums", key="manage_back"):
        navigate("dashboard_albums")

    st.markdown(f"## {album.display_title}")
    render_privacy_badge(album)
    st.caption(album.description or "No description.")
    st.caption(f"{album.images_count}/{MAX_IMAGES} items")

    if warning := st.session_state.pop("manage_album_warning", None):
        error_display.display_warning_message(warning)

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("✏️ Edit album", use_container_width=True, key="manage_edit"):
            navigate("edit_album", album_id=album.id)
    with col2:
        if st.button("👁️ View album", use_container_width=True, key="manage_view"):
            navigate("album", album_id=album.id)
    with col3:
        if st.button("🗑️ Delete album", use_container_width=True, key="manage_delete"):
            st.session_state.confirm_delete_album = album.id

    if st.session_state.get("confirm_delete_album") == album.id:
        _render_delete_confirmation(album)

    st.divider()

    render_gallery_grid(
        album.images,
        key=f"manage_{album.id}",
        get_src=album_image_src,
        get_info=album_image_info(album),
        title=album.display_title,
        show_header=False,
        overlay=_removal_controls(album),
    )


def _removal_controls(album: Album):
    """Per-image remove button that asks for confirmation first."""
    pending = st.session_state.get("confirm_remove_image")

    def overlay(image: AlbumImage, index: int) -> None:
        st.caption(image.file_name or "Image")
        if pending == image.key:
            st.warning("Remove this image?")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Remove", type="primary", key=f"confirm_remove_{image.key}"):
                    _remove_image(album, image.key)
            with col2:
                if st.button("Cancel", key=f"cancel_remove_{image.key}"):
                    st.session_state.confirm_remove_image = None
                    st.rerun()
        elif st.button("Remove image", use_container_width=True, key=f"remove_{image.key}"):
            st.session_state.confirm_remove_image = image.key
            st.rerun()

    return overlay


def _remove_image(album: Album, key: str) -> None:
    st.session_state.confirm_remove_image = None
    try:
        result = get_album_service().remove_image(album.id, get_current_user(), key)
    except LensError as e:
        error_display.display_error(e.get_error_info())
        return

    refresh_album_caches()
    if result.warning:
        st.session_state.manage_album_warning = result.warning
    st.rerun()


def _render_delete_confirmation(album: Album) -> None:
    with st.container(border=True):
        st.warning(f"Delete **{album.display_title}** and all of its images? This cannot be undone.")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Delete", type="primary", use_container_width=True, key="confirm_delete"):
                st.session_state.confirm_delete_album = None
                try:
                    with st.spinner("Deleting album..."):
                        get_album_service().delete_album(album.id, get_current_user())
                except LensError as e:
                    error_display.display_error(e.get_error_info())
                    return
                refresh_album_caches()
                navigate("dashboard_albums")
        with col2:
            if st.button("Cancel", use_container_width=True, key="cancel_delete"):
                st.session_state.confirm_delete_album = None
                st.rerun()


def _removal_key(album: Album, image: AlbumImage) -> str:
    return f"edit_remove_{album.id}_{image.key}"


def _marked_for_removal(album: Album, image: AlbumImage) -> bool:
    return bool(st.session_state.get(_removal_key(album, image)))


def render_edit_album_page() -> None:
    """Render the edit form: details, images marked for removal and new images."""
    if not require_authentication():
        return

    album = _load_editable_album()
    if album is None:
        return

    if st.button("← Back", key="edit_back"):
        navigate("manage_album", album_id=album.id)

    st.markdown("## Edit album")

    title = st.text_input("Title", value=album.title, key=f"edit_title_{album.id}")
    description = st.text_area("Description", value=album.description, key=f"edit_description_{album.id}")
    privacy = st.radio(
        "Privacy",
        PRIVACY_VALUES,
        index=PRIVACY_VALUES.index(album.privacy),
        format_func=_privacy_label,
        horizontal=True,
        key=f"edit_privacy_{album.id}",
    )

    if album.images:
        st.markdown("**Images**")
        render_gallery_grid(
            album.images,
            key=f"edit_{album.id}",
            get_src=album_image_src,
            get_info=album_image_info(album),
            title=album.display_title,
            show_header=False,
            is_disabled=lambda image, index: _marked_for_removal(album, image),
            overlay=lambda image, index: st.checkbox("Remove", key=_removal_key(album, image)),
        )
    remove_keys = [image.key for image in album.images if _marked_for_removal(album, image)]

    kept_count = album.images_count - len(remove_keys)
    remaining = MAX_IMAGES - kept_count

    files = []
    if remaining > 0:
        st.caption(f"You can add up to {remaining} more image(s).")
        files = render_image_uploader(_uploader_key(f"edit_{album.id}"), current_count=kept_count)
    else:
        st.info(f"Maximum {MAX_IMAGES} images reached.")

    if st.button("Save changes", type="primary", use_container_width=True, key="edit_submit"):
        try:
            with st.spinner("Saving..."):
                get_album_service().update_album(
                    album.id, get_current_user(), title, description, privacy, remove_keys, files
                )
        except LensError as e:
            error_display.display_error(e.get_error_info())
            return

        refresh_album_caches()
        _reset_uploader(f"edit_{album.id}")
        for image in album.images:
            st.session_state.pop(_removal_key(album, image), None)
        for field in ("title", "description", "privacy"):
            st.session_state.pop(f"edit_{field}_{album.id}", None)
        navigate("manage_album", album_id=album.id)

"""
Unit tests for the album manage and edit pages.
"""

from unittest.mock import MagicMock, patch

import pytest

from lens.error_handling import AuthorizationError
from lens.models.album import Album, AlbumImage
from lens.services.albums import RemoveImageResult
from lens.ui.pages.album_editor import render_edit_album_page, render_manage_album_page

PAGE = "lens.ui.pages.album_editor"


def _album(image_count: int = 2) -> Album:
    album = Album.create_new(owner_id="owner-1", title="Summer", owner_username="olivia")
    album.set_images(
        [
            AlbumImage.create_new(
                download_url=f"https://example.com/{i}.jpg", file_name=f"{i}.jpg", image_id=f"img-{i}"
            )
            for i in range(image_count)
        ]
    )
    return album


def _columns(layout, **kwargs):
    count = layout if isinstance(layout, int) else len(layout)
    return [MagicMock() for _ in range(count)]


def _clicked(*keys):
    return lambda label, key=None, **kwargs: key in keys


@pytest.fixture
def mock_st(session_state):
    session_state.update(authenticated=True, user_id="owner-1")
    with patch(f"{PAGE}.st") as mock_st:
        mock_st.session_state = session_state
        mock_st.columns.side_effect = _columns
        mock_st.button.return_value = False
        yield mock_st


@pytest.fixture
def page_deps():
    """Services and components the pages call, keyed by name."""
    deps = {
        name: patch(f"{PAGE}.{name}").start()
        for name in (
            "load_album",
            "get_auth_service",
            "get_album_service",
            "get_current_user",
            "render_gallery_grid",
            "render_image_uploader",
            "render_not_found_page",
            "render_privacy_badge",
            "refresh_album_caches",
            "navigate",
            "error_display",
        )
    }
    patch(f"{PAGE}.require_authentication", return_value=True).start()
    deps["render_image_uploader"].return_value = []
    yield deps
    patch.stopall()


def _gallery_kwargs(page_deps):
    return page_deps["render_gallery_grid"].call_args.kwargs


class TestOwnership:
    def test_missing_album(self, mock_st, page_deps):
        page_deps["load_album"].return_value = None

        render_manage_album_page()

        page_deps["render_not_found_page"].assert_called_once_with("Album not found.")
        page_deps["render_gallery_grid"].assert_not_called()

    def test_someone_elses_album(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        page_deps["get_auth_service"].return_value.ensure_owner.side_effect = AuthorizationError(
            "Access denied", user_message="You don't have permission to edit this album."
        )

        render_edit_album_page()

        page_deps["get_auth_service"].return_value.ensure_owner.assert_called_once_with(album)
        error_info = page_deps["error_display"].display_error.call_args.args[0]
        assert error_info.user_message == "You don't have permission to edit this album."
        page_deps["render_gallery_grid"].assert_not_called()


class TestManageAlbumPage:
    def test_images_render_through_gallery_with_overlay(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album

        render_manage_album_page()

        page_deps["render_gallery_grid"].assert_called_once()
        assert page_deps["render_gallery_grid"].call_args.args[0] == album.images
        assert callable(_gallery_kwargs(page_deps)["overlay"])

    def test_remove_button_asks_for_confirmation(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        render_manage_album_page()
        overlay = _gallery_kwargs(page_deps)["overlay"]

        mock_st.button.side_effect = _clicked("remove_img-0")
        overlay(album.images[0], 0)

        assert mock_st.session_state.confirm_remove_image == "img-0"
        page_deps["get_album_service"].return_value.remove_image.assert_not_called()

    def test_confirmed_removal_removes_the_image(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        page_deps["get_album_service"].return_value.remove_image.return_value = RemoveImageResult(album=album)
        mock_st.session_state.confirm_remove_image = "img-1"
        render_manage_album_page()
        overlay = _gallery_kwargs(page_deps)["overlay"]

        mock_st.button.side_effect = _clicked("confirm_remove_img-1")
        overlay(album.images[1], 1)

        mock_st.warning.assert_any_call("Remove this image?")
        page_deps["get_album_service"].return_value.remove_image.assert_called_once_with(
            album.id, page_deps["get_current_user"].return_value, "img-1"
        )
        assert mock_st.session_state.confirm_remove_image is None
        page_deps["refresh_album_caches"].assert_called_once()

    def test_cancelled_removal_keeps_the_image(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        mock_st.session_state.confirm_remove_image = "img-1"
        render_manage_album_page()
        overlay = _gallery_kwargs(page_deps)["overlay"]

        mock_st.button.side_effect = _clicked("cancel_remove_img-1")
        overlay(album.images[1], 1)

        assert mock_st.session_state.confirm_remove_image is None
        page_deps["get_album_service"].return_value.remove_image.assert_not_called()

    def test_delete_asks_for_confirmation(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        mock_st.button.side_effect = _clicked("manage_delete")

        render_manage_album_page()

        assert mock_st.session_state.confirm_delete_album == album.id
        mock_st.warning.assert_any_call("Delete **Summer** and all of its images? This cannot be undone.")
        page_deps["get_album_service"].return_value.delete_album.assert_not_called()

    def test_confirmed_delete(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album
        mock_st.session_state.confirm_delete_album = album.id
        mock_st.button.side_effect = _clicked("confirm_delete")

        render_manage_album_page()

        page_deps["get_album_service"].return_value.delete_album.assert_called_once_with(
            album.id, page_deps["get_current_user"].return_value
        )
        page_deps["navigate"].assert_called_with("dashboard_albums")


class TestEditAlbumPage:
    def test_free_slots_message(self, mock_st, page_deps):
        page_deps["load_album"].return_value = _album(image_count=2)

        render_edit_album_page()

        mock_st.caption.assert_any_call("You can add up to 3 more image(s).")
        page_deps["render_image_uploader"].assert_called_once()
        assert page_deps["render_image_uploader"].call_args.kwargs["current_count"] == 2

    def test_full_album(self, mock_st, page_deps):
        page_deps["load_album"].return_value = _album(image_count=5)

        render_edit_album_page()

        mock_st.info.assert_called_once_with("Maximum 5 images reached.")
        page_deps["render_image_uploader"].assert_not_called()

    def test_marked_images_free_slots_and_are_greyed_out(self, mock_st, page_deps):
        album = _album(image_count=5)
        page_deps["load_album"].return_value = album
        mock_st.session_state[f"edit_remove_{album.id}_img-3"] = True

        render_edit_album_page()

        mock_st.caption.assert_any_call("You can add up to 1 more image(s).")
        is_disabled = _gallery_kwargs(page_deps)["is_disabled"]
        assert is_disabled(album.images[3], 3) is True
        assert is_disabled(album.images[0], 0) is False

    def test_overlay_renders_remove_checkbox(self, mock_st, page_deps):
        album = _album()
        page_deps["load_album"].return_value = album

        render_edit_album_page()
        _gallery_kwargs(page_deps)["overlay"](album.images[1], 1)

        mock_st.checkbox.assert_called_once_with("Remove", key=f"edit_remove_{album.id}_img-1")

    def test_save_passes_marked_images(self, mock_st, page_deps):
        album = _album(image_count=3)
        page_deps["load_album"].return_value = album
        mock_st.session_state[f"edit_remove_{album.id}_img-0"] = True
        mock_st.button.side_effect = _clicked("edit_submit")

        render_edit_album_page()

        args = page_deps["get_album_service"].return_value.update_album.call_args.args
        assert args[0] == album.id
        assert args[5] == ["img-0"]
        assert f"edit_remove_{album.id}_img-0" not in mock_st.session_state
        page_deps["navigate"].assert_called_with("manage_album", album_id=album.id)

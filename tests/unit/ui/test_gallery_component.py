"""
Unit tests for the gallery grid component.
"""

from unittest.mock import MagicMock, patch

import pytest

from lens.ui.components.gallery import render_gallery_grid
from lens.utils.gallery_layout import ImageInfo
from lens.utils.lightbox import LightboxState

IMAGES = ["https://example.com/1.jpg", "https://example.com/2.jpg", "https://example.com/3.jpg"]


def _columns(layout, **kwargs):
    count = layout if isinstance(layout, int) else len(layout)
    return [MagicMock() for _ in range(count)]


@pytest.fixture
def mock_st(session_state):
    with patch("lens.ui.components.gallery.st") as mock_st:
        mock_st.session_state = session_state
        mock_st.columns.side_effect = _columns
        mock_st.button.return_value = False
        yield mock_st


@pytest.fixture
def mock_show_lightbox():
    with patch("lens.ui.components.gallery._show_lightbox") as mock_show:
        yield mock_show


def landscape(image, index):
    return ImageInfo(title=f"Photo {index + 1}", dimensions=(400, 300))


class TestRenderGalleryGrid:
    def test_empty_gallery(self, mock_st, mock_show_lightbox):
        result = render_gallery_grid([], key="g", empty_message="This album has no images yet.")

        assert result == []
        mock_st.info.assert_called_once_with("This album has no images yet.")
        mock_show_lightbox.assert_not_called()

    def test_header_shows_count(self, mock_st, mock_show_lightbox):
        render_gallery_grid(IMAGES, key="g", title="Summer", get_info=landscape)

        mock_st.subheader.assert_called_once_with("Summer")
        mock_st.caption.assert_any_call("3 images")
        assert mock_st.image.call_count == 3

    def test_items_without_source_are_dropped(self, mock_st, mock_show_lightbox):
        result = render_gallery_grid(["https://example.com/1.jpg", None, ""], key="g", show_header=False)

        assert [item.src for item in result] == ["https://example.com/1.jpg"]

    def test_open_button_opens_lightbox(self, mock_st, mock_show_lightbox):
        mock_st.button.side_effect = lambda label, key=None, **kwargs: key == "g_open_1"

        normalized = render_gallery_grid(IMAGES, key="g", title="Summer", get_info=landscape)

        state = mock_st.session_state["g_lightbox"]
        assert state.open is True
        assert state.index == 1
        mock_show_lightbox.assert_called_once_with("g", normalized, "Summer")

    def test_disabled_items_cannot_be_opened(self, mock_st, mock_show_lightbox):
        render_gallery_grid(IMAGES, key="g", get_info=landscape, is_disabled=lambda image, index: index == 0)

        open_keys = [c.kwargs.get("key") for c in mock_st.button.call_args_list]
        assert "g_open_0" not in open_keys
        assert "g_open_1" in open_keys
        assert mock_st.image.call_count == 2
        assert "grayscale" in mock_st.markdown.call_args_list[0].args[0]

    def test_lightbox_state_resets_when_images_change(self, mock_st, mock_show_lightbox):
        mock_st.session_state["g_lightbox"] = LightboxState(count=5, open=True, index=4)

        render_gallery_grid(IMAGES, key="g", get_info=landscape)

        state = mock_st.session_state["g_lightbox"]
        assert state.count == 3
        assert state.open is False
        mock_show_lightbox.assert_not_called()

    def test_masonry_layout(self, mock_st, mock_show_lightbox):
        render_gallery_grid(IMAGES, key="g", layout="masonry", enable_lightbox=False, show_header=False)

        assert mock_st.image.call_count == 3
        mock_st.button.assert_not_called()

    def test_overlay_receives_original_items(self, mock_st, mock_show_lightbox):
        seen = []

        render_gallery_grid(
            IMAGES, key="g", get_info=landscape, overlay=lambda image, index: seen.append((image, index))
        )

        assert seen == [(src, index) for index, src in enumerate(IMAGES)]


class TestLightboxDismiss:
    def test_dismissed_lightbox_stays_closed_on_rerun(self, mock_st):
        mock_st.session_state["g_lightbox"] = LightboxState(count=3, open=True, index=1)

        render_gallery_grid(IMAGES, key="g", get_info=landscape)

        assert mock_st.dialog.call_count == 1
        mock_st.dialog.call_args.kwargs["on_dismiss"]()
        assert mock_st.session_state["g_lightbox"].open is False

        mock_st.dialog.reset_mock()
        render_gallery_grid(IMAGES, key="g", get_info=landscape)

        mock_st.dialog.assert_not_called()

    def test_open_lightbox_is_shown_again_until_dismissed(self, mock_st):
        mock_st.session_state["g_lightbox"] = LightboxState(count=3, open=True, index=1)

        render_gallery_grid(IMAGES, key="g", get_info=landscape)
        render_gallery_grid(IMAGES, key="g", get_info=landscape)

        assert mock_st.dialog.call_count == 2


class TestMeasureMissingDimensions:
    def test_only_images_without_dimensions_are_measured(self, mock_st, mock_show_lightbox, mock_measure_image):
        mock_measure_image.side_effect = lambda src: (800, 600) if src.endswith("1.jpg") else None

        def info(image, index):
            return ImageInfo(title=f"Photo {index + 1}", dimensions=(400, 300) if index == 2 else None)

        render_gallery_grid(IMAGES, key="g", get_info=info)

        measured_srcs = [c.args[0] for c in mock_measure_image.call_args_list]
        assert measured_srcs == ["https://example.com/1.jpg", "https://example.com/2.jpg"]
        assert mock_st.session_state["g_lightbox"].measured == {"https://example.com/1.jpg": (800, 600)}

    def test_measured_images_are_not_measured_again(self, mock_st, mock_show_lightbox, mock_measure_image):
        mock_measure_image.return_value = (800, 600)

        render_gallery_grid(IMAGES, key="g", show_header=False)
        render_gallery_grid(IMAGES, key="g", show_header=False)

        assert mock_measure_image.call_count == 3

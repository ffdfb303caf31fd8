"""Configuration for UI unit tests."""

from typing import Any
from unittest.mock import patch

import pytest
import streamlit as st


class SessionState(dict):
    """Dictionary with attribute access, standing in for st.session_state."""

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value


@pytest.fixture
def session_state() -> SessionState:
    return SessionState(
        authenticated=False,
        user_id=None,
        user_email=None,
        user_username=None,
        auth_error=None,
        current_page="home",
    )


@pytest.fixture(autouse=True)
def clear_streamlit_caches():
    """Cached loaders must not leak results between tests."""
    st.cache_data.clear()
    yield
    st.cache_data.clear()


@pytest.fixture(autouse=True)
def mock_measure_image():
    """Gallery tests never download images to measure them."""
    with patch("lens.ui.components.gallery.measure_image", return_value=None) as mock_measure:
        yield mock_measure

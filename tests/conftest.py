"""
Pytest configuration and fixtures for Lens tests.
"""

import io
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image

from lens.config import get_config
from lens.services.albums import AlbumService
from lens.services.auth import AuthService, UserInfo
from lens.services.image_processor import ImageFile, ImageProcessor
from lens.services.store import LensStore


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Set up test environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("GCS_PHOTOS_BUCKET", "test-photos-bucket")
    monkeypatch.setenv("GCS_DATABASE_BUCKET", "test-database-bucket")
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "test-project")
    get_config().clear_cache()
    yield
    get_config().clear_cache()


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory for real encoded images of a given size."""

    def _make(width: int = 4, height: int = 3, image_format: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color=(200, 120, 40)).save(buffer, format=image_format)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_image_data(make_image_bytes: Callable[..., bytes]) -> bytes:
    return make_image_bytes(4, 3)


@pytest.fixture
def make_image_file(make_image_bytes: Callable[..., bytes]) -> Callable[..., ImageFile]:
    def _make(name: str = "photo.png", width: int = 4, height: int = 3, content_type: str | None = "image/png"):
        return ImageFile(name=name, data=make_image_bytes(width, height), content_type=content_type)

    return _make


@pytest.fixture
def mock_storage_service() -> MagicMock:
    """Storage service double that records uploads and deletions."""
    storage = MagicMock()

    def _upload(album_id, image_id, file_data, filename, content_type=None):
        path = f"albums/{album_id}/{image_id}_{filename.replace(' ', '_')}"
        return {
            "storage_path": path,
            "download_url": f"https://storage.googleapis.com/test-photos-bucket/{path}",
            "size": len(file_data),
            "content_type": content_type,
        }

    storage.upload_album_image.side_effect = _upload
    return storage


@pytest.fixture
def store(tmp_path: Path, mock_storage_service: MagicMock) -> Generator[LensStore, None, None]:
    """Document store over a temporary DuckDB file with sync disabled."""
    lens_store = LensStore(
        db_path=str(tmp_path / "lens.db"), sync_enabled=False, storage_service=mock_storage_service
    )
    yield lens_store
    lens_store.close()


@pytest.fixture
def auth_service(store: LensStore) -> AuthService:
    return AuthService(store)


@pytest.fixture
def album_service(store: LensStore, mock_storage_service: MagicMock) -> AlbumService:
    return AlbumService(store=store, storage_service=mock_storage_service, image_processor=ImageProcessor())


@pytest.fixture
def owner(auth_service: AuthService) -> UserInfo:
    """A registered user."""
    return auth_service.sign_up("owner@example.com", "password123", "owner", "Olivia Owner")


@pytest.fixture
def other_user(store: LensStore) -> UserInfo:
    """A second registered user, signed up through its own session."""
    return AuthService(store).sign_up("visitor@example.com", "password123", "visitor", "Victor Visitor")

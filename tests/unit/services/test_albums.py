"""
Unit tests for the album service.
"""

from unittest.mock import MagicMock

import pytest

from lens.error_handling import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    StorageError,
    UploadError,
    ValidationError,
)
from lens.models.album import Album
from lens.services.albums import (
    STORAGE_CLEANUP_ERROR,
    STORAGE_DELETE_WARNING,
    AlbumService,
    ProfileStat,
    get_album_service,
    profile_stats,
)
from lens.services.auth import UserInfo


class TestCreateAlbum:
    """Test cases for AlbumService.create_album."""

    def test_create_album_with_images(self, album_service, owner, make_image_file, mock_storage_service):
        files = [make_image_file("beach day.png", 40, 30), make_image_file("b.png", 10, 20)]

        album = album_service.create_album(owner, "  Summer  ", "  At the sea ", "public", files)

        assert album.title == "Summer"
        assert album.description == "At the sea"
        assert album.privacy == "public"
        assert album.owner_username == "owner"
        assert album.owner_name == "Olivia Owner"
        assert album.images_count == 2

        first = album.images[0]
        assert first.file_name == "beach day.png"
        assert first.storage_path == f"albums/{album.id}/{first.id}_beach_day.png"
        assert first.download_url.endswith(first.storage_path)
        assert first.content_type == "image/png"
        assert (first.width, first.height) == (40, 30)
        assert album.images[1].dimensions == (10, 20)

        assert mock_storage_service.upload_album_image.call_count == 2
        assert album_service.get_album(album.id) == album

    def test_create_empty_album(self, album_service, owner, mock_storage_service):
        album = album_service.create_album(owner, "Empty")

        assert album.images == []
        assert album.privacy == "private"
        mock_storage_service.upload_album_image.assert_not_called()
        assert album_service.get_album(album.id).images_count == 0

    def test_requires_owner(self, album_service):
        with pytest.raises(AuthenticationError) as exc_info:
            album_service.create_album(None, "Trip")

        assert exc_info.value.user_message == "You must be logged in."

    def test_requires_title(self, album_service, owner):
        with pytest.raises(ValidationError, match="Title is required."):
            album_service.create_album(owner, "   ")

    def test_rejects_more_than_five_files(self, album_service, owner, make_image_file, store):
        files = [make_image_file(f"{i}.png") for i in range(6)]

        with pytest.raises(ValidationError, match="You can upload up to 5 images."):
            album_service.create_album(owner, "Too many", files=files)

        assert store.query_albums(owner_id=owner.user_id) == []

    def test_upload_failure_raises_upload_error(self, album_service, owner, make_image_file, mock_storage_service):
        mock_storage_service.upload_album_image.side_effect = StorageError("bucket unavailable")

        with pytest.raises(UploadError) as exc_info:
            album_service.create_album(owner, "Trip", files=[make_image_file("a.png")])

        assert exc_info.value.user_message == "Failed to upload a.png."

    def test_upload_failure_deletes_earlier_uploads(
        self, album_service, owner, make_image_file, mock_storage_service, store
    ):
        upload = mock_storage_service.upload_album_image.side_effect
        mock_storage_service.upload_album_image.side_effect = [
            upload("pending", "i1", b"x", "a.png"),
            StorageError("bucket unavailable"),
        ]

        with pytest.raises(UploadError):
            album_service.create_album(owner, "Trip", files=[make_image_file("a.png"), make_image_file("b.png")])

        mock_storage_service.delete_file.assert_called_once_with("albums/pending/i1_a.png")
        (album,) = store.query_albums(owner_id=owner.user_id)
        assert album.images == []
        assert album.images_count == 0

    def test_owner_without_profile_row(self, album_service, make_image_file):
        ghost = UserInfo(user_id="u-ghost", email="ghost@example.com", name="Gina Ghost")

        album = album_service.create_album(ghost, "Trip")

        assert album.owner_username == ""
        assert album.owner_name == "Gina Ghost"


class TestGetAlbum:
    def test_missing_id(self, album_service):
        assert album_service.get_album(None) is None
        assert album_service.get_album("") is None

    def test_unknown_id(self, album_service):
        assert album_service.get_album("missing") is None

    def test_read_failure_counts_as_not_found(self, mock_storage_service):
        store = MagicMock()
        store.get_album.side_effect = DatabaseError("read failed")
        service = AlbumService(store=store, storage_service=mock_storage_service)

        assert service.get_album("a1") is None


@pytest.fixture
def album_with_images(album_service, owner, make_image_file) -> Album:
    files = [make_image_file(f"{name}.png") for name in ("a", "b", "c")]
    return album_service.create_album(owner, "Trip", "Sea", "private", files)


class TestUpdateAlbum:
    """Test cases for AlbumService.update_album."""

    def test_update_details_and_images(
        self, album_service, owner, album_with_images, make_image_file, mock_storage_service
    ):
        removed = album_with_images.images[1]

        album = album_service.update_album(
            album_with_images.id,
            owner,
            " Trip 2 ",
            " New ",
            "public",
            remove_keys=[removed.key],
            new_files=[make_image_file("d.png")],
        )

        assert album.title == "Trip 2"
        assert album.description == "New"
        assert album.privacy == "public"
        assert [image.file_name for image in album.images] == ["a.png", "c.png", "d.png"]
        assert album.images_count == 3
        mock_storage_service.delete_file.assert_called_once_with(removed.storage_path)
        assert album_service.get_album(album.id) == album

    def test_storage_delete_failure_is_ignored(self, album_service, owner, album_with_images, mock_storage_service):
        mock_storage_service.delete_file.side_effect = StorageError("denied")

        album = album_service.update_album(
            album_with_images.id, owner, "Trip", remove_keys=[album_with_images.images[0].key]
        )

        assert album.images_count == 2

    def test_upload_failure_keeps_album_and_deletes_new_uploads(
        self, album_service, owner, album_with_images, make_image_file, mock_storage_service
    ):
        upload = mock_storage_service.upload_album_image.side_effect
        mock_storage_service.upload_album_image.side_effect = [
            upload(album_with_images.id, "i9", b"x", "d.png"),
            StorageError("bucket unavailable"),
        ]

        with pytest.raises(UploadError):
            album_service.update_album(
                album_with_images.id,
                owner,
                "Renamed",
                remove_keys=[album_with_images.images[0].key],
                new_files=[make_image_file("d.png"), make_image_file("e.png")],
            )

        mock_storage_service.delete_file.assert_called_once_with(f"albums/{album_with_images.id}/i9_d.png")
        assert album_service.get_album(album_with_images.id) == album_with_images

    def test_total_limit(self, album_service, owner, album_with_images, make_image_file):
        new_files = [make_image_file(f"new{i}.png") for i in range(3)]

        with pytest.raises(ValidationError, match="You can upload up to 5 images total."):
            album_service.update_album(album_with_images.id, owner, "Trip", new_files=new_files)

    def test_removal_frees_slots(self, album_service, owner, album_with_images, make_image_file):
        new_files = [make_image_file(f"new{i}.png") for i in range(3)]

        album = album_service.update_album(
            album_with_images.id,
            owner,
            "Trip",
            remove_keys=[album_with_images.images[0].key],
            new_files=new_files,
        )

        assert album.images_count == 5

    def test_requires_title(self, album_service, owner, album_with_images):
        with pytest.raises(ValidationError, match="Title is required."):
            album_service.update_album(album_with_images.id, owner, "")

    def test_only_owner_can_update(self, album_service, album_with_images, other_user):
        with pytest.raises(AuthorizationError) as exc_info:
            album_service.update_album(album_with_images.id, other_user, "Hijacked")

        assert exc_info.value.user_message == "You don't have permission to edit this album."

    def test_unknown_album(self, album_service, owner):
        with pytest.raises(NotFoundError, match="Album not found"):
            album_service.update_album("missing", owner, "Title")

    def test_requires_user(self, album_service, album_with_images):
        with pytest.raises(AuthenticationError):
            album_service.update_album(album_with_images.id, None, "Title")


class TestRemoveImage:
    def test_remove_image(self, album_service, owner, album_with_images, mock_storage_service):
        target = album_with_images.images[0]

        result = album_service.remove_image(album_with_images.id, owner, target.key)

        assert result.warning is None
        assert [image.file_name for image in result.album.images] == ["b.png", "c.png"]
        assert album_service.get_album(album_with_images.id).images_count == 2
        mock_storage_service.delete_file.assert_called_once_with(target.storage_path)

    def test_storage_failure_returns_warning(self, album_service, owner, album_with_images, mock_storage_service):
        mock_storage_service.delete_file.side_effect = StorageError("denied")

        result = album_service.remove_image(album_with_images.id, owner, album_with_images.images[0].key)

        assert result.warning == STORAGE_DELETE_WARNING
        assert album_service.get_album(album_with_images.id).images_count == 2

    def test_only_owner_can_remove(self, album_service, album_with_images, other_user):
        with pytest.raises(AuthorizationError):
            album_service.remove_image(album_with_images.id, other_user, album_with_images.images[0].key)


class TestDeleteAlbum:
    def test_delete_album(self, album_service, owner, album_with_images, mock_storage_service):
        album_service.delete_album(album_with_images.id, owner)

        assert album_service.get_album(album_with_images.id) is None
        assert mock_storage_service.delete_file.call_count == 3

    def test_storage_failure_keeps_album(self, album_service, owner, album_with_images, mock_storage_service):
        mock_storage_service.delete_file.side_effect = [None, StorageError("denied"), None]

        with pytest.raises(StorageError) as exc_info:
            album_service.delete_album(album_with_images.id, owner)

        assert exc_info.value.user_message == STORAGE_CLEANUP_ERROR
        assert album_service.get_album(album_with_images.id) is not None

    def test_only_owner_can_delete(self, album_service, album_with_images, other_user):
        with pytest.raises(AuthorizationError):
            album_service.delete_album(album_with_images.id, other_user)


class TestListings:
    @pytest.fixture
    def library(self, album_service, owner, other_user, make_image_file):
        return {
            "owner_public": album_service.create_album(
                owner, "Owner public", privacy="public", files=[make_image_file()]
            ),
            "owner_private": album_service.create_album(owner, "Owner private", files=[make_image_file()]),
            "owner_empty_public": album_service.create_album(owner, "Owner empty", privacy="public"),
            "other_public": album_service.create_album(
                other_user, "Other public", privacy="public", files=[make_image_file(), make_image_file()]
            ),
        }

    def test_list_owner_albums(self, album_service, owner, library):
        titles = {album.title for album in album_service.list_owner_albums(owner.user_id)}

        assert titles == {"Owner public", "Owner private", "Owner empty"}

    def test_list_public_albums_skips_empty(self, album_service, library):
        assert {a.title for a in album_service.list_public_albums()} == {"Owner public", "Other public"}
        assert {a.title for a in album_service.list_public_albums(include_empty=True)} == {
            "Owner public",
            "Owner empty",
            "Other public",
        }

    def test_list_profile_albums(self, album_service, owner, library):
        assert len(album_service.list_profile_albums(owner.user_id, viewer_is_owner=True)) == 3
        assert {a.title for a in album_service.list_profile_albums(owner.user_id, viewer_is_owner=False)} == {
            "Owner public",
            "Owner empty",
        }

    def test_explore_images(self, album_service, library):
        images = album_service.explore_images()

        assert len(images) == 3
        assert {item.owner_username for item in images} == {"owner", "visitor"}

    def test_studio_images(self, album_service, owner, library):
        images = album_service.studio_images(owner.user_id)

        assert len(images) == 2
        assert all(item.owner_username == "" for item in images)

    def test_dashboard_stats(self, album_service, owner, library):
        assert album_service.dashboard_stats(owner.user_id) == {"albums": 3, "images": 2}


class TestProfileStats:
    def _albums(self):
        public = Album.create_new(owner_id="u1", title="A", privacy="public")
        public.images_count = 3
        private = Album.create_new(owner_id="u1", title="B")
        private.images_count = 2
        return [public, private]

    def test_owner_stats(self):
        assert profile_stats(self._albums(), is_owner=True) == [
            ProfileStat("Albums", 2),
            ProfileStat("Public", 1),
            ProfileStat("Private", 1),
            ProfileStat("Images", 5),
        ]

    def test_visitor_stats(self):
        assert profile_stats(self._albums(), is_owner=False) == [
            ProfileStat("Public albums", 1),
            ProfileStat("Images", 5),
        ]


def test_get_album_service_is_singleton(monkeypatch):
    monkeypatch.setattr("lens.services.albums._album_service", None)
    monkeypatch.setattr("lens.services.albums.get_lens_store", MagicMock())

    assert get_album_service() is get_album_service()

"""
Album service for the Lens application.

Creates, edits and deletes albums for their owners and builds the public
listings: the album browser, profile pages, the explore gallery and the
owner's studio.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from ..error_handling import (
    DatabaseError,
    NotFoundError,
    StorageError,
    UploadError,
    ValidationError,
)
from ..logging_config import get_logger, log_error, log_user_action
from ..models.album import Album, AlbumImage, AlbumPrivacy, ExploreImage, flatten_album_images, image_key
from .auth import UserInfo, ensure_album_owner, load_user_profile, require_user
from .image_processor import MAX_IMAGES, ImageFile, ImageProcessor, get_image_processor
from .storage import StorageService, get_storage_service
from .store import LensStore, get_lens_store

logger = get_logger(__name__)

STORAGE_DELETE_WARNING = "Removed from album, but storage deletion failed."
STORAGE_CLEANUP_ERROR = "Some images could not be removed from storage."


@dataclass
class RemoveImageResult:
    """Outcome of removing a single image from an album."""

    album: Album
    warning: str | None = None


@dataclass
class ProfileStat:
    label: str
    value: int


class AlbumService:
    """Service for album operations."""

    def __init__(
        self,
        store: LensStore | None = None,
        storage_service: StorageService | None = None,
        image_processor: ImageProcessor | None = None,
    ) -> None:
        self.store = store or get_lens_store()
        self._storage_service = storage_service
        self.image_processor = image_processor or get_image_processor()

    @property
    def storage_service(self) -> StorageService:
        if self._storage_service is None:
            self._storage_service = get_storage_service()
        return self._storage_service

    def _load_owned_album(self, album_id: str, user: UserInfo | None) -> Album:
        user = require_user(user)
        album = self.get_album(album_id)
        if album is None:
            raise NotFoundError(f"Album not found: {album_id}", user_message="Album not found.")
        ensure_album_owner(album, user)
        return album

    def _upload_files(self, album_id: str, files: list[ImageFile]) -> list[AlbumImage]:
        """Upload files in order, returning the image records. A failed upload deletes the earlier ones again."""
        uploaded: list[AlbumImage] = []
        for file in files:
            image_id = str(uuid.uuid4())
            content_type = self.image_processor.detect_content_type(file.name, file.content_type)
            dimensions = self.image_processor.read_dimensions(file.data)

            try:
                result = self.storage_service.upload_album_image(
                    album_id, image_id, file.data, file.name, content_type
                )
            except StorageError as e:
                self._delete_stored_images(uploaded)
                raise UploadError(
                    f"Failed to upload '{file.name}': {e}",
                    code="album_image_upload_failed",
                    user_message=f"Failed to upload {file.name}.",
                    details={"album_id": album_id, "file_name": file.name},
                    original_exception=e,
                ) from e

            uploaded.append(
                AlbumImage.create_new(
                    download_url=result["download_url"],
                    file_name=file.name,
                    storage_path=result["storage_path"],
                    content_type=result["content_type"],
                    size=file.size,
                    width=dimensions[0] if dimensions else None,
                    height=dimensions[1] if dimensions else None,
                    image_id=image_id,
                )
            )
        return uploaded

    def _delete_stored_images(self, images: list[AlbumImage]) -> list[AlbumImage]:
        """Delete the storage objects of the images, returning the ones that failed."""
        failed: list[AlbumImage] = []
        for image in images:
            if not image.storage_path:
                continue
            try:
                self.storage_service.delete_file(image.storage_path)
            except StorageError as e:
                log_error(e, {"operation": "delete_album_image", "storage_path": image.storage_path})
                failed.append(image)
        return failed

    def create_album(
        self,
        owner: UserInfo | None,
        title: str,
        description: str = "",
        privacy: AlbumPrivacy = "private",
        files: list[ImageFile] | None = None,
    ) -> Album:
        """
        Create an album and upload its images.

        The album is stored first with no images; the files are then
        uploaded under the album's id and the album is updated with them.
        If an upload fails, the album keeps no images and the files uploaded
        before the failure are deleted from storage.

        Raises:
            AuthenticationError: If no owner is given
            ValidationError: If the title is empty or too many files are given
            UploadError: If an image cannot be uploaded
            DatabaseError: If the album cannot be stored
        """
        files = files or []
        owner = require_user(owner)

        trimmed = title.strip()
        if not trimmed:
            raise ValidationError("Title is required.", code="title_required")
        if len(files) > MAX_IMAGES:
            raise ValidationError(f"You can upload up to {MAX_IMAGES} images.", code="too_many_images")

        profile = load_user_profile(self.store, owner.user_id, owner)
        album = Album.create_new(
            owner_id=owner.user_id,
            title=trimmed,
            description=description.strip(),
            privacy=privacy,
            owner_username=profile.username,
            owner_name=profile.full_name,
        )
        self.store.insert_album(album)

        if files:
            album.set_images(self._upload_files(album.id, files))
            album.updated_at = datetime.now(UTC)
            self.store.update_album(album)

        log_user_action(owner.user_id, "album_created", album_id=album.id, images_count=album.images_count)
        return album

    def get_album(self, album_id: str | None) -> Album | None:
        """Get an album by id. Unknown ids and read failures count as not found."""
        if not album_id:
            return None
        try:
            return self.store.get_album(album_id)
        except DatabaseError:
            logger.warning("album_read_failed", album_id=album_id)
            return None

    def update_album(
        self,
        album_id: str,
        user: UserInfo | None,
        title: str,
        description: str = "",
        privacy: AlbumPrivacy = "private",
        remove_keys: list[str] | None = None,
        new_files: list[ImageFile] | None = None,
    ) -> Album:
        """
        Save album details, drop the images marked for removal and add new ones.

        Storage objects of removed images are deleted after the album is
        saved; failures there are logged and ignored.

        Raises:
            AuthorizationError: If the user does not own the album
            ValidationError: If the title is empty or the album would exceed the limit
            UploadError: If a new image cannot be uploaded
        """
        album = self._load_owned_album(album_id, user)
        new_files = new_files or []
        removed = set(remove_keys or [])

        trimmed = title.strip()
        if not trimmed:
            raise ValidationError("Title is required.", code="title_required")

        kept = [image for image in album.images if image_key(image) not in removed]
        dropped = [image for image in album.images if image_key(image) in removed]

        if len(kept) + len(new_files) > MAX_IMAGES:
            raise ValidationError(f"You can upload up to {MAX_IMAGES} images total.", code="too_many_images")

        uploaded = self._upload_files(album.id, new_files)

        album.title = trimmed
        album.description = description.strip()
        album.privacy = privacy
        album.set_images(kept + uploaded)
        album.updated_at = datetime.now(UTC)
        self.store.update_album(album)

        self._delete_stored_images(dropped)

        log_user_action(
            album.owner_id, "album_updated", album_id=album.id, removed=len(dropped), added=len(uploaded)
        )
        return album

    def remove_image(self, album_id: str, user: UserInfo | None, key: str) -> RemoveImageResult:
        """
        Remove one image from an album, then delete its storage object.

        Returns:
            RemoveImageResult: The updated album and a warning if the storage object could not be deleted
        """
        album = self._load_owned_album(album_id, user)
        target = next((image for image in album.images if image_key(image) == key), None)

        album.set_images([image for image in album.images if image_key(image) != key])
        album.updated_at = datetime.now(UTC)
        self.store.update_album(album)

        warning = None
        if target is not None and self._delete_stored_images([target]):
            warning = STORAGE_DELETE_WARNING

        log_user_action(album.owner_id, "album_image_removed", album_id=album.id, image_key=key)
        return RemoveImageResult(album=album, warning=warning)

    def delete_album(self, album_id: str, user: UserInfo | None) -> None:
        """
        Delete an album together with its images.

        Raises:
            StorageError: If any image could not be deleted; the album is kept
        """
        album = self._load_owned_album(album_id, user)

        failed = self._delete_stored_images(album.images)
        if failed:
            raise StorageError(
                f"Failed to delete {len(failed)} image(s) of album {album.id}",
                code="album_storage_cleanup_failed",
                user_message=STORAGE_CLEANUP_ERROR,
                details={"album_id": album.id, "failed_paths": [image.storage_path for image in failed]},
                retry_suggested=True,
            )

        self.store.delete_album(album.id)
        log_user_action(album.owner_id, "album_deleted", album_id=album.id)

    def list_owner_albums(self, owner_id: str) -> list[Album]:
        return self.store.query_albums(owner_id=owner_id)

    def list_public_albums(self, include_empty: bool = False) -> list[Album]:
        """Public albums, newest first. Albums without images are left out unless include_empty is set."""
        albums = self.store.query_albums(privacy="public")
        if include_empty:
            return albums
        return [album for album in albums if album.images_count > 0]

    def list_profile_albums(self, owner_id: str, viewer_is_owner: bool) -> list[Album]:
        if viewer_is_owner:
            return self.store.query_albums(owner_id=owner_id)
        return self.store.query_albums(owner_id=owner_id, privacy="public")

    def explore_images(self) -> list[ExploreImage]:
        return flatten_album_images(self.store.query_albums(privacy="public"))

    def studio_images(self, owner_id: str) -> list[ExploreImage]:
        return flatten_album_images(self.store.query_albums(owner_id=owner_id), include_owner=False)

    def dashboard_stats(self, owner_id: str) -> dict[str, int]:
        albums = self.list_owner_albums(owner_id)
        return {"albums": len(albums), "images": sum(album.images_count for album in albums)}


def profile_stats(albums: list[Album], is_owner: bool) -> list[ProfileStat]:
    """Summary counts shown on a profile page."""
    public_count = sum(1 for album in albums if album.is_public)
    images_count = sum(album.images_count for album in albums)

    if is_owner:
        return [
            ProfileStat("Albums", len(albums)),
            ProfileStat("Public", public_count),
            ProfileStat("Private", len(albums) - public_count),
            ProfileStat("Images", images_count),
        ]
    return [ProfileStat("Public albums", public_count), ProfileStat("Images", images_count)]


_album_service: AlbumService | None = None


def get_album_service() -> AlbumService:
    """Get the global album service instance."""
    global _album_service
    if _album_service is None:
        _album_service = AlbumService()
    return _album_service

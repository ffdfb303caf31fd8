"""
Album models for the Lens application.

An album is a titled collection of up to five images owned by one user.
Albums are stored as documents: the image list is embedded in the album
row as JSON rather than kept in a separate table.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

AlbumPrivacy = Literal["private", "public"]

PRIVACY_VALUES: tuple[str, ...] = ("private", "public")
DEFAULT_PRIVACY: AlbumPrivacy = "private"
UNTITLED_ALBUM = "Untitled album"


def _parse_datetime(value: Any) -> datetime | None:
    """Accept None, ISO strings or datetimes as stored in the database."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        # Millisecond epoch values
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass
class AlbumImage:
    """A single image inside an album."""

    id: str
    download_url: str
    file_name: str | None = None
    storage_path: str | None = None
    content_type: str | None = None
    size: int | None = None
    width: int | None = None
    height: int | None = None
    created_at: datetime | None = None

    @classmethod
    def create_new(
        cls,
        download_url: str,
        file_name: str | None = None,
        storage_path: str | None = None,
        content_type: str | None = None,
        size: int | None = None,
        width: int | None = None,
        height: int | None = None,
        image_id: str | None = None,
    ) -> "AlbumImage":
        """Create an image record stamped with the current time."""
        return cls(
            id=image_id or str(uuid.uuid4()),
            download_url=download_url,
            file_name=file_name,
            storage_path=storage_path,
            content_type=content_type,
            size=size,
            width=width,
            height=height,
            created_at=datetime.now(UTC),
        )

    @property
    def key(self) -> str:
        """Identity of the image within its album."""
        return image_key(self)

    @property
    def dimensions(self) -> tuple[int, int] | None:
        if self.width and self.height:
            return self.width, self.height
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "file_name": self.file_name,
            "storage_path": self.storage_path,
            "download_url": self.download_url,
            "content_type": self.content_type,
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlbumImage":
        return cls(
            id=data.get("id") or "",
            download_url=data.get("download_url") or "",
            file_name=data.get("file_name"),
            storage_path=data.get("storage_path"),
            content_type=data.get("content_type"),
            size=data.get("size"),
            width=data.get("width"),
            height=data.get("height"),
            created_at=_parse_datetime(data.get("created_at")),
        )


def image_key(image: AlbumImage) -> str:
    """
    Get the key used to identify an image for removal.

    Falls back to the storage path and then the download URL for images
    that were stored without an id.
    """
    return image.id or image.storage_path or image.download_url


@dataclass
class Album:
    """
    Represents an album document.

    ``images_count`` mirrors ``len(images)``; listing pages read the count
    without decoding the image list.
    """

    id: str
    owner_id: str
    title: str
    privacy: AlbumPrivacy = DEFAULT_PRIVACY
    description: str = ""
    owner_username: str = ""
    owner_name: str = ""
    images: list[AlbumImage] = field(default_factory=list)
    images_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create_new(
        cls,
        owner_id: str,
        title: str,
        description: str = "",
        privacy: AlbumPrivacy = DEFAULT_PRIVACY,
        owner_username: str = "",
        owner_name: str = "",
    ) -> "Album":
        """
        Create a new, empty album with a generated ID and current timestamps.

        Args:
            owner_id: uid of the owning user
            title: Album title (already trimmed)
            description: Optional description (already trimmed)
            privacy: "private" or "public"
            owner_username: Owner's username at creation time
            owner_name: Owner's full name at creation time

        Returns:
            New Album instance
        """
        now = datetime.now(UTC)
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            description=description,
            privacy=privacy,
            owner_username=owner_username,
            owner_name=owner_name,
            images=[],
            images_count=0,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_public(self) -> bool:
        return self.privacy == "public"

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED_ALBUM

    def is_owned_by(self, user_id: str | None) -> bool:
        return bool(user_id) and user_id == self.owner_id

    def can_view(self, user_id: str | None) -> bool:
        """Public albums are visible to everyone, private ones only to the owner."""
        return self.is_public or self.is_owned_by(user_id)

    def set_images(self, images: list[AlbumImage]) -> None:
        """Replace the image list, keeping the count in sync."""
        self.images = list(images)
        self.images_count = len(self.images)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert Album to dictionary for database storage.

        Returns:
            Dictionary with the image list serialized as a JSON string
        """
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "owner_username": self.owner_username,
            "owner_name": self.owner_name,
            "title": self.title,
            "description": self.description,
            "privacy": self.privacy,
            "images": json.dumps([image.to_dict() for image in self.images]),
            "images_count": self.images_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Album":
        """
        Create Album from a database row dictionary.

        Missing image lists and counts default to empty, as older documents
        may not carry them.
        """
        raw_images = data.get("images") or []
        if isinstance(raw_images, str):
            raw_images = json.loads(raw_images) if raw_images else []

        images = [AlbumImage.from_dict(item) for item in raw_images]
        images_count = data.get("images_count")

        privacy = data.get("privacy") or DEFAULT_PRIVACY
        if privacy not in PRIVACY_VALUES:
            privacy = DEFAULT_PRIVACY

        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            title=data.get("title") or "",
            privacy=privacy,
            description=data.get("description") or "",
            owner_username=data.get("owner_username") or "",
            owner_name=data.get("owner_name") or "",
            images=images,
            images_count=images_count if images_count is not None else len(images),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class ExploreImage:
    """An image flattened together with the album it belongs to."""

    image: AlbumImage
    album_id: str
    album_title: str
    owner_id: str = ""
    owner_name: str = ""
    owner_username: str = ""

    @property
    def download_url(self) -> str:
        return self.image.download_url

    @property
    def file_name(self) -> str | None:
        return self.image.file_name


def flatten_album_images(albums: list[Album], include_owner: bool = True) -> list[ExploreImage]:
    """Collect the images of several albums, keeping album order."""
    collected: list[ExploreImage] = []
    for album in albums:
        for image in album.images:
            collected.append(
                ExploreImage(
                    image=image,
                    album_id=album.id,
                    album_title=album.display_title,
                    owner_id=album.owner_id if include_owner else "",
                    owner_name=album.owner_name if include_owner else "",
                    owner_username=album.owner_username if include_owner else "",
                )
            )
    return collected

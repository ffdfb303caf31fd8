"""Album data loaders for the Lens pages."""

import streamlit as st
import structlog

from lens.error_handling import LensError
from lens.models.album import Album, AlbumImage, ExploreImage
from lens.models.user import UserProfile
from lens.services.albums import get_album_service
from lens.services.profiles import resolve_profile
from lens.services.storage import get_storage_service
from lens.utils.gallery_layout import ImageInfo

logger = structlog.get_logger(__name__)


@st.cache_data(ttl=300)
def load_public_albums(include_empty: bool = False) -> list[Album]:
    """Public albums, newest first."""
    try:
        return get_album_service().list_public_albums(include_empty=include_empty)
    except LensError as e:
        logger.error("load_public_albums_error", error=str(e))
        return []


@st.cache_data(ttl=300)
def load_explore_images() -> list[ExploreImage]:
    try:
        return get_album_service().explore_images()
    except LensError as e:
        logger.error("load_explore_images_error", error=str(e))
        return []


@st.cache_data(ttl=300)
def load_owner_albums(owner_id: str) -> list[Album]:
    try:
        return get_album_service().list_owner_albums(owner_id)
    except LensError as e:
        logger.error("load_owner_albums_error", owner_id=owner_id, error=str(e))
        return []


@st.cache_data(ttl=300)
def load_studio_images(owner_id: str) -> list[ExploreImage]:
    try:
        return get_album_service().studio_images(owner_id)
    except LensError as e:
        logger.error("load_studio_images_error", owner_id=owner_id, error=str(e))
        return []


@st.cache_data(ttl=300)
def load_profile(username: str) -> UserProfile | None:
    return resolve_profile(get_album_service().store, username)


@st.cache_data(ttl=300)
def load_profile_albums(owner_id: str, viewer_is_owner: bool) -> list[Album]:
    try:
        return get_album_service().list_profile_albums(owner_id, viewer_is_owner)
    except LensError as e:
        logger.error("load_profile_albums_error", owner_id=owner_id, error=str(e))
        return []


def load_album(album_id: str | None) -> Album | None:
    """Albums are read uncached so owners always see their latest edits."""
    return get_album_service().get_album(album_id)


@st.cache_data(ttl=3000)  # 50 minute cache
def get_image_url(storage_path: str | None, download_url: str | None) -> str | None:
    """
    Get a displayable URL for an album image.

    Images with a storage path get a signed URL; the stored download URL
    is the fallback.
    """
    if not storage_path:
        return download_url or None

    try:
        return get_storage_service().get_signed_url(storage_path, expiration=3600)
    except LensError as e:
        logger.error("get_image_url_error", storage_path=storage_path, error=str(e))
        return download_url or None


def image_src(image: AlbumImage) -> str | None:
    return get_image_url(image.storage_path, image.download_url)


def album_image_src(image: AlbumImage, index: int) -> str | None:
    return image_src(image)


def album_image_info(album: Album):
    """Lightbox details resolver for the images of one album."""

    def get_info(image: AlbumImage, index: int) -> ImageInfo:
        return ImageInfo(
            title=image.file_name or f"Image {index + 1}",
            size=image.size,
            dimensions=image.dimensions,
            album_title=album.display_title,
            owner_name=album.owner_name or album.owner_username or "User",
            owner_username=album.owner_username or None,
        )

    return get_info


def album_cover_urls(albums: list[Album]) -> dict[str, str | None]:
    return {album.id: image_src(album.images[0]) if album.images else None for album in albums}


def refresh_album_caches() -> None:
    """Drop cached listings after an album was written."""
    for loader in (
        load_public_albums,
        load_explore_images,
        load_owner_albums,
        load_studio_images,
        load_profile,
        load_profile_albums,
    ):
        loader.clear()


def explore_image_src(item: ExploreImage, index: int) -> str | None:
    return image_src(item.image)


def explore_image_info(item: ExploreImage, index: int) -> ImageInfo:
    """Lightbox details for an image shown outside its album."""
    return ImageInfo(
        title=item.file_name or f"Image {index + 1}",
        size=item.image.size,
        dimensions=item.image.dimensions,
        album_title=item.album_title,
        owner_name=item.owner_username or "User",
        owner_username=item.owner_username or None,
    )

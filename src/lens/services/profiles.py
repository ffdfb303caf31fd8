"""Profile lookup by username."""

from urllib.parse import unquote

from ..error_handling import DatabaseError
from ..logging_config import get_logger
from ..models.user import UserProfile
from .store import LensStore

logger = get_logger(__name__)


def normalize_username(username: str) -> str:
    """URL-decode and lower-case a username taken from a page parameter."""
    return unquote(username or "").strip().lower()


def resolve_profile(store: LensStore, username: str) -> UserProfile | None:
    """
    Resolve a profile URL to a user.

    The username index is consulted first. Users missing from the index are
    still found through their public albums, which carry the owner's
    username and name.

    Args:
        store: Document store
        username: Username as it appears in the URL

    Returns:
        UserProfile or None if no user can be found
    """
    normalized = normalize_username(username)
    if not normalized:
        return None

    try:
        uid = store.get_username(normalized)
    except DatabaseError:
        logger.warning("username_lookup_failed", username=normalized)
        uid = None

    if uid is not None:
        full_name = ""
        try:
            user = store.get_user(uid)
            if user is not None:
                full_name = user.full_name
        except DatabaseError:
            logger.warning("profile_read_failed", user_id=uid)

        return UserProfile(uid=uid, username=normalized, full_name=full_name)

    return _resolve_from_public_album(store, normalized)


def _resolve_from_public_album(store: LensStore, username: str) -> UserProfile | None:
    try:
        albums = store.query_albums(privacy="public", owner_username=username)
    except DatabaseError:
        logger.warning("profile_album_fallback_failed", username=username)
        return None

    if not albums:
        return None

    album = albums[0]
    return UserProfile(
        uid=album.owner_id,
        username=album.owner_username or username,
        full_name=album.owner_name,
    )

"""Title search over public albums."""

from dataclasses import dataclass

from ..models.album import UNTITLED_ALBUM, Album

DEFAULT_RESULT_LIMIT = 6


@dataclass
class AlbumSearchResult:
    id: str
    title: str
    images_count: int


def search_albums(albums: list[Album], term: str, limit: int = DEFAULT_RESULT_LIMIT) -> list[AlbumSearchResult]:
    """
    Filter already-fetched albums by a case-insensitive title substring.

    An empty or blank term matches nothing.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return []

    results: list[AlbumSearchResult] = []
    for album in albums:
        title = album.title or UNTITLED_ALBUM
        if needle in title.lower():
            results.append(AlbumSearchResult(id=album.id, title=title, images_count=album.images_count or 0))
            if len(results) >= limit:
                break
    return results

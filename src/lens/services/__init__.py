"""
Services module for the Lens application.

This module contains all service classes that handle business logic:
- AuthService: Email/password authentication and user management
- StorageService: Google Cloud Storage operations
- LensStore: DuckDB document store for users and albums
- ImageProcessor: Upload validation and image dimensions
- AlbumService: Album creation, editing and listings
"""

from .albums import AlbumService, RemoveImageResult, get_album_service, profile_stats
from .auth import AuthService, UserInfo
from .image_processor import ImageFile, ImageProcessor, get_image_processor
from .profiles import resolve_profile
from .search import search_albums
from .storage import StorageService, get_storage_service
from .store import LensStore, get_lens_store

__all__ = [
    "AlbumService",
    "RemoveImageResult",
    "get_album_service",
    "profile_stats",
    "AuthService",
    "UserInfo",
    "ImageFile",
    "ImageProcessor",
    "get_image_processor",
    "resolve_profile",
    "search_albums",
    "StorageService",
    "get_storage_service",
    "LensStore",
    "get_lens_store",
]

"""
Models module for the Lens application.

This module contains data models and schemas:
- Album, AlbumImage: Album documents and their embedded images
- UserProfile: Public user profile
- Database schemas and table definitions
- DatabaseManager: Database connection and schema management
"""

from .album import (
    Album,
    AlbumImage,
    AlbumPrivacy,
    ExploreImage,
    PRIVACY_VALUES,
    UNTITLED_ALBUM,
    flatten_album_images,
    image_key,
)
from .database import DatabaseManager, create_database, get_database_manager
from .schema import get_schema_statements, validate_schema_compatibility
from .user import UserProfile

__all__ = [
    "Album",
    "AlbumImage",
    "AlbumPrivacy",
    "ExploreImage",
    "PRIVACY_VALUES",
    "UNTITLED_ALBUM",
    "flatten_album_images",
    "image_key",
    "UserProfile",
    "DatabaseManager",
    "create_database",
    "get_database_manager",
    "get_schema_statements",
    "validate_schema_compatibility",
]

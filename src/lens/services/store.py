"""
Document store for users, usernames and albums backed by DuckDB.

Every Streamlit session shares one embedded database file. Reads and
writes go through a single lock because a DuckDB connection must not be
used from several threads at once. When database sync is enabled the
file is uploaded to the database bucket after each write, and downloaded
from it when no local copy exists yet.
"""

import threading
import time
from pathlib import Path
from typing import Any

import duckdb

from ..config import get_database_path, is_database_sync_enabled
from ..error_handling import DatabaseError, StorageError
from ..logging_config import get_logger, log_error, log_performance
from ..models.album import Album, AlbumPrivacy
from ..models.database import DatabaseManager, create_database, get_database_manager
from ..models.schema import ALBUM_COLUMNS, USER_COLUMNS
from ..models.user import UserProfile
from .storage import StorageService, get_storage_service

logger = get_logger(__name__)

DATABASE_FILENAME = "lens.db"


class LensStore:
    """
    Document-style access to the Lens tables.

    Args:
        db_path: Local DuckDB file (defaults to LENS_DB_PATH)
        sync_enabled: Upload the file to GCS after writes (defaults to LENS_DB_SYNC_ENABLED)
        storage_service: Storage service used for the database backup
    """

    def __init__(
        self,
        db_path: str | None = None,
        sync_enabled: bool | None = None,
        storage_service: StorageService | None = None,
    ):
        self.db_path = db_path or get_database_path()
        self.sync_enabled = is_database_sync_enabled() if sync_enabled is None else sync_enabled
        self._storage_service = storage_service
        self._db_manager: DatabaseManager | None = None
        self._lock = threading.RLock()

        logger.info("lens_store_initialized", db_path=self.db_path, sync_enabled=self.sync_enabled)

    @property
    def storage_service(self) -> StorageService:
        if self._storage_service is None:
            self._storage_service = get_storage_service()
        return self._storage_service

    @property
    def db_manager(self) -> DatabaseManager:
        """Get database manager, preparing the local database if needed."""
        if self._db_manager is None:
            self.ensure_local_database()
            self._db_manager = get_database_manager(self.db_path, create_if_missing=True)
        return self._db_manager

    def ensure_local_database(self) -> bool:
        """
        Ensure the local database exists, downloading it from GCS if enabled.

        Returns:
            bool: True if the database was downloaded from GCS, False otherwise

        Raises:
            DatabaseError: If the database cannot be prepared
        """
        if self.db_path == ":memory:" or Path(self.db_path).exists():
            return False

        try:
            if self.sync_enabled and self._download_from_gcs():
                logger.info("database_downloaded_from_gcs", db_path=self.db_path)
                return True

            create_database(self.db_path).close()
            logger.info("new_database_created", db_path=self.db_path)
            return False

        except DatabaseError:
            raise
        except Exception as e:
            log_error(e, {"operation": "ensure_local_database", "db_path": self.db_path})
            raise DatabaseError(f"Failed to prepare local database: {e}", original_exception=e) from e

    def _download_from_gcs(self) -> bool:
        gcs_path = f"databases/{DATABASE_FILENAME}"
        try:
            if not self.storage_service.file_exists(gcs_path):
                logger.debug("gcs_database_not_found", gcs_path=gcs_path)
                return False

            db_data = self.storage_service.download_database_file(DATABASE_FILENAME)

            local_path = Path(self.db_path)
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(db_data)
            return True

        except StorageError:
            local_path = Path(self.db_path)
            if local_path.exists():
                local_path.unlink()
            raise

    def sync_to_gcs(self) -> bool:
        """
        Upload the local database to the database bucket.

        Failures are logged and reported through the return value.
        """
        if not self.sync_enabled or self.db_path == ":memory:":
            return False

        try:
            with self._lock:
                if self._db_manager is not None:
                    self._db_manager.checkpoint()
                db_data = Path(self.db_path).read_bytes()

            self.storage_service.upload_database_file(db_data, DATABASE_FILENAME)
            return True

        except Exception as e:
            log_error(e, {"operation": "sync_to_gcs", "db_path": self.db_path})
            return False

    def close(self) -> None:
        with self._lock:
            if self._db_manager is not None:
                self._db_manager.close()
                self._db_manager = None

    def _fetch(self, operation: str, query: str, parameters: list | tuple | None = None) -> list[dict[str, Any]]:
        try:
            with self._lock:
                return self.db_manager.fetch_dicts(query, parameters)
        except (duckdb.Error, RuntimeError) as e:
            raise DatabaseError(f"Failed to {operation}: {e}", original_exception=e) from e

    def _write(self, operation: str, query: str, parameters: list | tuple) -> None:
        try:
            with self._lock:
                self.db_manager.execute_query(query, parameters)
        except (duckdb.Error, RuntimeError) as e:
            raise DatabaseError(f"Failed to {operation}: {e}", original_exception=e) from e

        self.sync_to_gcs()

    # Users

    def get_user(self, uid: str) -> UserProfile | None:
        rows = self._fetch("read user", f"SELECT {', '.join(USER_COLUMNS)} FROM users WHERE uid = ?", (uid,))
        return UserProfile.from_dict(rows[0]) if rows else None

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Get the user row including the password hash, matching the email case-insensitively."""
        rows = self._fetch(
            "read user",
            f"SELECT {', '.join(USER_COLUMNS)}, password_hash FROM users WHERE lower(email) = lower(?)",
            (email,),
        )
        return rows[0] if rows else None

    def put_user(self, profile: UserProfile, password_hash: str) -> None:
        data = profile.to_dict()
        self._write(
            "save user",
            """INSERT INTO users (uid, username, full_name, email, password_hash, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                data["uid"],
                data["username"],
                data["full_name"],
                data["email"],
                password_hash,
                data["created_at"],
                data["updated_at"],
            ),
        )

    # Username index

    def get_username(self, username: str) -> str | None:
        """Resolve a username to its uid through the username index."""
        rows = self._fetch("read username", "SELECT uid FROM usernames WHERE username = ?", (username,))
        return rows[0]["uid"] if rows else None

    def put_username(self, username: str, uid: str, created_at: str) -> None:
        self._write(
            "save username",
            "INSERT INTO usernames (username, uid, created_at) VALUES (?, ?, ?)",
            (username, uid, created_at),
        )

    def delete_username(self, username: str) -> None:
        self._write("delete username", "DELETE FROM usernames WHERE username = ?", (username,))

    # Albums

    def get_album(self, album_id: str) -> Album | None:
        rows = self._fetch("read album", f"SELECT {', '.join(ALBUM_COLUMNS)} FROM albums WHERE id = ?", (album_id,))
        return Album.from_dict(rows[0]) if rows else None

    def insert_album(self, album: Album) -> None:
        data = album.to_dict()
        placeholders = ", ".join("?" for _ in ALBUM_COLUMNS)
        self._write(
            "create album",
            f"INSERT INTO albums ({', '.join(ALBUM_COLUMNS)}) VALUES ({placeholders})",
            [data[column] for column in ALBUM_COLUMNS],
        )

    def update_album(self, album: Album) -> None:
        data = album.to_dict()
        columns = [column for column in ALBUM_COLUMNS if column not in ("id", "created_at")]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        self._write(
            "update album",
            f"UPDATE albums SET {assignments} WHERE id = ?",
            [data[column] for column in columns] + [album.id],
        )

    def delete_album(self, album_id: str) -> None:
        self._write("delete album", "DELETE FROM albums WHERE id = ?", (album_id,))

    def query_albums(
        self,
        owner_id: str | None = None,
        privacy: AlbumPrivacy | None = None,
        owner_username: str | None = None,
    ) -> list[Album]:
        """
        Query albums by equality filters, newest first.

        Args:
            owner_id: Only albums of this owner
            privacy: Only albums with this privacy
            owner_username: Only albums whose stored owner username matches

        Returns:
            Matching albums ordered by created_at descending
        """
        conditions = []
        parameters: list[Any] = []
        for column, value in (("owner_id", owner_id), ("privacy", privacy), ("owner_username", owner_username)):
            if value is not None:
                conditions.append(f"{column} = ?")
                parameters.append(value)

        query = f"SELECT {', '.join(ALBUM_COLUMNS)} FROM albums"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY created_at DESC"

        start_time = time.perf_counter()
        rows = self._fetch("query albums", query, parameters)
        log_performance("query_albums", time.perf_counter() - start_time, result_count=len(rows))

        return [Album.from_dict(row) for row in rows]


_lens_store: LensStore | None = None
_lens_store_lock = threading.Lock()


def get_lens_store() -> LensStore:
    """Get the global store instance."""
    global _lens_store
    if _lens_store is None:
        with _lens_store_lock:
            if _lens_store is None:
                _lens_store = LensStore()
    return _lens_store

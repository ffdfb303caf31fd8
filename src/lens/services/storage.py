"""Google Cloud Storage access for album images and the database backup."""

import mimetypes
import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import google.auth
import google.auth.transport.requests
from google.cloud import storage  # type: ignore[attr-defined]
from google.cloud.exceptions import GoogleCloudError, NotFound

from ..config import get_env
from ..error_handling import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

DATABASE_PREFIX = "databases/"
DEFAULT_SIGNED_URL_EXPIRATION = 3600


def make_safe_name(filename: str) -> str:
    """Replace every whitespace run in a file name with an underscore."""
    return re.sub(r"\s+", "_", Path(filename).name)


def build_album_image_path(album_id: str, image_id: str, filename: str) -> str:
    """Object path of an album image: ``albums/{album_id}/{image_id}_{safe_name}``."""
    return f"albums/{album_id}/{image_id}_{make_safe_name(filename)}"


@contextmanager
def gcs_errors(action: str) -> Iterator[None]:
    """Re-raise anything a GCS call throws as ``StorageError``."""
    try:
        yield
    except StorageError:
        raise
    except GoogleCloudError as e:
        raise StorageError(f"Failed to {action}: {e}", original_exception=e) from e
    except Exception as e:
        raise StorageError(f"Unexpected error while trying to {action}: {e}", original_exception=e) from e


class StorageService:
    """
    Album images live in the photos bucket under ``albums/``; the DuckDB file
    is backed up to the optional database bucket under ``databases/``.
    """

    def __init__(self, bucket_name: str | None = None, project_id: str | None = None) -> None:
        """
        Args:
            bucket_name: Photos bucket, defaults to GCS_PHOTOS_BUCKET
            project_id: GCP project, defaults to GOOGLE_CLOUD_PROJECT
        """
        self.photos_bucket_name = bucket_name or get_env("GCS_PHOTOS_BUCKET")
        self.project_id = project_id or get_env("GOOGLE_CLOUD_PROJECT")
        self.database_bucket_name = get_env("GCS_DATABASE_BUCKET")
        self.default_signed_url_expiration = get_env(
            "GCS_SIGNED_URL_EXPIRATION", DEFAULT_SIGNED_URL_EXPIRATION, int
        )

        if not self.photos_bucket_name:
            raise StorageError("GCS_PHOTOS_BUCKET environment variable is required")
        if not self.project_id:
            raise StorageError("GOOGLE_CLOUD_PROJECT environment variable is required")

        try:
            self.client = storage.Client(project=self.project_id)
            self.photos_bucket = self.client.bucket(self.photos_bucket_name)
            self.database_bucket = (
                self.client.bucket(self.database_bucket_name) if self.database_bucket_name else None
            )
        except Exception as e:
            raise StorageError(f"Failed to initialize GCS client: {e}", original_exception=e) from e

        logger.info(
            "storage_service_initialized",
            photos_bucket=self.photos_bucket_name,
            database_bucket=self.database_bucket_name,
            project_id=self.project_id,
        )

    def upload_album_image(
        self,
        album_id: str,
        image_id: str,
        file_data: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """
        Store one album image.

        Args:
            album_id: Album the image belongs to
            image_id: Generated image identifier
            file_data: Raw image data
            filename: Original filename
            content_type: MIME type reported by the browser, guessed from the name if missing

        Returns:
            dict: storage_path, download_url, size and content_type of the stored object
        """
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        gcs_path = build_album_image_path(album_id, image_id, filename)

        with gcs_errors(f"upload image '{filename}'"):
            blob = self.photos_bucket.blob(gcs_path)
            blob.metadata = {
                "album_id": album_id,
                "image_id": image_id,
                "original_filename": filename,
                "uploaded_at": datetime.now().isoformat(),
            }
            blob.upload_from_string(file_data, content_type=content_type)

        logger.info("album_image_uploaded", gcs_path=gcs_path, album_id=album_id, file_size=len(file_data))
        return {
            "storage_path": gcs_path,
            "download_url": blob.public_url,
            "size": len(file_data),
            "content_type": content_type,
        }

    def get_signed_url(self, gcs_path: str, expiration: int | None = None) -> str:
        """
        Create a V4 signed GET URL for an album image.

        Args:
            gcs_path: Object path
            expiration: Lifetime in seconds, defaults to GCS_SIGNED_URL_EXPIRATION

        Returns:
            str: Signed URL
        """
        expiration = expiration or self.default_signed_url_expiration

        with gcs_errors(f"generate signed URL for '{gcs_path}'"):
            credentials, _ = google.auth.default()
            try:
                credentials.refresh(google.auth.transport.requests.Request())
            except Exception as e:  # nosec B110
                # User credentials on a workstation cannot be refreshed this way; their token still signs
                logger.debug("credentials_refresh_skipped", error=str(e))

            signed_url: str = self.photos_bucket.blob(gcs_path).generate_signed_url(
                expiration=datetime.now() + timedelta(seconds=expiration),
                method="GET",
                version="v4",
                service_account_email=getattr(credentials, "service_account_email", None),
                access_token=credentials.token,
            )

        logger.debug("signed_url_generated", gcs_path=gcs_path, expiration=expiration)
        return signed_url

    def delete_file(self, gcs_path: str) -> None:
        """Delete an object. A missing object is logged, not raised."""
        with gcs_errors(f"delete file '{gcs_path}'"):
            blob = self.photos_bucket.blob(gcs_path)
            if not blob.exists():
                logger.warning("delete_file_not_found", gcs_path=gcs_path)
                return
            blob.delete()

        logger.info("file_deleted", gcs_path=gcs_path)

    def check_bucket_exists(self) -> bool:
        """Whether the photos bucket is reachable; used by the health check."""
        try:
            self.photos_bucket.reload()
        except NotFound:
            logger.error("bucket_not_found", bucket=self.photos_bucket_name)
            return False
        except Exception as e:
            logger.error("bucket_check_failed", bucket=self.photos_bucket_name, error=str(e))
            return False
        return True

    def _bucket_for(self, gcs_path: str) -> Any:
        if not gcs_path.startswith(DATABASE_PREFIX):
            return self.photos_bucket
        if self.database_bucket is None:
            raise StorageError("GCS_DATABASE_BUCKET environment variable is required for database backup")
        return self.database_bucket

    def file_exists(self, gcs_path: str) -> bool:
        """Look up an object; ``databases/`` paths live in the database bucket."""
        with gcs_errors(f"check existence of '{gcs_path}'"):
            exists: bool = self._bucket_for(gcs_path).blob(gcs_path).exists()
        return exists

    def upload_database_file(self, file_data: bytes, filename: str) -> dict[str, str]:
        """
        Back up the DuckDB file to ``databases/{filename}``.

        Returns:
            dict: gcs_path, bucket, filename and file_size
        """
        gcs_path = f"{DATABASE_PREFIX}{filename}"
        with gcs_errors(f"upload database file '{filename}'"):
            blob = self._bucket_for(gcs_path).blob(gcs_path)
            blob.metadata = {"filename": filename, "uploaded_at": datetime.now().isoformat(), "file_type": "database"}
            blob.upload_from_string(file_data, content_type="application/octet-stream")

        logger.info("database_file_uploaded", gcs_path=gcs_path, bucket=self.database_bucket_name, size=len(file_data))
        return {
            "gcs_path": gcs_path,
            "bucket": str(self.database_bucket_name),
            "filename": filename,
            "file_size": str(len(file_data)),
        }

    def download_database_file(self, filename: str) -> bytes:
        gcs_path = f"{DATABASE_PREFIX}{filename}"
        with gcs_errors(f"download database file '{filename}'"):
            blob = self._bucket_for(gcs_path).blob(gcs_path)
            if not blob.exists():
                raise StorageError(f"Database file not found: {gcs_path}")
            data: bytes = blob.download_as_bytes()

        logger.info("database_file_downloaded", gcs_path=gcs_path, size=len(data))
        return data


_storage_service: StorageService | None = None


def get_storage_service(bucket_name: str | None = None, project_id: str | None = None) -> StorageService:
    """Get the process-wide storage service, creating it on first use."""
    global _storage_service

    if _storage_service is None:
        _storage_service = StorageService(bucket_name=bucket_name, project_id=project_id)

    return _storage_service

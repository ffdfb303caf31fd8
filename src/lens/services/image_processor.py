"""Image validation service for the Lens application."""

import io
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import requests
from PIL import Image, UnidentifiedImageError

from ..logging_config import get_logger, log_performance

logger = get_logger(__name__)

MAX_IMAGES = 5
MAX_IMAGE_SIZE = 5 * 1024 * 1024
ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp")
FETCH_TIMEOUT = 10


@dataclass
class ImageFile:
    """An image chosen for upload, detached from the Streamlit widget."""

    name: str
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_uploaded_file(cls, uploaded_file: Any) -> "ImageFile":
        """Build from a Streamlit ``UploadedFile``."""
        return cls(name=uploaded_file.name, data=uploaded_file.getvalue(), content_type=uploaded_file.type)


class ImageProcessor:
    """Service for validating image selections and reading image dimensions."""

    def __init__(self, max_file_size: int = MAX_IMAGE_SIZE, allowed_types: tuple[str, ...] = ALLOWED_TYPES) -> None:
        self.max_file_size = max_file_size
        self.allowed_types = allowed_types

    def detect_content_type(self, filename: str, declared: str | None = None) -> str | None:
        """Return the declared MIME type, else the one guessed from the extension."""
        if declared:
            return declared
        guessed, _ = mimetypes.guess_type(filename)
        return guessed

    def is_supported_type(self, file: ImageFile) -> bool:
        return self.detect_content_type(file.name, file.content_type) in self.allowed_types

    def validate_selection(
        self,
        files: list[ImageFile],
        max_files: int = MAX_IMAGES,
        current_count: int = 0,
        already_selected: int = 0,
    ) -> tuple[list[ImageFile], list[str]]:
        """
        Filter a selection of files down to the ones that may be uploaded.

        Args:
            files: Newly selected files
            max_files: Maximum number of images in the album
            current_count: Images already stored in the album
            already_selected: Files selected earlier and not yet uploaded

        Returns:
            tuple: (accepted files, error messages). Valid files beyond the
            free slots are dropped without an error.
        """
        available_slots = max_files - current_count - already_selected
        if available_slots <= 0:
            return [], [f"Maximum {max_files} images reached."]

        accepted: list[ImageFile] = []
        errors: list[str] = []

        for file in files:
            if not self.is_supported_type(file):
                errors.append(f"{file.name} has unsupported format.")
                continue

            if file.size > self.max_file_size:
                errors.append(f"{file.name} exceeds 5MB.")
                continue

            if len(accepted) < available_slots:
                accepted.append(file)

        if errors:
            logger.info("upload_selection_rejected", rejected=len(errors), accepted=len(accepted))

        return accepted, errors

    def read_dimensions(self, image_data: bytes) -> tuple[int, int] | None:
        """
        Read the pixel dimensions of an image.

        Returns:
            tuple: (width, height), or None if the data cannot be decoded
        """
        start_time = datetime.now()
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning("image_dimensions_unreadable", file_size=len(image_data), error=str(e))
            return None

        duration = (datetime.now() - start_time).total_seconds()
        log_performance("read_dimensions", duration, width=width, height=height, file_size=len(image_data))
        return width, height

    def fetch_dimensions(self, url: str) -> tuple[int, int] | None:
        """
        Download an image and read its pixel dimensions.

        Used for images stored before dimensions were recorded at upload.

        Returns:
            tuple: (width, height), or None if the image cannot be fetched or decoded
        """
        if not url.startswith(("http://", "https://")):
            return None
        try:
            response = requests.get(url, timeout=FETCH_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("image_fetch_failed", url=url, error=str(e))
            return None
        return self.read_dimensions(response.content)


# Global image processor instance
image_processor = ImageProcessor()


def get_image_processor() -> ImageProcessor:
    """Get the global image processor instance."""
    return image_processor

"""
Gallery layout helpers.

Normalizes arbitrary image records into gallery items and splits them into
justified rows: every complete row fills the container width exactly,
and images keep their aspect ratio.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

GalleryLayout = Literal["justified", "masonry"]

DEFAULT_ROW_HEIGHT = 220
DEFAULT_ROW_GAP = 16
DEFAULT_RATIO = 4 / 3


@dataclass
class ImageInfo:
    """Details shown in the lightbox info panel."""

    title: str | None = None
    size: int | None = None
    dimensions: tuple[int, int] | None = None
    album_title: str | None = None
    owner_name: str | None = None
    owner_username: str | None = None


@dataclass
class GalleryImage(Generic[T]):
    src: str
    alt: str
    original: T
    info: ImageInfo | None = None


@dataclass
class RowItem(Generic[T]):
    image: GalleryImage[T]
    index: int
    ratio: float

    def width(self, height: float) -> float:
        return self.ratio * height


@dataclass
class JustifiedRow(Generic[T]):
    height: float
    items: list[RowItem[T]] = field(default_factory=list)


def _field(image: Any, name: str) -> Any:
    if isinstance(image, Mapping):
        return image.get(name)
    return getattr(image, name, None)


def default_get_src(image: Any) -> str | None:
    """The image itself when it is a string, else its download_url, src or url."""
    if isinstance(image, str):
        return image
    if image is None:
        return None

    for name in ("download_url", "src", "url"):
        value = _field(image, name)
        if isinstance(value, str):
            return value
    return None


def default_get_alt(image: Any, index: int, title: str | None = None) -> str:
    if image is not None and not isinstance(image, str):
        for name in ("alt", "file_name", "name"):
            value = _field(image, name)
            if isinstance(value, str):
                return value

    return f"{title} {index + 1}" if title else f"Image {index + 1}"


def normalize_images(
    images: list[T],
    title: str | None = None,
    get_src: Callable[[T, int], str | None] | None = None,
    get_alt: Callable[[T, int], str | None] | None = None,
    get_info: Callable[[T, int], ImageInfo] | None = None,
) -> list[GalleryImage[T]]:
    """
    Resolve image records to gallery items, dropping records without a source.

    Args:
        images: Image records of any shape
        title: Gallery title, used for fallback alt texts
        get_src: Source resolver (defaults to default_get_src)
        get_alt: Alt text resolver (defaults to default_get_alt)
        get_info: Info panel resolver

    Returns:
        Gallery items in input order
    """
    normalized: list[GalleryImage[T]] = []
    for index, image in enumerate(images):
        src = get_src(image, index) if get_src else default_get_src(image)
        if not src:
            continue

        alt = get_alt(image, index) if get_alt else None
        if alt is None:
            alt = default_get_alt(image, index, title)

        info = get_info(image, index) if get_info else None
        normalized.append(GalleryImage(src=src, alt=alt, original=image, info=info))
    return normalized


def image_ratio(image: GalleryImage, dimensions: Mapping[str, tuple[int, int]] | None = None) -> float:
    """Aspect ratio from the image info, else the measured dimensions, else 4:3."""
    dims = image.info.dimensions if image.info and image.info.dimensions else None
    if dims is None and dimensions:
        dims = dimensions.get(image.src)
    if dims and dims[0] > 0 and dims[1] > 0:
        return dims[0] / dims[1]
    return DEFAULT_RATIO


def compute_justified_rows(
    images: list[GalleryImage[T]],
    container_width: float,
    row_height: float = DEFAULT_ROW_HEIGHT,
    row_gap: float = DEFAULT_ROW_GAP,
    dimensions: Mapping[str, tuple[int, int]] | None = None,
) -> list[JustifiedRow[T]]:
    """
    Split images into justified rows.

    Images are added to a row until the row at ``row_height`` would be at
    least as wide as the container; that row is then scaled to fit the
    width exactly. A trailing incomplete row keeps ``row_height``.

    Args:
        images: Normalized gallery images
        container_width: Available width in pixels
        row_height: Target row height
        row_gap: Horizontal gap between images
        dimensions: Measured (width, height) keyed by image source

    Returns:
        Rows in order; empty when the container width is not positive
    """
    if container_width <= 0:
        return []

    rows: list[JustifiedRow[T]] = []
    row: list[RowItem[T]] = []
    ratio_sum = 0.0

    for index, image in enumerate(images):
        ratio = image_ratio(image, dimensions)
        row.append(RowItem(image=image, index=index, ratio=ratio))
        ratio_sum += ratio

        gaps = row_gap * (len(row) - 1)
        if ratio_sum * row_height + gaps >= container_width:
            rows.append(JustifiedRow(height=(container_width - gaps) / ratio_sum, items=row))
            row = []
            ratio_sum = 0.0

    if row:
        rows.append(JustifiedRow(height=row_height, items=row))

    return rows


def compute_masonry_columns(images: list[GalleryImage[T]], columns: int = 3) -> list[list[RowItem[T]]]:
    """Distribute images over columns, each image going to the currently shortest column."""
    columns = max(1, columns)
    result: list[list[RowItem[T]]] = [[] for _ in range(columns)]
    heights = [0.0] * columns

    for index, image in enumerate(images):
        ratio = image_ratio(image)
        target = heights.index(min(heights))
        result[target].append(RowItem(image=image, index=index, ratio=ratio))
        heights[target] += 1 / ratio

    return result

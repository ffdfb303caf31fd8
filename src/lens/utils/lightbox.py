"""
Lightbox state for the gallery viewer.

Holds the open image, zoom and pan state, and builds the info panel text.
The Streamlit dialog renders whatever this state describes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from .gallery_layout import GalleryImage

MIN_SCALE = 1.0
MAX_SCALE = 4.0
SCALE_STEP = 0.5


def format_bytes(size: int | float | None) -> str | None:
    """Human-readable file size, or None when the size is unknown."""
    if not size or size <= 0:
        return None
    if size < 1024:
        return f"{size} B"
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    mb = kb / 1024
    if mb < 1024:
        return f"{mb:.1f} MB"
    return f"{mb / 1024:.1f} GB"


@dataclass
class LightboxDetails:
    title: str
    size: str | None
    dimensions: tuple[int, int] | None
    album_title: str | None
    owner_username: str | None
    owner_name: str | None
    counter: str

    @property
    def owner_label(self) -> str | None:
        if self.owner_username:
            return f"By {self.owner_username}"
        if self.owner_name:
            return f"By {self.owner_name}"
        return None


@dataclass
class LightboxState:
    count: int
    open: bool = False
    index: int = 0
    scale: float = MIN_SCALE
    position: tuple[float, float] = (0.0, 0.0)
    dragging: bool = False
    drag_start: tuple[float, float] = (0.0, 0.0)
    measured: dict[str, tuple[int, int]] = field(default_factory=dict)

    def _reset_view(self) -> None:
        self.scale = MIN_SCALE
        self.position = (0.0, 0.0)
        self.dragging = False

    def open_at(self, index: int) -> None:
        if not 0 <= index < self.count:
            return
        self.index = index
        self.open = True
        self._reset_view()

    def close(self) -> None:
        self.open = False
        self.dragging = False

    @property
    def can_go_prev(self) -> bool:
        return self.index > 0

    @property
    def can_go_next(self) -> bool:
        return self.index < self.count - 1

    def go_to(self, index: int) -> None:
        if 0 <= index < self.count and index != self.index:
            self.index = index
            self._reset_view()

    def prev(self) -> None:
        if self.can_go_prev:
            self.go_to(self.index - 1)

    def next(self) -> None:
        if self.can_go_next:
            self.go_to(self.index + 1)

    def handle_key(self, key: str) -> None:
        """Arrow keys navigate while the lightbox is open."""
        if not self.open:
            return
        if key == "ArrowLeft":
            self.prev()
        elif key == "ArrowRight":
            self.next()

    def zoom_in(self) -> None:
        self.scale = min(self.scale + SCALE_STEP, MAX_SCALE)

    def zoom_out(self) -> None:
        self.scale = max(self.scale - SCALE_STEP, MIN_SCALE)

    def reset(self) -> None:
        self.scale = MIN_SCALE
        self.position = (0.0, 0.0)

    @property
    def can_zoom_in(self) -> bool:
        return self.scale < MAX_SCALE

    @property
    def can_zoom_out(self) -> bool:
        return self.scale > MIN_SCALE

    def pointer_down(self, x: float, y: float) -> None:
        # Panning only applies to a zoomed image
        if self.scale <= MIN_SCALE:
            return
        self.dragging = True
        self.drag_start = (x - self.position[0], y - self.position[1])

    def pointer_move(self, x: float, y: float) -> None:
        if not self.dragging or self.scale <= MIN_SCALE:
            return
        self.position = (x - self.drag_start[0], y - self.drag_start[1])

    def pointer_up(self) -> None:
        self.dragging = False

    def transform(self) -> str:
        x, y = self.position
        return f"translate({x:g}px, {y:g}px) scale({self.scale:g})"

    def record_dimensions(self, src: str, width: int, height: int) -> None:
        if width and height:
            self.measured[src] = (width, height)

    def describe(
        self,
        images: list[GalleryImage],
        gallery_title: str | None = None,
        measured: Mapping[str, tuple[int, int]] | None = None,
    ) -> LightboxDetails | None:
        """Info panel contents for the current image, or None when there is no image."""
        if not 0 <= self.index < len(images):
            return None

        current = images[self.index]
        info = current.info
        cache = measured if measured is not None else self.measured

        title = (info.title if info else None) or current.alt or gallery_title or "Image"
        dimensions = (info.dimensions if info else None) or cache.get(current.src)
        owner_username = (info.owner_username or "").strip() if info else ""
        owner_name = (info.owner_name or "").strip() if info else ""

        return LightboxDetails(
            title=title,
            size=format_bytes(info.size if info else None),
            dimensions=dimensions,
            album_title=info.album_title if info else None,
            owner_username=owner_username or None,
            owner_name=owner_name or None,
            counter=f"{self.index + 1} / {len(images)}",
        )

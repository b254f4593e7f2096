"""Image dimension discovery and an owned, bounded dimension cache."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from app.masonrygrid.layout.masonry import MasonryItem

log = logging.getLogger(__name__)


class DimensionLoadError(Exception):
    """Raised when a resource's intrinsic size cannot be read."""


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return calculate_aspect_ratio(self)

    def scaled_to(self, target_width: float) -> "ImageDimensions":
        return scale_dimensions(self, target_width)


def calculate_aspect_ratio(dimensions: ImageDimensions) -> float:
    """width / height."""
    if dimensions.height <= 0:
        raise ValueError("height must be > 0")
    return dimensions.width / dimensions.height


def scale_dimensions(dimensions: ImageDimensions, target_width: float) -> ImageDimensions:
    """Scale to target_width keeping the aspect ratio; height is rounded."""
    ratio = calculate_aspect_ratio(dimensions)
    return ImageDimensions(width=int(target_width), height=int(round(target_width / ratio)))


def load_image_dimensions(src: str | Path) -> ImageDimensions:
    """Read the intrinsic size of an image file.

    Pillow only parses the header here; pixel data is never decoded.
    """
    try:
        with Image.open(src) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DimensionLoadError(f"Failed to load image: {src}") from e
    if width <= 0 or height <= 0:
        raise DimensionLoadError(f"Image has no usable size: {src}")
    return ImageDimensions(width=width, height=height)


Loader = Callable[[str], ImageDimensions]


class DimensionCache:
    """LRU cache of discovered dimensions keyed by resource identifier."""

    def __init__(self, max_entries: int = 1024) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, ImageDimensions]" = OrderedDict()

    def get(self, src: str) -> Optional[ImageDimensions]:
        dims = self._entries.get(src)
        if dims is not None:
            self._entries.move_to_end(src)
        return dims

    def put(self, src: str, dims: ImageDimensions) -> None:
        self._entries[src] = dims
        self._entries.move_to_end(src)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def get_or_load(self, src: str, loader: Loader = load_image_dimensions) -> ImageDimensions:
        """Return cached dimensions, loading and storing them on a miss.

        Loader errors propagate and nothing is stored.
        """
        dims = self.get(src)
        if dims is None:
            dims = loader(src)
            self.put(src, dims)
        return dims

    def clear(self) -> None:
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, src: object) -> bool:
        return src in self._entries


def discover_dimensions(
    items: Iterable[MasonryItem],
    cache: DimensionCache,
    *,
    loader: Loader = load_image_dimensions,
    on_error: Optional[Callable[[MasonryItem, Exception], None]] = None,
) -> List[MasonryItem]:
    """Fill in width/height for items that have a src but no known size.

    A failed load leaves the item as-is (it lays out at the fallback
    height) and is reported through on_error instead of raising.
    """

    out: List[MasonryItem] = []
    for item in items:
        if item.has_dimensions or not item.src:
            out.append(item)
            continue
        try:
            dims = cache.get_or_load(item.src, loader)
        except (DimensionLoadError, OSError, ValueError) as e:
            log.warning("Failed to load dimensions for %s: %s", item.src, e)
            if on_error is not None:
                on_error(item, e)
            out.append(item)
            continue
        out.append(item.with_dimensions(dims.width, dims.height))
    return out

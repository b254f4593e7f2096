"""Masonry layout (container-first) helpers.

This module is intentionally UI-framework agnostic.

Goal: given a *known* container width and a list of items with intrinsic
sizes (or none yet), compute stable positions without waiting for assets to
load. Items with unknown sizes get FALLBACK_ITEM_HEIGHT; once a renderer
learns the real size it swaps in an updated item and calls layout again.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Tuple

FALLBACK_ITEM_HEIGHT = 200.0


@dataclass(frozen=True)
class MasonryItem:
    """Input item for layout.

    width/height: intrinsic size in any consistent unit. If either is
    unknown, the item is laid out at FALLBACK_ITEM_HEIGHT.
    src: resource identifier used for dimension discovery.
    data: opaque payload, never read by the layout.
    """

    key: str
    width: Optional[float] = None
    height: Optional[float] = None
    src: Optional[str] = None
    data: Any = None

    @property
    def has_dimensions(self) -> bool:
        return bool(self.width and self.height and self.width > 0 and self.height > 0)

    def with_dimensions(self, width: float, height: float) -> "MasonryItem":
        return replace(self, width=width, height=height)


@dataclass(frozen=True)
class MasonryPlacement:
    key: str
    column: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class MasonryLayout:
    positions: Tuple[MasonryPlacement, ...]
    container_height: float
    column_width: float
    current_columns: int


EMPTY_LAYOUT = MasonryLayout(
    positions=(), container_height=0.0, column_width=0.0, current_columns=1
)


def _column_width(container_width_px: float, columns: int, gutter_px: float) -> float:
    if isinstance(columns, bool) or not isinstance(columns, int):
        raise ValueError("columns must be an int")
    if columns <= 0:
        raise ValueError("columns must be > 0")
    if not math.isfinite(container_width_px):
        raise ValueError("container_width_px must be finite")
    if not math.isfinite(gutter_px):
        raise ValueError("gutter_px must be finite")
    if container_width_px <= 0:
        raise ValueError("container_width_px must be > 0")
    if gutter_px < 0:
        raise ValueError("gutter_px must be >= 0")

    usable = container_width_px - gutter_px * (columns - 1)
    if usable <= 0:
        raise ValueError("container too small for given columns/gutter")

    return usable / columns


def _item_height(item: MasonryItem, column_width: float) -> float:
    if item.has_dimensions:
        return (item.height / item.width) * column_width
    return FALLBACK_ITEM_HEIGHT


def layout_masonry(
    *,
    container_width_px: float,
    columns: int,
    gutter_px: float,
    items: Iterable[MasonryItem],
) -> MasonryLayout:
    """Compute placements and total height.

    Algorithm: greedy assignment to shortest column.

    Raises ValueError for columns < 1, non-finite or non-positive width,
    and non-finite or negative gutter.
    """

    col_w = _column_width(container_width_px, columns, gutter_px)
    col_heights = [0.0 for _ in range(columns)]

    placements: List[MasonryPlacement] = []
    for item in items:
        # Select shortest column (stable: choose lowest index on ties).
        col = min(range(columns), key=lambda c: col_heights[c])
        x = col * (col_w + gutter_px)
        y = col_heights[col]
        h = _item_height(item, col_w)

        placements.append(
            MasonryPlacement(
                key=item.key,
                column=col,
                x=x,
                y=y,
                width=col_w,
                height=h,
            )
        )

        col_heights[col] = y + h + gutter_px

    total = max(col_heights) - gutter_px if placements else 0.0
    return MasonryLayout(
        positions=tuple(placements),
        container_height=max(0.0, total),
        column_width=col_w,
        current_columns=columns,
    )


def column_heights(layout: MasonryLayout, gutter_px: float) -> List[float]:
    """Final per-column heights (including trailing gutter) of a layout."""
    heights = [0.0] * layout.current_columns
    for p in layout.positions:
        heights[p.column] = max(heights[p.column], p.y + p.height + gutter_px)
    return heights

"""Recompute-on-change controller for a masonry grid.

The layout functions are pure; this class holds the inputs a renderer
feeds it (options, items, container width) and the last layout computed
from them. Callers decide when to recompute: directly via recalculate(),
or through the debounced/throttled entry points.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from app.masonrygrid.layout.columns import (
    DEFAULT_BREAKPOINTS,
    ColumnSpec,
    clamp_columns,
    resolve_columns,
)
from app.masonrygrid.layout.masonry import (
    EMPTY_LAYOUT,
    MasonryItem,
    MasonryLayout,
    layout_masonry,
)
from app.masonrygrid.utils.dimensions import (
    DimensionCache,
    ImageDimensions,
    discover_dimensions,
)
from app.masonrygrid.utils.rate_limit import Debounced, Throttled, debounce, throttle

log = logging.getLogger(__name__)

ITEMS_DEBOUNCE_MS = 150
RESIZE_THROTTLE_MS = 100

_CAMEL_KEYS = {
    "transitionDuration": "transition_duration",
    "enableAnimation": "enable_animation",
}


@dataclass(frozen=True)
class MasonryOptions:
    columns: ColumnSpec = field(default_factory=lambda: dict(DEFAULT_BREAKPOINTS))
    gap: float = 16
    # Cosmetic only; never affects positions.
    transition_duration: int = 300
    enable_animation: bool = True
    loading: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "MasonryOptions":
        """Build options from a dict using either camelCase or snake_case keys."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in raw.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ValueError(f"unknown masonry option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


class MasonryGrid:
    def __init__(
        self,
        options: Optional[MasonryOptions] = None,
        items: Iterable[MasonryItem] = (),
        container_width: float = 0,
        dimension_cache: Optional[DimensionCache] = None,
    ) -> None:
        self.options = options or MasonryOptions()
        self._items: Tuple[MasonryItem, ...] = tuple(items)
        self._container_width = container_width
        self.dimension_cache = dimension_cache
        self.layout: MasonryLayout = EMPTY_LAYOUT
        self.is_layout_ready = False
        # Guards the inputs and the (layout, is_layout_ready) pair; the
        # debounced path recomputes on a timer thread.
        self._lock = threading.RLock()
        self._debounced_recalculate: Debounced = debounce(self.recalculate, ITEMS_DEBOUNCE_MS)

    @property
    def items(self) -> Tuple[MasonryItem, ...]:
        return self._items

    @property
    def container_width(self) -> float:
        return self._container_width

    @property
    def current_columns(self) -> int:
        width = self._container_width if self._container_width > 0 else 0
        return clamp_columns(resolve_columns(self.options.columns, width))

    def _store(self, layout: MasonryLayout, ready: bool) -> MasonryLayout:
        self.layout = layout
        self.is_layout_ready = ready
        return layout

    def recalculate(self) -> MasonryLayout:
        """Recompute the layout from the current inputs and store it.

        Inputs the engine rejects (e.g. a width too narrow for the gaps)
        reset the grid to EMPTY_LAYOUT instead of raising, so the stored
        layout always matches the stored inputs.
        """
        with self._lock:
            if self.options.loading or self._container_width <= 0 or not self._items:
                return self._store(EMPTY_LAYOUT, False)

            try:
                layout = layout_masonry(
                    container_width_px=self._container_width,
                    columns=self.current_columns,
                    gutter_px=self.options.gap,
                    items=self._items,
                )
            except ValueError as e:
                log.warning("Layout rejected at width %s: %s", self._container_width, e)
                return self._store(EMPTY_LAYOUT, False)
            return self._store(layout, True)

    def set_container_width(self, width: float) -> MasonryLayout:
        with self._lock:
            self._container_width = width
            return self.recalculate()
    def resize_handler(self, limit_ms: float = RESIZE_THROTTLE_MS) -> Throttled:
        """A throttled width setter for wiring to resize notifications."""
        return throttle(self.set_container_width, limit_ms)

    def set_items(self, items: Iterable[MasonryItem]) -> None:
        """Replace the items.

        The first layout is computed synchronously; once one is ready,
        further item changes recompute through the debounced path.
        """
        with self._lock:
            self._items = tuple(items)
            ready = self.is_layout_ready
        if ready:
            self._debounced_recalculate()
        else:
            self.recalculate()

    def cancel_pending(self) -> None:
        self._debounced_recalculate.cancel()

    def update_item_dimensions(self, key: str, dims: ImageDimensions) -> MasonryLayout:
        """Record a size reported by the renderer for one item and re-layout."""
        with self._lock:
            updated = []
            found = False
            for item in self._items:
                if item.key == key:
                    item = item.with_dimensions(dims.width, dims.height)
                    found = True
                updated.append(item)
            if not found:
                raise KeyError(key)
            self._items = tuple(updated)
            return self.recalculate()

    def discover_dimensions(
        self,
        on_error: Optional[Callable[[MasonryItem, Exception], None]] = None,
    ) -> MasonryLayout:
        """Fill unknown sizes from each item's src via the dimension cache."""
        if self.dimension_cache is None:
            self.dimension_cache = DimensionCache()
        items = discover_dimensions(self._items, self.dimension_cache, on_error=on_error)
        with self._lock:
            self._items = tuple(items)
            return self.recalculate()

    def item_style(self, index: int) -> Dict[str, Any]:
        """Absolute-position style for the item at index in the current layout."""
        p = self.layout.positions[index]
        style: Dict[str, Any] = {
            "position": "absolute",
            "left": p.x,
            "top": p.y,
            "width": p.width,
            "height": p.height,
        }
        duration = self.options.transition_duration if self.options.enable_animation else 0
        if duration > 0:
            style["transition"] = f"transform {duration}ms ease-out, opacity {duration}ms ease-out"
        return style

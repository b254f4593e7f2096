"""Responsive column-count helpers for masonry layouts."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Union

from app.masonrygrid.layout.breakpoints import BREAKPOINTS

DEFAULT_BREAKPOINTS: Mapping[str, int] = {
    "sm": 1,
    "md": 2,
    "lg": 3,
    "xl": 4,
    "2xl": 5,
}

ColumnSpec = Union[int, Mapping[str, int]]


def _table_entry(table: Mapping[str, int], name: str) -> int:
    value = table.get(name)
    # Zero, negatives and non-ints count as "not set".
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_BREAKPOINTS[name]


def resolve_columns(spec: ColumnSpec, width: float) -> int:
    """Resolve a column spec to a concrete column count.

    Policy:
    - an int spec is returned as-is (the layout engine validates it)
    - a breakpoint table is checked widest first: 2xl, xl, lg, md, sm
    - a missing entry falls back to DEFAULT_BREAKPOINTS for that tier
    - below the sm threshold the answer is always 1
    """

    if isinstance(spec, bool):
        raise TypeError("columns must be an int or a breakpoint mapping")
    if isinstance(spec, int):
        return spec
    if not isinstance(spec, Mapping):
        raise TypeError("columns must be an int or a breakpoint mapping")
    if not math.isfinite(width):
        raise ValueError("width must be finite")

    for name in reversed(BREAKPOINTS):
        if width >= BREAKPOINTS[name]:
            return _table_entry(spec, name)
    return DEFAULT_BREAKPOINTS["sm"]


def clamp_columns(columns: int) -> int:
    """Clamp a resolved count to at least one column."""
    return max(1, int(columns))

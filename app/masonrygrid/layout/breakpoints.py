"""Viewport breakpoint scale shared by column resolution and device checks."""

from __future__ import annotations

import math
from typing import Dict

# Ordered narrowest first. Widths are inclusive lower bounds.
BREAKPOINTS: Dict[str, int] = {
    "sm": 640,
    "md": 768,
    "lg": 1024,
    "xl": 1280,
    "2xl": 1536,
}

TABLET_MIN_WIDTH = BREAKPOINTS["md"]
DESKTOP_MIN_WIDTH = BREAKPOINTS["lg"]


def _check_width(width: float) -> float:
    if not math.isfinite(width):
        raise ValueError("width must be finite")
    return width


def breakpoint_for(width: float) -> str:
    """Return the breakpoint name for a viewport width.

    Anything below 640 is still labelled ``sm``.
    """
    _check_width(width)
    for name in reversed(BREAKPOINTS):
        if width >= BREAKPOINTS[name]:
            return name
    return "sm"


def is_mobile(width: float) -> bool:
    return _check_width(width) < TABLET_MIN_WIDTH


def is_tablet(width: float) -> bool:
    return TABLET_MIN_WIDTH <= _check_width(width) < DESKTOP_MIN_WIDTH


def is_desktop(width: float) -> bool:
    return _check_width(width) >= DESKTOP_MIN_WIDTH


def device_class(width: float) -> str:
    if is_mobile(width):
        return "mobile"
    if is_tablet(width):
        return "tablet"
    return "desktop"


def media_queries() -> Dict[str, str]:
    """CSS min-width queries matching BREAKPOINTS, for renderers that need them."""
    return {name: f"(min-width: {px}px)" for name, px in BREAKPOINTS.items()}

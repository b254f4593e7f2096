from __future__ import annotations

from pathlib import Path
import argparse
import json
from typing import List, Optional

from app.masonrygrid.grid import MasonryGrid, MasonryOptions
from app.masonrygrid.layout.breakpoints import breakpoint_for, device_class
from app.masonrygrid.layout.masonry import MasonryItem


def _dimension(entry: dict, name: str, index: int) -> Optional[float]:
    value = entry.get(name)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"item {index}: {name} must be a number, got {value!r}") from None


def load_items(path: str) -> List[MasonryItem]:
    """Read items from a JSON list of {key|id, width, height, src} objects."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("items file must contain a JSON list")

    items: List[MasonryItem] = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"item {i} must be a JSON object")
        key = entry.get("key", entry.get("id", i))
        src = entry.get("src")
        if src and not Path(src).is_absolute():
            # Relative image paths are resolved against the items file.
            src = str(Path(path).resolve().parent / src)
        items.append(
            MasonryItem(
                key=str(key),
                width=_dimension(entry, "width", i),
                height=_dimension(entry, "height", i),
                src=src,
                data=entry.get("data"),
            )
        )
    return items


def run_cli_layout(
    items_path: str,
    width: float,
    columns: Optional[int] = None,
    gap: float = 16,
    discover: bool = False,
) -> MasonryGrid:
    options = MasonryOptions(gap=gap) if columns is None else MasonryOptions(columns=columns, gap=gap)
    grid = MasonryGrid(options, load_items(items_path), container_width=width)

    if discover:
        grid.discover_dimensions(
            on_error=lambda item, e: print(f"! {item.key}: {e}"),
        )
    layout = grid.recalculate()

    print(f"Width: {width} ({breakpoint_for(width)}, {device_class(width)})")
    print(f"Columns: {layout.current_columns}  column width: {layout.column_width:.2f}")
    for p in layout.positions:
        print(f"- {p.key}: col={p.column} x={p.x:.2f} y={p.y:.2f} w={p.width:.2f} h={p.height:.2f}")
    print(f"Container height: {layout.container_height:.2f}")
    return grid


def main() -> None:
    parser = argparse.ArgumentParser(description="Masonry grid layout runner")
    parser.add_argument("items", help="JSON file with a list of items")
    parser.add_argument("--width", type=float, required=True, help="Container width")
    parser.add_argument("--columns", type=int, default=None, help="Fixed column count (default: breakpoints)")
    parser.add_argument("--gap", type=float, default=16, help="Gap between items")
    parser.add_argument("--discover", action="store_true", help="Read missing sizes from each item's src")
    args = parser.parse_args()
    run_cli_layout(args.items, args.width, args.columns, args.gap, args.discover)


if __name__ == "__main__":
    main()

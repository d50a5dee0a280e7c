"""Pure rectangle arithmetic on the integer grid."""

from __future__ import annotations

import math
from dataclasses import replace

from .types import GridPosition


def intersects(a: GridPosition, b: GridPosition) -> bool:
    """Return ``True`` when ``a`` and ``b`` overlap with positive area.

    Rectangles that only share an edge (``a.x + a.width == b.x``) do not
    intersect.
    """

    if a.right <= b.x or b.right <= a.x or a.bottom <= b.y or b.bottom <= a.y:
        return False
    return True


def clamp_to_columns(position: GridPosition, columns: int) -> GridPosition:
    """Pull ``position`` back inside a ``columns``-wide canvas.

    The width is capped at ``columns`` first, then ``x`` is clamped into
    ``[0, columns - width]``. ``y`` is only floored at zero since the canvas
    grows downward without limit.
    """

    width = min(position.width, columns)
    x = max(0, min(position.x, columns - width))
    y = max(0, position.y)
    if (x, y, width) == (position.x, position.y, position.width):
        return position
    return replace(position, x=x, y=y, width=width)


def in_bounds(position: GridPosition, columns: int) -> bool:
    return position.x >= 0 and position.y >= 0 and position.right <= columns


def cell_width(canvas_width_px: float, columns: int) -> float:
    return canvas_width_px / columns


def pixel_to_grid(
    px: float,
    py: float,
    cell_width_px: float,
    row_height_px: float,
) -> tuple[int, int]:
    """Quantize a pixel offset into whole grid cells (floor division)."""

    return math.floor(px / cell_width_px), math.floor(py / row_height_px)

"""Overlap queries against a collection of widgets.

A linear scan is plenty for dashboards of a few dozen widgets, so there is
no spatial index here.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Optional

from .geometry import intersects
from .types import GridPosition, Widget


def colliding(
    candidate: GridPosition,
    widgets: Iterable[Widget],
    exclude_id: Optional[str] = None,
) -> list[Widget]:
    """Return the widgets ``candidate`` would overlap, skipping ``exclude_id``."""

    return [
        widget
        for widget in widgets
        if not (exclude_id is not None and widget.id == exclude_id)
        and intersects(candidate, widget.position)
    ]


def has_collision(
    candidate: GridPosition,
    widgets: Iterable[Widget],
    exclude_id: Optional[str] = None,
) -> bool:
    """Return ``True`` if ``candidate`` overlaps any widget except ``exclude_id``.

    ``exclude_id`` lets a widget being moved or resized test its new
    footprint against every *other* widget on the canvas.
    """

    for widget in widgets:
        if exclude_id is not None and widget.id == exclude_id:
            continue
        if intersects(candidate, widget.position):
            return True
    return False


def find_overlaps(widgets: Iterable[Widget]) -> list[tuple[Widget, Widget]]:
    """List every overlapping pair in ``widgets`` (empty for a valid layout)."""

    return [
        (first, second)
        for first, second in combinations(list(widgets), 2)
        if intersects(first.position, second.position)
    ]

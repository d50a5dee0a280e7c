"""Find a collision-free spot for a widget near where the user wanted it.

The solver is a best-effort nearest-fit heuristic, not a minimum
displacement search: it probes square rings around the preferred cell
(Chebyshev distance 1, 2, ...) under a total attempt budget and, when that
runs out, parks the widget below everything else. In dense layouts it can
therefore return a spot farther away than an exhaustive search would.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Sequence

from ..conf import settings
from .collision import has_collision
from .exceptions import InvalidPositionError, PlacementExhaustedError
from .geometry import clamp_to_columns
from .types import GridPosition, Widget

log = logging.getLogger(__name__)


def _ring(radius: int) -> Iterator[tuple[int, int]]:
    """Yield the ``(dx, dy)`` offsets on the perimeter of a square ring."""

    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if abs(dx) != radius and abs(dy) != radius:
                continue
            yield dx, dy


def bottom_edge(widgets: Iterable[Widget], exclude_id: Optional[str] = None) -> int:
    """Return the first row below every widget except ``exclude_id``."""

    return max(
        (
            widget.position.bottom
            for widget in widgets
            if exclude_id is None or widget.id != exclude_id
        ),
        default=0,
    )


def find_valid_position(
    preferred: GridPosition,
    widgets: Sequence[Widget],
    columns: int,
    exclude_id: Optional[str] = None,
    *,
    max_radius: Optional[int] = None,
    max_attempts: Optional[int] = None,
    fallback: bool = True,
) -> GridPosition:
    """Return ``preferred`` if it is free, otherwise the nearest free spot found.

    Candidates keep the preferred size and are clamped to the canvas before
    they are tested. With ``fallback`` disabled an exhausted search raises
    :class:`PlacementExhaustedError` instead of dropping to the bottom row.
    """

    if max_radius is None:
        max_radius = int(settings.LAYOUT_SPIRAL_MAX_RADIUS)
    if max_attempts is None:
        max_attempts = int(settings.LAYOUT_SPIRAL_MAX_ATTEMPTS)

    preferred = clamp_to_columns(preferred, columns)
    if not has_collision(preferred, widgets, exclude_id):
        return preferred

    attempts = 0
    for radius in range(1, max_radius + 1):
        for dx, dy in _ring(radius):
            if attempts >= max_attempts:
                break
            attempts += 1
            candidate = replace(
                preferred,
                x=max(0, min(preferred.x + dx, columns - preferred.width)),
                y=max(0, preferred.y + dy),
            )
            if not has_collision(candidate, widgets, exclude_id):
                return candidate
        if attempts >= max_attempts:
            break

    if not fallback:
        raise PlacementExhaustedError(
            f"No free spot within radius {max_radius} of ({preferred.x}, {preferred.y}) "
            f"after {attempts} attempts"
        )

    log.debug(
        "Spiral search exhausted after %s attempts near (%s, %s); placing below the layout",
        attempts,
        preferred.x,
        preferred.y,
    )
    return replace(preferred, x=0, y=bottom_edge(widgets, exclude_id))


def split_position(
    target: GridPosition,
    min_width: Optional[int] = None,
) -> tuple[GridPosition, GridPosition]:
    """Bisect ``target`` horizontally.

    Returns ``(shrunk, freed)``: the target keeps the left half (floor, but
    at least ``min_width`` columns) and the freed band to its right, on the
    same rows, goes to the new widget.
    """

    if min_width is None:
        min_width = int(settings.LAYOUT_MIN_WIDGET_WIDTH)
    if target.width < 2 * min_width:
        raise InvalidPositionError(
            f"A widget {target.width} columns wide cannot be split into two "
            f"widgets of at least {min_width} columns"
        )

    kept = max(min_width, target.width // 2)
    shrunk = replace(target, width=kept)
    freed = replace(target, x=target.x + kept, width=target.width - kept)
    return shrunk, freed

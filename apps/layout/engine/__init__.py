"""Grid layout engine: geometry, collision, placement and gestures.

Nothing in this package touches the database or the request cycle; the
Django app around it only feeds it widgets and persists the results.
"""

from .collision import colliding, find_overlaps, has_collision
from .commands import insert_widget, split_insert
from .exceptions import (
    DuplicateWidgetError,
    InvalidPositionError,
    LayoutError,
    NotFoundError,
    PlacementExhaustedError,
)
from .geometry import clamp_to_columns, in_bounds, intersects, pixel_to_grid
from .interaction import Gesture, GestureKind, InteractionController, Proposal, ResizeHandle
from .placement import bottom_edge, find_valid_position, split_position
from .types import ContentKind, GridConfig, GridPosition, Widget, WidgetContent
from .widget_set import WidgetSet

__all__ = [
    "ContentKind",
    "DuplicateWidgetError",
    "Gesture",
    "GestureKind",
    "GridConfig",
    "GridPosition",
    "InteractionController",
    "InvalidPositionError",
    "LayoutError",
    "NotFoundError",
    "PlacementExhaustedError",
    "Proposal",
    "ResizeHandle",
    "Widget",
    "WidgetContent",
    "WidgetSet",
    "bottom_edge",
    "clamp_to_columns",
    "colliding",
    "find_overlaps",
    "find_valid_position",
    "has_collision",
    "in_bounds",
    "insert_widget",
    "intersects",
    "pixel_to_grid",
    "split_insert",
    "split_position",
]

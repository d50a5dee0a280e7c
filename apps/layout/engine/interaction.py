"""Turn pointer gestures into validated layout mutations.

The controller is an explicit state machine with a single gesture slot:
at most one move, resize or palette insert is in progress per canvas.
Pointer coordinates are pixels relative to the canvas origin; everything
else is in grid cells.

Moves and resizes stream: each pointer move that yields a collision-free
candidate is committed at once (live feedback) and an invalid candidate
leaves the last valid position in place. Inserts only preview while the
pointer moves and commit on drop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..conf import settings
from .collision import has_collision
from .commands import insert_widget, split_insert
from .exceptions import InvalidPositionError
from .geometry import cell_width, clamp_to_columns, pixel_to_grid
from .types import GridPosition, Widget
from .widget_set import WidgetSet

log = logging.getLogger(__name__)


class GestureKind(str, Enum):
    MOVE = "move"
    RESIZE = "resize"
    INSERT = "insert"


class ResizeHandle(str, Enum):
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def horizontal(self) -> Optional[str]:
        """``"e"``/``"w"`` for handles that move a vertical edge, else ``None``."""

        for edge in ("e", "w"):
            if edge in self.value:
                return edge
        return None

    @property
    def vertical(self) -> Optional[str]:
        for edge in ("n", "s"):
            if edge in self.value:
                return edge
        return None


@dataclass
class Gesture:
    """State of the gesture in progress."""

    kind: GestureKind
    origin: tuple[float, float]
    widget_id: Optional[str] = None
    start: Optional[GridPosition] = None
    handle: Optional[ResizeHandle] = None
    widget_type: Optional[str] = None
    last_valid: Optional[GridPosition] = None


@dataclass(frozen=True)
class Proposal:
    """Outcome of one pointer move: where the widget (or preview) is now."""

    position: GridPosition
    valid: bool


def _palette_entry(widget_type: str):
    from ..palette import get_entry

    return get_entry(widget_type)


class InteractionController:
    def __init__(
        self,
        widget_set: WidgetSet,
        canvas_width_px: float,
        *,
        min_width: Optional[int] = None,
        min_height: Optional[int] = None,
        palette_lookup: Optional[Callable[[str], object]] = None,
    ) -> None:
        self.widget_set = widget_set
        self.canvas_width_px = float(canvas_width_px)
        self.min_width = int(settings.LAYOUT_MIN_WIDGET_WIDTH) if min_width is None else min_width
        self.min_height = (
            int(settings.LAYOUT_MIN_WIDGET_HEIGHT) if min_height is None else min_height
        )
        self._palette_lookup = palette_lookup or _palette_entry
        self._gesture: Optional[Gesture] = None

    # ------------------------------------------------------------------
    # Canvas metrics
    # ------------------------------------------------------------------
    @property
    def columns(self) -> int:
        return self.widget_set.columns

    @property
    def row_height_px(self) -> float:
        return self.widget_set.config.row_height_px

    @property
    def cell_width_px(self) -> float:
        return cell_width(self.canvas_width_px, self.columns)

    def resize_canvas(self, canvas_width_px: float) -> None:
        self.canvas_width_px = float(canvas_width_px)

    def to_cell(self, px: float, py: float) -> tuple[int, int]:
        return pixel_to_grid(px, py, self.cell_width_px, self.row_height_px)

    def widget_at(self, px: float, py: float) -> Optional[Widget]:
        """Return the widget under the pointer, if any."""

        gx, gy = self.to_cell(px, py)
        for widget in self.widget_set.list():
            pos = widget.position
            if pos.x <= gx < pos.right and pos.y <= gy < pos.bottom:
                return widget
        return None

    # ------------------------------------------------------------------
    # Gesture slot
    # ------------------------------------------------------------------
    @property
    def gesture(self) -> Optional[Gesture]:
        return self._gesture

    @property
    def active(self) -> bool:
        return self._gesture is not None

    def begin_move(self, widget_id: str, px: float, py: float) -> Gesture:
        widget = self.widget_set.get(widget_id)
        return self._start(
            Gesture(
                kind=GestureKind.MOVE,
                origin=(px, py),
                widget_id=widget.id,
                start=widget.position,
                last_valid=widget.position,
            )
        )

    def begin_resize(self, widget_id: str, handle, px: float, py: float) -> Gesture:
        widget = self.widget_set.get(widget_id)
        return self._start(
            Gesture(
                kind=GestureKind.RESIZE,
                origin=(px, py),
                widget_id=widget.id,
                start=widget.position,
                handle=ResizeHandle(handle),
                last_valid=widget.position,
            )
        )

    def begin_insert(self, widget_type: str, px: float, py: float) -> Gesture:
        self._palette_lookup(widget_type)
        return self._start(
            Gesture(kind=GestureKind.INSERT, origin=(px, py), widget_type=widget_type)
        )

    def pointer_move(self, px: float, py: float) -> Optional[Proposal]:
        gesture = self._gesture
        if gesture is None:
            return None

        if gesture.kind is GestureKind.INSERT:
            preview = self._insert_footprint(gesture, px, py)
            return Proposal(
                position=preview,
                valid=not has_collision(preview, self.widget_set.list()),
            )

        dgx, dgy = pixel_to_grid(
            px - gesture.origin[0],
            py - gesture.origin[1],
            self.cell_width_px,
            self.row_height_px,
        )
        if gesture.kind is GestureKind.MOVE:
            candidate = clamp_to_columns(gesture.start.offset(dgx, dgy), self.columns)
        else:
            candidate = self._resize_candidate(gesture, dgx, dgy)
        return self._stream(gesture, candidate)

    def drop(
        self,
        px: float,
        py: float,
        target_id: Optional[str] = None,
    ) -> Optional[Widget]:
        """Finish the active gesture.

        Inserts commit a new widget (split-inserting into ``target_id`` when
        given) and return it; a drop outside the canvas discards the insert.
        Moves and resizes keep whatever was last streamed.
        """

        gesture = self._gesture
        if gesture is None:
            return None
        try:
            if gesture.kind is GestureKind.INSERT:
                if not self._inside_canvas(px, py):
                    log.debug("Insert of %s dropped outside the canvas", gesture.widget_type)
                    return None
                return self._commit_insert(gesture, px, py, target_id)
            self.pointer_move(px, py)
            return self.widget_set.get(gesture.widget_id)
        finally:
            self._gesture = None

    def cancel(self) -> None:
        """Abandon the active gesture; already-streamed positions stay committed."""

        if self._gesture is not None:
            log.debug("Cancelled %s gesture", self._gesture.kind.value)
        self._gesture = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _start(self, gesture: Gesture) -> Gesture:
        if self._gesture is not None:
            log.debug(
                "Starting %s gesture cancels active %s gesture",
                gesture.kind.value,
                self._gesture.kind.value,
            )
        self._gesture = gesture
        return gesture

    def _inside_canvas(self, px: float, py: float) -> bool:
        return 0 <= px < self.canvas_width_px and py >= 0

    def _insert_footprint(self, gesture: Gesture, px: float, py: float) -> GridPosition:
        entry = self._palette_lookup(gesture.widget_type)
        gx, gy = self.to_cell(px, py)
        return clamp_to_columns(entry.footprint(gx, gy), self.columns)

    def _commit_insert(
        self,
        gesture: Gesture,
        px: float,
        py: float,
        target_id: Optional[str],
    ) -> Widget:
        entry = self._palette_lookup(gesture.widget_type)
        if target_id is not None:
            try:
                return split_insert(self.widget_set, target_id, entry.content(), title=entry.title)
            except InvalidPositionError as exc:
                log.debug("Split of %s rejected (%s); placing next to it instead", target_id, exc)
        return insert_widget(
            self.widget_set,
            self._insert_footprint(gesture, px, py),
            entry.content(),
            title=entry.title,
        )

    def _resize_candidate(self, gesture: Gesture, dgx: int, dgy: int) -> Optional[GridPosition]:
        start = gesture.start
        handle = gesture.handle
        x, width = start.x, start.width
        y, height = start.y, start.height

        if handle.horizontal == "e":
            width = min(max(self.min_width, start.width + dgx), self.columns - start.x)
        elif handle.horizontal == "w":
            width = min(max(self.min_width, start.width - dgx), start.right)
            x = start.right - width

        if handle.vertical == "s":
            height = max(self.min_height, start.height + dgy)
        elif handle.vertical == "n":
            height = min(max(self.min_height, start.height - dgy), start.bottom)
            y = start.bottom - height

        # The fixed edge leaves too little room for the minimum size.
        if handle.horizontal and width < self.min_width:
            return None
        if handle.vertical and height < self.min_height:
            return None
        return GridPosition(x=x, y=y, width=width, height=height)

    def _stream(self, gesture: Gesture, candidate: Optional[GridPosition]) -> Proposal:
        if candidate is None or has_collision(
            candidate, self.widget_set.list(), exclude_id=gesture.widget_id
        ):
            log.debug("Rejected %s candidate %s for %s", gesture.kind.value, candidate, gesture.widget_id)
            return Proposal(position=gesture.last_valid, valid=False)
        if candidate != gesture.last_valid:
            self.widget_set.apply_position(gesture.widget_id, candidate)
        gesture.last_valid = candidate
        return Proposal(position=candidate, valid=True)

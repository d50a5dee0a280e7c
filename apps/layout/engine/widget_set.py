"""Authoritative widget collection for one canvas."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional

from .collision import colliding
from .exceptions import DuplicateWidgetError, InvalidPositionError, NotFoundError
from .geometry import in_bounds
from .types import GridConfig, GridPosition, Widget, WidgetContent

log = logging.getLogger(__name__)

_GENERATED_ID = re.compile(r"^widget-(\d+)$")


class WidgetSet:
    """Owns the widgets of a canvas and applies committed mutations.

    Contract:

    * ids are unique; generated ids (``widget-<n>``) come from a counter that
      only ever moves forward, also past ids supplied by callers;
    * every stored position satisfies the bounds invariant, anything else is
      rejected with :class:`InvalidPositionError`;
    * non-overlap is a **precondition**. Callers validate through
      :func:`~apps.layout.engine.collision.has_collision` or
      :func:`~apps.layout.engine.placement.find_valid_position` before they
      commit, or pass ``check_collisions=True`` to :meth:`apply_position`.

    Widgets are immutable, so :meth:`list` can hand out the stored objects
    directly.
    """

    def __init__(
        self,
        config: GridConfig,
        widgets: Iterable[Widget] = (),
        *,
        id_counter: int = 0,
    ) -> None:
        self.config = config
        self._widgets: dict[str, Widget] = {}
        # Last generated sequence number; callers persisting the canvas keep it
        # so ids of removed widgets are not handed out again.
        self._counter = max(0, int(id_counter))
        for widget in widgets:
            self.insert(widget)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def id_counter(self) -> int:
        return self._counter

    def insert(self, widget: Widget) -> str:
        """Store ``widget`` and return its id, generating one when missing."""

        self._check_bounds(widget.position)
        if widget.id:
            if widget.id in self._widgets:
                raise DuplicateWidgetError(f"Widget id {widget.id!r} is already on the canvas")
            self._reserve(widget.id)
            stored = widget
        else:
            stored = Widget(
                id=self._next_id(),
                position=widget.position,
                content=widget.content,
                title=widget.title,
                visible=widget.visible,
            )
        self._widgets[stored.id] = stored
        log.debug("Inserted widget %s at %s", stored.id, stored.position)
        return stored.id

    def create(
        self,
        position: GridPosition,
        content: WidgetContent,
        title: Optional[str] = None,
        visible: bool = True,
    ) -> Widget:
        widget_id = self.insert(
            Widget(id=None, position=position, content=content, title=title, visible=visible)
        )
        return self._widgets[widget_id]

    def get(self, widget_id: str) -> Widget:
        try:
            return self._widgets[widget_id]
        except KeyError:
            raise NotFoundError(widget_id) from None

    def apply_position(
        self,
        widget_id: str,
        position: GridPosition,
        *,
        check_collisions: bool = False,
    ) -> Widget:
        """Move/resize ``widget_id`` to ``position``.

        Bounds are always checked. Overlap is only checked when
        ``check_collisions`` is set; otherwise it is up to the caller.
        """

        current = self.get(widget_id)
        self._check_bounds(position)
        if check_collisions:
            hits = colliding(position, self._widgets.values(), exclude_id=widget_id)
            if hits:
                raise InvalidPositionError(
                    f"Position {position} for {widget_id!r} overlaps "
                    + ", ".join(repr(hit.id) for hit in hits)
                )
        if position == current.position:
            return current
        updated = current.moved_to(position)
        self._widgets[widget_id] = updated
        return updated

    def remove(self, widget_id: str) -> Widget:
        try:
            widget = self._widgets.pop(widget_id)
        except KeyError:
            raise NotFoundError(widget_id) from None
        log.debug("Removed widget %s", widget_id)
        return widget

    def list(self) -> tuple[Widget, ...]:
        """Read-only snapshot of the canvas in insertion order."""

        return tuple(self._widgets.values())

    def __len__(self) -> int:
        return len(self._widgets)

    def __iter__(self) -> Iterator[Widget]:
        return iter(self.list())

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._widgets

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_bounds(self, position: GridPosition) -> None:
        if not in_bounds(position, self.columns):
            raise InvalidPositionError(
                f"Position {position} does not fit a {self.columns}-column canvas"
            )

    def _reserve(self, widget_id: str) -> None:
        match = _GENERATED_ID.match(widget_id)
        if match:
            self._counter = max(self._counter, int(match.group(1)))

    def _next_id(self) -> str:
        self._counter += 1
        return f"widget-{self._counter}"

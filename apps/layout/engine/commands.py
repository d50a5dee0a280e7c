"""Committed insert operations shared by gestures and the HTTP layer."""

from __future__ import annotations

import logging
from typing import Optional

from .placement import find_valid_position, split_position
from .types import GridPosition, Widget, WidgetContent
from .widget_set import WidgetSet

log = logging.getLogger(__name__)


def insert_widget(
    widget_set: WidgetSet,
    preferred: GridPosition,
    content: WidgetContent,
    title: Optional[str] = None,
) -> Widget:
    """Place a new widget at (or as close as possible to) ``preferred``."""

    position = find_valid_position(preferred, widget_set.list(), widget_set.columns)
    return widget_set.create(position, content, title=title)


def split_insert(
    widget_set: WidgetSet,
    target_id: str,
    content: WidgetContent,
    title: Optional[str] = None,
) -> Widget:
    """Halve ``target_id`` and put a new widget in the band it gave up.

    Only the target and the new widget are touched; both stay inside the
    target's original footprint, so no other widget needs checking.
    """

    target = widget_set.get(target_id)
    shrunk, freed = split_position(target.position)
    widget_set.apply_position(target_id, shrunk)
    widget = widget_set.create(freed, content, title=title)
    log.debug("Split %s into %s and new widget %s at %s", target_id, shrunk, widget.id, freed)
    return widget

"""Helpers for translating canvas payloads to and from the layout engine.

Positions pass through untouched in both directions: a payload describing
an out-of-bounds widget is rejected rather than silently repaired, so a
canvas always round-trips exactly through ``WidgetSet.list()`` and
``WidgetSet.insert()``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, MutableMapping, Sequence

from django.db import transaction

from apps.layout.conf import default_grid_config
from apps.layout.engine.collision import find_overlaps
from apps.layout.engine.exceptions import InvalidPositionError
from apps.layout.engine.types import (
    ContentKind,
    GridConfig,
    GridPosition,
    Widget,
    WidgetContent,
)
from apps.layout.engine.widget_set import WidgetSet
from apps.layout.models import Dashboard, DashboardWidget

log = logging.getLogger(__name__)


def _coerce_int(value: Any, default: int) -> int:
    """Best-effort conversion of ``value`` into an ``int`` with fallback."""

    try:
        if value in {None, ""}:
            raise ValueError
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return int(default)


def _coerce_mapping(value: Any) -> MutableMapping[str, Any]:
    """Normalize arbitrary payloads into a mutable mapping."""

    if isinstance(value, MutableMapping):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return {}
        if isinstance(parsed, Mapping):
            return dict(parsed)
    return {}


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    # ``x: 0`` is meaningful, so ``or`` chains would lose it.
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return None


# ----------------------------------------------------------------------
# Payloads
# ----------------------------------------------------------------------
def serialize_widget(widget: Widget) -> dict[str, Any]:
    pos = widget.position
    return {
        "id": widget.id,
        "title": widget.title,
        "x": pos.x,
        "y": pos.y,
        "w": pos.width,
        "h": pos.height,
        "type": widget.content.kind.value,
        "config": dict(widget.content.config),
        "visible": widget.visible,
    }


def serialize_canvas(widget_set: WidgetSet) -> dict[str, Any]:
    return {
        "columns": widget_set.config.columns,
        "rowHeight": widget_set.config.row_height_px,
        "widgets": [serialize_widget(widget) for widget in widget_set.list()],
    }


def deserialize_widget(raw: Mapping[str, Any]) -> Widget:
    """Build a :class:`Widget` from one gridstack-style node."""

    try:
        kind = ContentKind(str(_first_present(raw, "type", "kind") or ""))
    except ValueError:
        raise ValueError(f"Unknown widget type in payload: {raw!r}") from None

    position = GridPosition(
        x=_coerce_int(_first_present(raw, "x", "column"), 0),
        y=_coerce_int(_first_present(raw, "y", "row"), 0),
        width=_coerce_int(_first_present(raw, "w", "width"), 0),
        height=_coerce_int(_first_present(raw, "h", "height"), 0),
    )
    widget_id = _first_present(raw, "id", "widget_id")
    title = raw.get("title")
    return Widget(
        id=str(widget_id) if widget_id is not None else None,
        position=position,
        content=WidgetContent(kind=kind, config=dict(_coerce_mapping(raw.get("config")))),
        title=str(title) if title else None,
        visible=bool(raw.get("visible", True)),
    )


def deserialize_canvas(payload: Mapping[str, Any]) -> WidgetSet:
    defaults = default_grid_config()
    config = GridConfig(
        columns=_coerce_int(payload.get("columns"), defaults.columns),
        row_height_px=float(payload.get("rowHeight") or defaults.row_height_px),
    )
    nodes = payload.get("widgets") or []
    return WidgetSet(
        config,
        (deserialize_widget(raw) for raw in nodes if isinstance(raw, Mapping)),
    )


# ----------------------------------------------------------------------
# Persistence
# ----------------------------------------------------------------------
def lock_dashboard(dashboard: Dashboard) -> Dashboard:
    """Re-fetch ``dashboard`` with its row locked until the transaction ends.

    Every read-modify-write of a canvas takes this lock first, so concurrent
    requests load, validate and save one after the other. Must be called
    inside ``transaction.atomic()``.
    """

    return Dashboard.objects.select_for_update().get(pk=dashboard.pk)


def load_widget_set(dashboard: Dashboard) -> WidgetSet:
    """Rebuild the engine's view of ``dashboard`` from its stored widgets.

    Raises :class:`InvalidPositionError` (or ``ValueError`` for an unknown
    kind) when a stored row no longer fits the dashboard.
    """

    rows = dashboard.widgets.all().order_by("order", "id")
    return WidgetSet(
        dashboard.grid_config(),
        (row.to_widget() for row in rows),
        id_counter=dashboard.next_widget_seq,
    )


def save_widget_set(dashboard: Dashboard, widget_set: WidgetSet) -> list[DashboardWidget]:
    """Create/update/delete :class:`DashboardWidget` rows to mirror ``widget_set``."""

    existing = {row.widget_id: row for row in dashboard.widgets.all()}
    saved: list[DashboardWidget] = []

    with transaction.atomic():
        for index, widget in enumerate(widget_set.list()):
            row = existing.pop(widget.id, None)
            if row is None:
                row = DashboardWidget(dashboard=dashboard, widget_id=widget.id)
            pos = widget.position
            row.x, row.y, row.width, row.height = pos.x, pos.y, pos.width, pos.height
            row.title = widget.title or ""
            row.kind = widget.content.kind.value
            row.content = dict(widget.content.config)
            row.visible = widget.visible
            row.order = index
            row.save()
            saved.append(row)

        if existing:
            log.debug(
                "Removing %s widget rows from dashboard %s", len(existing), dashboard.pk
            )
            DashboardWidget.objects.filter(
                dashboard=dashboard, widget_id__in=list(existing.keys())
            ).delete()

        if widget_set.id_counter > dashboard.next_widget_seq:
            dashboard.next_widget_seq = widget_set.id_counter
            Dashboard.objects.filter(pk=dashboard.pk).update(
                next_widget_seq=dashboard.next_widget_seq
            )

    return saved


def apply_grid_update(widget_set: WidgetSet, items: Sequence[Mapping[str, Any]]) -> WidgetSet:
    """Validate a batch of ``{id, x, y, w, h}`` moves and return the new canvas.

    The batch is applied to a copy: the result must satisfy bounds and
    non-overlap as a whole, so widgets may swap places in one update.
    Raises :class:`InvalidPositionError` or
    :class:`~apps.layout.engine.exceptions.NotFoundError`; ``widget_set`` is
    left untouched either way.
    """

    staged = WidgetSet(widget_set.config, widget_set.list(), id_counter=widget_set.id_counter)
    for raw in items:
        if not isinstance(raw, Mapping):
            continue
        widget_id = str(_first_present(raw, "id", "widget_id") or "")
        current = staged.get(widget_id).position
        position = GridPosition(
            x=_coerce_int(_first_present(raw, "x"), current.x),
            y=_coerce_int(_first_present(raw, "y"), current.y),
            width=_coerce_int(_first_present(raw, "w", "width"), current.width),
            height=_coerce_int(_first_present(raw, "h", "height"), current.height),
        )
        staged.apply_position(widget_id, position)

    overlaps = find_overlaps(staged.list())
    if overlaps:
        first, second = overlaps[0]
        raise InvalidPositionError(
            f"Widgets {first.id!r} and {second.id!r} overlap after the update"
        )
    return staged

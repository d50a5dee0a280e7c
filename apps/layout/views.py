"""JSON endpoints that let the dashboard editor commit layout changes."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth.decorators import login_required
from django.db import transaction
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.layout import palette
from apps.layout.engine.commands import insert_widget, split_insert
from apps.layout.engine.exceptions import InvalidPositionError, LayoutError, NotFoundError
from apps.layout.engine.placement import bottom_edge, split_position
from apps.layout.helpers.json import parse_json_body
from apps.layout.mixins import DashboardAccessMixin
from apps.layout.services.canvas import (
    _coerce_int,
    apply_grid_update,
    load_widget_set,
    lock_dashboard,
    save_widget_set,
    serialize_canvas,
    serialize_widget,
)

log = logging.getLogger(__name__)


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": message}, status=status)


def _stored_layout_error(dashboard, exc: Exception) -> JsonResponse:
    # Rows edited outside the engine (admin, raw SQL) no longer fit the canvas.
    log.warning("Stored layout of dashboard %s cannot be loaded: %s", dashboard.pk, exc)
    return _error(f"Stored layout is invalid: {exc}", 409)


@login_required
@require_GET
def canvas_detail(request: HttpRequest, username: str, slug: str) -> HttpResponse:
    dashboard = DashboardAccessMixin.get_dashboard(username=username, slug=slug)
    DashboardAccessMixin.ensure_access(request, dashboard)
    try:
        widget_set = load_widget_set(dashboard)
    except (LayoutError, ValueError) as exc:
        return _stored_layout_error(dashboard, exc)
    payload = serialize_canvas(widget_set)
    payload["name"] = dashboard.name
    return JsonResponse(payload)


@login_required
@require_POST
def canvas_grid_update(request: HttpRequest, username: str, slug: str) -> HttpResponse:
    """Commit a batch of ``{id, x, y, w, h}`` items as one layout change."""

    dashboard = DashboardAccessMixin.get_dashboard(username=username, slug=slug)
    DashboardAccessMixin.ensure_access(request, dashboard)

    payload = parse_json_body(request)
    if payload is None:
        return _error("Request body must be a JSON object.", 400)
    items = payload.get("items") or []
    if not isinstance(items, list):
        return _error("'items' must be a list.", 400)

    with transaction.atomic():
        dashboard = lock_dashboard(dashboard)
        try:
            current = load_widget_set(dashboard)
        except (LayoutError, ValueError) as exc:
            return _stored_layout_error(dashboard, exc)
        try:
            updated = apply_grid_update(current, items)
        except NotFoundError as exc:
            log.warning("Grid update for dashboard %s references %s", dashboard.pk, exc)
            return _error(str(exc), 404)
        except InvalidPositionError as exc:
            log.warning("Rejected grid update for dashboard %s: %s", dashboard.pk, exc)
            return _error(str(exc), 400)
        save_widget_set(dashboard, updated)
    return HttpResponse(status=204)


@login_required
@require_POST
def canvas_widget_add(request: HttpRequest, username: str, slug: str) -> HttpResponse:
    """Drop a palette widget at ``x``/``y`` (cells), or split ``target`` to make room."""

    dashboard = DashboardAccessMixin.get_dashboard(username=username, slug=slug)
    DashboardAccessMixin.ensure_access(request, dashboard)

    payload = parse_json_body(request)
    if payload is None:
        return _error("Request body must be a JSON object.", 400)
    widget_type = str(payload.get("type") or "").strip()
    if not widget_type:
        return _error("'type' is required.", 400)
    try:
        entry = palette.get_entry(widget_type)
    except NotFoundError as exc:
        return _error(str(exc), 400)

    with transaction.atomic():
        dashboard = lock_dashboard(dashboard)
        try:
            widget_set = load_widget_set(dashboard)
        except (LayoutError, ValueError) as exc:
            return _stored_layout_error(dashboard, exc)
        target_id = payload.get("target")
        try:
            widget = _add_widget(widget_set, entry, payload, target_id)
        except NotFoundError as exc:
            log.warning("Widget add on dashboard %s references %s", dashboard.pk, exc)
            return _error(str(exc), 404)
        save_widget_set(dashboard, widget_set)

    body: dict[str, Any] = serialize_canvas(widget_set)
    body["widget"] = serialize_widget(widget)
    return JsonResponse(body, status=201)


def _add_widget(widget_set, entry, payload, target_id):
    if target_id:
        target = widget_set.get(str(target_id))
        try:
            split_position(target.position)
        except InvalidPositionError:
            log.debug("Widget %s too narrow to split; placing a new widget instead", target.id)
        else:
            return split_insert(widget_set, target.id, entry.content(), title=entry.title)

    # Without a drop point the widget goes below everything else.
    x = _coerce_int(payload.get("x"), 0)
    y = _coerce_int(payload.get("y"), bottom_edge(widget_set.list()))
    return insert_widget(widget_set, entry.footprint(x, y), entry.content(), title=entry.title)


@login_required
@require_POST
def canvas_widget_delete(request: HttpRequest, username: str, slug: str, widget_id: str) -> HttpResponse:
    dashboard = DashboardAccessMixin.get_dashboard(username=username, slug=slug)
    DashboardAccessMixin.ensure_access(request, dashboard)

    with transaction.atomic():
        dashboard = lock_dashboard(dashboard)
        try:
            widget_set = load_widget_set(dashboard)
        except (LayoutError, ValueError) as exc:
            return _stored_layout_error(dashboard, exc)
        try:
            widget_set.remove(widget_id)
        except NotFoundError as exc:
            return _error(str(exc), 404)
        save_widget_set(dashboard, widget_set)
    return HttpResponse(status=204)

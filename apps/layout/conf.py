"""Runtime access to layout engine configuration defaults."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings as django_settings

__all__ = ["settings", "LayoutSettings", "default_grid_config"]


@dataclass
class LayoutSettings:
    """Proxy object exposing Django settings with layout fallbacks.

    The engine modules read their limits through this proxy, so they keep
    working when Django itself has not been configured (plain library use,
    scripts); in that case only the defaults are visible.
    """

    defaults: dict[str, Any]

    def __getattr__(self, attr: str) -> Any:
        if attr in self.defaults:
            if not django_settings.configured:
                return self.defaults[attr]
            return getattr(django_settings, attr, self.defaults[attr])
        return getattr(django_settings, attr)


settings = LayoutSettings(
    defaults={
        "LAYOUT_GRID_COLUMNS": 12,
        "LAYOUT_ROW_HEIGHT_PX": 100,
        "LAYOUT_MIN_WIDGET_WIDTH": 2,
        "LAYOUT_MIN_WIDGET_HEIGHT": 2,
        "LAYOUT_SPIRAL_MAX_RADIUS": 10,
        "LAYOUT_SPIRAL_MAX_ATTEMPTS": 50,
        "LAYOUT_DEFAULT_WIDGET_WIDTH": 4,
        "LAYOUT_DEFAULT_WIDGET_HEIGHT": 3,
        "LAYOUT_PALETTE": [],
    }
)


def default_grid_config():
    """Build a :class:`GridConfig` from the configured column/row defaults."""

    from .engine.types import GridConfig

    return GridConfig(
        columns=int(settings.LAYOUT_GRID_COLUMNS),
        row_height_px=float(settings.LAYOUT_ROW_HEIGHT_PX),
    )

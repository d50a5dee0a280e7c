"""Registry of widget types that can be dropped onto a canvas.

The presentation layer drags palette items by type; the registry supplies
the default footprint, title and content for each type. The layout engine
only consumes the footprint.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .conf import settings
from .engine.exceptions import NotFoundError
from .engine.types import ContentKind, GridPosition, WidgetContent


@dataclass(frozen=True)
class PaletteEntry:
    type: str
    name: str
    kind: ContentKind
    title: str = "Widget"
    description: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> tuple[int, int]:
        width = self.width or int(settings.LAYOUT_DEFAULT_WIDGET_WIDTH)
        height = self.height or int(settings.LAYOUT_DEFAULT_WIDGET_HEIGHT)
        return width, height

    def footprint(self, x: int = 0, y: int = 0) -> GridPosition:
        width, height = self.size
        return GridPosition(x=max(0, x), y=max(0, y), width=width, height=height)

    def content(self) -> WidgetContent:
        # Every widget gets its own copy of the default configuration.
        return WidgetContent(kind=self.kind, config=copy.deepcopy(self.config))


_REGISTRY: Dict[str, PaletteEntry] = {}


def _validate_entry(entry: PaletteEntry) -> None:
    if not entry.type:
        raise ValueError("PaletteEntry.type is required")
    if not isinstance(entry.kind, ContentKind):
        raise ValueError(f"Invalid PaletteEntry.kind {entry.kind!r} for {entry.type}")
    for label, value in (("width", entry.width), ("height", entry.height)):
        if value is not None and (not isinstance(value, int) or value < 1):
            raise ValueError(f"PaletteEntry.{label} must be a positive integer for {entry.type}")


def register(entry: PaletteEntry) -> None:
    if entry.type in _REGISTRY:
        raise ValueError(f"Duplicate palette type: {entry.type}")
    _validate_entry(entry)
    _REGISTRY[entry.type] = entry


def unregister(widget_type: str) -> None:
    _REGISTRY.pop(widget_type, None)


def get_registry() -> Dict[str, PaletteEntry]:
    return dict(_REGISTRY)


def get_entry(widget_type: str) -> PaletteEntry:
    try:
        return _REGISTRY[widget_type]
    except KeyError:
        raise NotFoundError(widget_type, what="palette type") from None


BUILTIN_ENTRIES = (
    PaletteEntry(
        type="chart",
        name="Chart",
        kind=ContentKind.CHART,
        title="Chart Widget",
        description="Visualize data with charts",
    ),
    PaletteEntry(
        type="metric",
        name="Metric",
        kind=ContentKind.METRIC,
        title="Metric Widget",
        description="Display key metrics",
        config={"title": "Metric", "value": 0},
    ),
    PaletteEntry(
        type="table",
        name="Table",
        kind=ContentKind.TABLE,
        title="Table Widget",
        description="Show data in tables",
        config={
            "columns": [
                {"key": "name", "title": "Name", "sortable": True},
                {"key": "value", "title": "Value", "sortable": True},
            ]
        },
    ),
    PaletteEntry(
        type="text",
        name="Text",
        kind=ContentKind.TEXT,
        title="Text Widget",
        description="Add text content",
        config={"content": "Enter your text here..."},
    ),
    PaletteEntry(
        type="image",
        name="Image",
        kind=ContentKind.IMAGE,
        title="Image Widget",
        description="Display images",
    ),
    PaletteEntry(
        type="markdown",
        name="Markdown",
        kind=ContentKind.MARKDOWN,
        title="Markdown Widget",
        description="Rich text with markdown",
    ),
    PaletteEntry(
        type="iframe",
        name="IFrame",
        kind=ContentKind.IFRAME,
        title="IFrame Widget",
    ),
    PaletteEntry(
        type="filter",
        name="Filter",
        kind=ContentKind.FILTER,
        title="Filter Widget",
    ),
)


def register_builtins(register_fn: Callable[[PaletteEntry], None] = register) -> None:
    for entry in BUILTIN_ENTRIES:
        if entry.type in _REGISTRY:
            continue
        register_fn(entry)

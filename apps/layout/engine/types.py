"""Value objects shared by every part of the layout engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional

from .exceptions import InvalidPositionError


class ContentKind(str, Enum):
    """Kinds of content a widget can carry.

    The layout engine never branches on this; it only travels with the widget
    so the presentation layer knows what to render.
    """

    CHART = "chart"
    TEXT = "text"
    IMAGE = "image"
    IFRAME = "iframe"
    FILTER = "filter"
    METRIC = "metric"
    TABLE = "table"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class GridPosition:
    """Footprint of a widget in grid cells, anchored at its top-left cell."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise InvalidPositionError(
                f"Grid coordinates must be non-negative (x={self.x}, y={self.y})"
            )
        if self.width < 1 or self.height < 1:
            raise InvalidPositionError(
                f"Grid size must be at least 1x1 (width={self.width}, height={self.height})"
            )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def offset(self, dx: int, dy: int) -> "GridPosition":
        """Return the footprint shifted by ``dx``/``dy``, floored at the origin."""

        return replace(self, x=max(0, self.x + dx), y=max(0, self.y + dy))

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class WidgetContent:
    """Opaque content descriptor: a kind tag plus its free-form configuration."""

    kind: ContentKind
    config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Widget:
    id: Optional[str]
    position: GridPosition
    content: WidgetContent
    title: Optional[str] = None
    visible: bool = True

    def moved_to(self, position: GridPosition) -> "Widget":
        return replace(self, position=position)


@dataclass(frozen=True)
class GridConfig:
    """Canvas-wide grid settings; fixed once editing starts."""

    columns: int = 12
    row_height_px: float = 100

    def __post_init__(self) -> None:
        if int(self.columns) < 1:
            raise ValueError(f"GridConfig.columns must be >= 1 (got {self.columns})")
        if self.row_height_px <= 0:
            raise ValueError(
                f"GridConfig.row_height_px must be positive (got {self.row_height_px})"
            )

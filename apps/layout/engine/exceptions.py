"""Errors raised by the grid layout engine."""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for every error the layout engine raises."""


class InvalidPositionError(LayoutError, ValueError):
    """A position fails the bounds or collision checks it was committed against."""


class NotFoundError(LayoutError, LookupError):
    """A widget id (or palette type) is unknown to the canvas."""

    def __init__(self, key: str, what: str = "widget") -> None:
        self.key = key
        self.what = what
        super().__init__(f"Unknown {what} {key!r}")


class DuplicateWidgetError(LayoutError, ValueError):
    """A widget was inserted with an id that is already on the canvas."""


class PlacementExhaustedError(LayoutError):
    """The spiral search found nothing and the bottom fallback was disabled."""

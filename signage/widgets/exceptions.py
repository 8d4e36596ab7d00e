"""
Exceptions raised by the widget layout engine.

All of them are recoverable and are handled at the boundary where they
occur; none of them ever reaches the display surface.
"""

from typing import Optional


class WidgetEngineError(Exception):
    """Base exception for all widget engine errors."""
    pass


class UnknownWidgetType(WidgetEngineError):
    """Raised when creating an instance of a type nobody registered."""

    def __init__(self, widget_type: str):
        super().__init__(f"Unknown widget type: {widget_type!r}")
        self.widget_type = widget_type


class DecodeFailure(WidgetEngineError):
    """Raised inside the codec when a token cannot be turned into a config."""
    pass


class OutOfBoundsPlacement(WidgetEngineError):
    """
    Soft placement error: a widget ended up outside the visible grid.

    Never blocks an operation; it is only used to report the overflow.
    """

    def __init__(self, instance_id: str, x: int, y: int, w: int, h: int):
        super().__init__(f"Widget {instance_id} at ({x}, {y}) size {w}x{h} is outside the grid")
        self.instance_id = instance_id


class CollisionUnresolvable(WidgetEngineError):
    """Raised when pushing colliding widgets would exceed the row allowance."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.node_id = node_id

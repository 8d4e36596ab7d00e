"""
Widget Layout & Configuration Engine.

Pieces, leaves first:
=====================
- registry.py: Widget descriptors (render/editor capabilities, size bounds)
- schemas.py: DisplayConfig, WidgetInstance and grid models
- layout.py: LayoutModel, the only way the configurator mutates a config
- grid.py: Drag/resize engine with floating collisions and a debounced
  "layout changed" emission
- codec.py: DisplayConfig <-> URL token
- composer.py: Partitioning and rendering for the display surface
- builtin/: The widgets shipped with the service

Example:
    from signage.widgets import (
        LayoutModel, compose, encode_config, decode_config_or_default,
    )
    from signage.widgets.builtin import create_default_registry

    registry = create_default_registry()
    layout = LayoutModel(registry=registry)
    layout.create_instance("clock")

    token = encode_config(layout.config)
    composed = compose(decode_config_or_default(token), registry)
"""

from signage.widgets.codec import (
    build_share_url,
    decode_config,
    decode_config_or_default,
    encode_config,
)
from signage.widgets.composer import compose, render_instance
from signage.widgets.defaults import get_default_config, get_preset, list_presets
from signage.widgets.exceptions import (
    CollisionUnresolvable,
    DecodeFailure,
    OutOfBoundsPlacement,
    UnknownWidgetType,
    WidgetEngineError,
)
from signage.widgets.grid import Debouncer, GestureKind, GridEngine
from signage.widgets.layout import LayoutModel, filter_in_bounds, find_placement, is_in_bounds
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry, widget_registry
from signage.widgets.schemas import (
    FIXED_WIDGET_TYPE,
    GRID_COLUMNS,
    GRID_ROWS,
    GRID_ROWS_WITH_TICKER,
    ComposedDisplay,
    DisplayConfig,
    GridNode,
    GridPosition,
    Theme,
    WidgetInstance,
)


__all__ = [
    # Schemas
    "DisplayConfig",
    "WidgetInstance",
    "Theme",
    "GridNode",
    "GridPosition",
    "ComposedDisplay",
    "FIXED_WIDGET_TYPE",
    "GRID_COLUMNS",
    "GRID_ROWS",
    "GRID_ROWS_WITH_TICKER",
    # Registry
    "WidgetDescriptor",
    "WidgetRegistry",
    "widget_registry",
    # Layout
    "LayoutModel",
    "find_placement",
    "is_in_bounds",
    "filter_in_bounds",
    # Grid
    "GridEngine",
    "GestureKind",
    "Debouncer",
    # Codec
    "encode_config",
    "decode_config",
    "decode_config_or_default",
    "build_share_url",
    # Composer
    "compose",
    "render_instance",
    # Defaults
    "get_default_config",
    "get_preset",
    "list_presets",
    # Errors
    "WidgetEngineError",
    "UnknownWidgetType",
    "DecodeFailure",
    "OutOfBoundsPlacement",
    "CollisionUnresolvable",
]

"""
Layout Model - the placed widget instances of one display and their settings.

The configurator mutates a DisplayConfig only through LayoutModel, which
seeds new instances from the widget registry, merges editor changes and
applies positions reported by the grid engine. The display surface never
uses this class; it only reads decoded configs.

Usage:
======
    layout = LayoutModel(registry=registry)
    image = layout.create_instance("image")          # auto-placed
    layout.update_instance_config(image.id, {"url": "https://..."})
    layout.set_positions(grid_engine.get_current_layout())
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from signage.widgets.exceptions import OutOfBoundsPlacement, UnknownWidgetType
from signage.widgets.registry import WidgetRegistry, widget_registry
from signage.widgets.schemas import (
    FIXED_WIDGET_TYPE,
    GRID_COLUMNS,
    GRID_ROWS,
    GRID_ROWS_WITH_TICKER,
    DisplayConfig,
    GridNode,
    GridPosition,
    Theme,
    WidgetInstance,
)


logger = logging.getLogger("signage.widgets.layout")


# ---------------------------------------------------------------------------
# BOUNDS HELPERS
# ---------------------------------------------------------------------------

def is_in_bounds(instance: WidgetInstance, columns: int = GRID_COLUMNS, rows: int = GRID_ROWS) -> bool:
    """Check whether an instance fits entirely inside the grid."""
    return (
        instance.x >= 0
        and instance.y >= 0
        and instance.x + instance.w <= columns
        and instance.y + instance.h <= rows
    )


def filter_in_bounds(config: DisplayConfig, columns: int = GRID_COLUMNS, rows: int = GRID_ROWS) -> DisplayConfig:
    """
    Return a copy of the config with only in-bounds widgets.

    The ticker flag is recomputed from the ticker instances that survive.
    Used before sharing a layout so hidden overflow is not published.
    """
    layout = [i.model_copy(deep=True) for i in config.layout if is_in_bounds(i, columns, rows)]
    dropped = len(config.layout) - len(layout)
    if dropped:
        logger.info(f"Dropped {dropped} out-of-bounds widget(s) from shared layout")
    return config.model_copy(
        update={
            "layout": layout,
            "ticker_enabled": any(i.type == FIXED_WIDGET_TYPE for i in layout),
        },
        deep=True,
    )


def find_placement(
    layout: Iterable[WidgetInstance],
    columns: int,
    rows: int,
    desired_w: int,
    desired_h: int,
    min_w: int,
    min_h: int,
) -> Optional[Tuple[int, int, int, int]]:
    """
    Find the first free rectangle for a new widget.

    Tries the desired size first and shrinks towards the minimum size
    (height in the outer loop, width in the inner loop). Each size is
    scanned row-major from the top-left corner.

    Returns:
        (x, y, w, h) of the placement, or None if nothing fits
    """
    occupied = [[False] * columns for _ in range(rows)]
    for instance in layout:
        for dy in range(instance.h):
            for dx in range(instance.w):
                cx, cy = instance.x + dx, instance.y + dy
                if 0 <= cy < rows and 0 <= cx < columns:
                    occupied[cy][cx] = True

    def can_fit(x: int, y: int, w: int, h: int) -> bool:
        if x + w > columns or y + h > rows:
            return False
        return not any(occupied[y + dy][x + dx] for dy in range(h) for dx in range(w))

    for h in range(desired_h, min_h - 1, -1):
        for w in range(desired_w, min_w - 1, -1):
            for y in range(0, rows - h + 1):
                for x in range(0, columns - w + 1):
                    if can_fit(x, y, w, h):
                        return x, y, w, h
    return None


# ---------------------------------------------------------------------------
# LAYOUT MODEL
# ---------------------------------------------------------------------------

class LayoutModel:
    """
    Mutable wrapper around one DisplayConfig.

    Every operation applies immediately and in call order. Operations that
    name an instance ID that no longer exists are no-ops, so a dialog that
    closes after its widget was deleted does not fail.
    """

    def __init__(self, config: Optional[DisplayConfig] = None, registry: Optional[WidgetRegistry] = None):
        self._config = config.model_copy(deep=True) if config is not None else DisplayConfig()
        self._registry = registry if registry is not None else widget_registry

    @property
    def config(self) -> DisplayConfig:
        return self._config

    @property
    def registry(self) -> WidgetRegistry:
        return self._registry

    @property
    def row_count(self) -> int:
        return GRID_ROWS_WITH_TICKER if self._config.ticker_enabled else GRID_ROWS

    def replace(self, config: DisplayConfig) -> None:
        """Replace the whole configuration (e.g. when loading a preset)."""
        self._config = config.model_copy(deep=True)

    def get_instance(self, instance_id: str) -> Optional[WidgetInstance]:
        return self._config.get_instance(instance_id)

    # -------------------------------------------------------------------------
    # INSTANCES
    # -------------------------------------------------------------------------

    def create_instance(
        self,
        widget_type: str,
        position: Optional[Tuple[int, int]] = None,
    ) -> WidgetInstance:
        """
        Create a widget instance of a registered type and add it to the layout.

        Size comes from the descriptor defaults and config from a deep copy of
        its default_props. Without a position the instance is auto-placed in
        the first free spot; if the grid is full it goes just below the
        lowest widget.

        Args:
            widget_type: Registered widget type
            position: Optional (x, y) grid cell

        Returns:
            The new instance

        Raises:
            UnknownWidgetType: If widget_type is not registered
        """
        descriptor = self._registry.get(widget_type)
        if descriptor is None:
            raise UnknownWidgetType(widget_type)

        w, h = descriptor.default_w, descriptor.default_h
        if position is not None:
            x, y = position
        elif widget_type == FIXED_WIDGET_TYPE:
            x, y = 0, GRID_ROWS - 1
        else:
            x, y, w, h = self._auto_place(descriptor.min_w, descriptor.min_h,
                                          descriptor.max_w, descriptor.max_h, w, h)

        instance = WidgetInstance(
            id=self._new_id(widget_type),
            type=widget_type,
            x=x,
            y=y,
            w=w,
            h=h,
            config=descriptor.new_config(),
        )
        self._config.layout.append(instance)
        if widget_type == FIXED_WIDGET_TYPE:
            self._config.ticker_enabled = True

        logger.info(f"Created widget {instance.id} at ({x}, {y}) size {w}x{h}")
        return instance

    def update_instance_config(self, instance_id: str, patch: Dict[str, Any]) -> Optional[WidgetInstance]:
        """
        Shallow-merge a patch into an instance's config.

        New keys override, keys not in the patch keep their values.

        Returns:
            The updated instance, or None if the ID is not in the layout
        """
        instance = self.get_instance(instance_id)
        if instance is None:
            logger.debug(f"Config update for missing widget {instance_id} ignored")
            return None
        instance.config = {**instance.config, **patch}
        return instance

    def set_coming_soon(self, instance_id: str, coming_soon: bool) -> Optional[WidgetInstance]:
        instance = self.get_instance(instance_id)
        if instance is not None:
            instance.coming_soon = coming_soon
        return instance

    def remove_instance(self, instance_id: str) -> bool:
        """
        Remove an instance. Removing a missing ID is a no-op.

        The ticker flag follows the remaining ticker instances.

        Returns:
            True if an instance was removed
        """
        before = len(self._config.layout)
        self._config.layout = [i for i in self._config.layout if i.id != instance_id]
        removed = len(self._config.layout) != before
        if removed:
            self._config.ticker_enabled = any(i.type == FIXED_WIDGET_TYPE for i in self._config.layout)
            logger.info(f"Removed widget {instance_id}")
        return removed

    def clear(self) -> None:
        self._config.layout = []
        self._config.ticker_enabled = False

    def set_positions(self, positions: Iterable[GridPosition]) -> int:
        """
        Bulk-replace x/y/w/h of instances by ID.

        Unknown IDs are ignored; instances missing from `positions` keep
        their geometry.

        Returns:
            Number of instances updated
        """
        by_id = {p.id: p for p in positions}
        updated = 0
        for instance in self._config.layout:
            position = by_id.get(instance.id)
            if position is None:
                continue
            instance.x, instance.y = position.x, position.y
            instance.w, instance.h = position.w, position.h
            updated += 1
        return updated

    # -------------------------------------------------------------------------
    # GLOBAL SETTINGS
    # -------------------------------------------------------------------------

    def set_ticker_enabled(self, enabled: bool) -> None:
        """
        Turn the ticker strip on or off.

        Turning it off removes every ticker instance; turning it on creates
        one when the layout has none (if the ticker widget is registered).
        """
        if not enabled:
            self._config.layout = [i for i in self._config.layout if i.type != FIXED_WIDGET_TYPE]
            self._config.ticker_enabled = False
            return

        has_ticker = any(i.type == FIXED_WIDGET_TYPE for i in self._config.layout)
        if not has_ticker and self._registry.exists(FIXED_WIDGET_TYPE):
            self.create_instance(FIXED_WIDGET_TYPE)
        self._config.ticker_enabled = True

    def set_theme(self, theme: Theme) -> None:
        self._config.theme = theme.model_copy()

    def update_settings(self, **changes: Any) -> DisplayConfig:
        """
        Update global display settings (school_name, coming_soon, logo, ...).

        Unknown setting names are ignored. Values are stored the way the codec
        would read them back (blank names fall back to the default, proxies
        are trimmed, blank logos are dropped).
        """
        allowed = {"school_name", "coming_soon", "logo", "aspect_ratio", "cors_proxy"}
        updates = {k: v for k, v in changes.items() if k in allowed}
        if "school_name" in updates and not (updates["school_name"] or "").strip():
            updates["school_name"] = DisplayConfig.model_fields["school_name"].default
        if isinstance(updates.get("cors_proxy"), str):
            updates["cors_proxy"] = updates["cors_proxy"].strip()
        logo = updates.get("logo")
        if logo is not None and not logo.value.strip():
            updates["logo"] = None
        if updates.get("aspect_ratio") is not None and updates["aspect_ratio"] <= 0:
            updates["aspect_ratio"] = None
        if updates:
            self._config = self._config.model_copy(update=updates)
        return self._config

    # -------------------------------------------------------------------------
    # GRID VIEW
    # -------------------------------------------------------------------------

    def grid_nodes(self) -> List[GridNode]:
        """
        Instances as grid nodes, with size bounds from the registry.

        Instances of unregistered types get no bounds.
        """
        nodes = []
        for instance in self._config.layout:
            descriptor = self._registry.get(instance.type)
            nodes.append(GridNode(
                id=instance.id,
                x=instance.x,
                y=instance.y,
                w=instance.w,
                h=instance.h,
                min_w=descriptor.min_w if descriptor else None,
                min_h=descriptor.min_h if descriptor else None,
                max_w=descriptor.max_w if descriptor else None,
                max_h=descriptor.max_h if descriptor else None,
            ))
        return nodes

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _new_id(self, widget_type: str) -> str:
        while True:
            candidate = f"{widget_type}-{uuid4().hex[:8]}"
            if self.get_instance(candidate) is None:
                return candidate

    def _auto_place(
        self,
        min_w: int,
        min_h: int,
        max_w: Optional[int],
        max_h: Optional[int],
        default_w: int,
        default_h: int,
    ) -> Tuple[int, int, int, int]:
        rows = self.row_count
        desired_w = min(default_w, max_w or GRID_COLUMNS, GRID_COLUMNS)
        desired_h = min(default_h, max_h or rows, rows)
        grid_layout = [i for i in self._config.layout if i.type != FIXED_WIDGET_TYPE]

        placement = find_placement(grid_layout, GRID_COLUMNS, rows, desired_w, desired_h,
                                   min(min_w, desired_w), min(min_h, desired_h))
        if placement is not None:
            return placement

        below = max((i.y + i.h for i in grid_layout), default=0)
        overflow = OutOfBoundsPlacement("(new)", 0, below, default_w, default_h)
        logger.warning(f"No free space on the grid: {overflow}")
        return 0, below, default_w, default_h

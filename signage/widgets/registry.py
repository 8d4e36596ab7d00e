"""
Widget Registry - Table of every widget type the display can show.

Each widget module describes itself with a WidgetDescriptor (render and
editor capabilities, size bounds, default data) and registers it here.
Nothing else in the engine dispatches on widget type, so new widgets are
added without touching the layout, codec or composer.

Purpose:
========
1. Single source of truth for widget definitions
2. Size bounds and defaults for newly created instances
3. Render/editor lookup for the display surface and the configurator
4. Widget catalog for the configurator sidebar

Usage:
======
    from signage.widgets.registry import WidgetRegistry
    from signage.widgets.builtin import register_builtin_widgets

    registry = WidgetRegistry()
    register_builtin_widgets(registry)   # explicit, eager population

    descriptor = registry.get("clock")
    if descriptor is None:
        ...  # render the "unknown widget" placeholder

Population order:
=================
The registry must be populated before the first get() or compose() call.
The application does this once at import time of signage.main (see
register_builtin_widgets), so no request handler can observe an empty
registry.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from signage.widgets.editor import ChangeCallback, EditorForm
from signage.widgets.schemas import Theme


logger = logging.getLogger("signage.widgets.registry")


RenderFn = Callable[[Any, Theme], str]
EditorFn = Callable[[Dict[str, Any], ChangeCallback], EditorForm]
CapabilityLoader = Callable[[], Awaitable[Any]]


# ---------------------------------------------------------------------------
# WIDGET DESCRIPTOR
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WidgetDescriptor:
    """
    Registered capabilities and metadata of one widget type.

    Attributes:
        type: Unique widget type identifier (registry key)
        name, description, icon: Display metadata for the catalog
        min_w, min_h: Minimum cell span (>= 1)
        default_w, default_h: Span of a newly created instance
        render: Pure function (config, theme) -> HTML fragment
        editor: Optional pure function (config, on_change) -> EditorForm
        max_w, max_h: Optional maximum cell span
        default_props: Config of a newly created instance (deep-copied on use)
        config_model: Optional pydantic model the opaque config is validated
            into before render/editor capabilities are invoked
        capability_loader: Optional async loader of a heavyweight editor
            capability (e.g. a map picker); see EditorSession
    """
    type: str
    name: str
    description: str
    icon: str
    min_w: int
    min_h: int
    default_w: int
    default_h: int
    render: RenderFn
    editor: Optional[EditorFn] = None
    max_w: Optional[int] = None
    max_h: Optional[int] = None
    default_props: Dict[str, Any] = field(default_factory=dict)
    config_model: Optional[Type[BaseModel]] = None
    capability_loader: Optional[CapabilityLoader] = None

    def __post_init__(self):
        if not self.type:
            raise ValueError("Widget descriptor needs a type")
        if self.min_w < 1 or self.min_h < 1:
            raise ValueError(f"{self.type}: minimum size must be at least 1x1")
        if self.default_w < self.min_w or self.default_h < self.min_h:
            raise ValueError(f"{self.type}: default size is below the minimum")
        if self.max_w is not None and not self.min_w <= self.default_w <= self.max_w:
            raise ValueError(f"{self.type}: default width outside [{self.min_w}, {self.max_w}]")
        if self.max_h is not None and not self.min_h <= self.default_h <= self.max_h:
            raise ValueError(f"{self.type}: default height outside [{self.min_h}, {self.max_h}]")

    def new_config(self) -> Dict[str, Any]:
        """Config for a new instance; never shares state with default_props."""
        return copy.deepcopy(self.default_props)

    def parse_config(self, config: Dict[str, Any]) -> Any:
        """
        Turn an opaque instance config into this widget's typed config.

        Missing keys take the model defaults. If the stored values do not
        validate, the defaults of this widget are used instead so the display
        still renders something.

        Returns:
            A config_model instance, or the raw mapping if no model is set
        """
        if self.config_model is None:
            return config
        try:
            return self.config_model.model_validate(config)
        except ValidationError as e:
            logger.warning(f"Invalid config for widget '{self.type}', using defaults: {e.error_count()} error(s)")
            return self.config_model.model_validate(self.new_config())

    def to_catalog_entry(self) -> Dict[str, Any]:
        """Catalog view of this descriptor for the configurator sidebar."""
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "min_w": self.min_w,
            "min_h": self.min_h,
            "max_w": self.max_w,
            "max_h": self.max_h,
            "default_w": self.default_w,
            "default_h": self.default_h,
            "has_editor": self.editor is not None,
            "default_props": self.new_config(),
        }


# ---------------------------------------------------------------------------
# WIDGET REGISTRY
# ---------------------------------------------------------------------------

class WidgetRegistry:
    """
    Mapping of widget type -> WidgetDescriptor.

    Registering a type that already exists replaces the old descriptor
    (last write wins). Lookups never raise: an unknown type yields None and
    callers fall back to a placeholder.
    """

    def __init__(self):
        self._widgets: Dict[str, WidgetDescriptor] = {}

    def register(self, descriptor: WidgetDescriptor) -> None:
        """Store or overwrite the descriptor under descriptor.type."""
        if descriptor.type in self._widgets:
            logger.info(f"Replacing widget descriptor '{descriptor.type}'")
        self._widgets[descriptor.type] = descriptor

    def get(self, widget_type: str) -> Optional[WidgetDescriptor]:
        """Get a descriptor by type, or None if it is not registered."""
        return self._widgets.get(widget_type)

    def exists(self, widget_type: str) -> bool:
        return widget_type in self._widgets

    def list_widgets(self) -> List[WidgetDescriptor]:
        """All descriptors in registration order."""
        return list(self._widgets.values())

    def list_types(self) -> List[str]:
        return list(self._widgets.keys())

    def clear(self) -> None:
        """Remove every descriptor. Use for testing only."""
        self._widgets.clear()

    def __len__(self) -> int:
        return len(self._widgets)

    def __contains__(self, widget_type: object) -> bool:
        return widget_type in self._widgets


# ---------------------------------------------------------------------------
# APPLICATION INSTANCE
# ---------------------------------------------------------------------------
# Populated by signage.main through register_builtin_widgets().
# Library code takes a registry argument and only defaults to this one.
widget_registry = WidgetRegistry()

"""
Display Composer - turns a decoded DisplayConfig into what the display draws.

compose() is pure: it partitions the layout into grid widgets and the fixed
ticker strip, and picks the row count. render_instance() resolves a widget's
render capability through the registry and never fails: unknown types and
widgets whose render raises both become a placeholder.
"""

import html
import logging
from typing import Optional

from signage.widgets.registry import WidgetRegistry, widget_registry
from signage.widgets.schemas import (
    FIXED_WIDGET_TYPE,
    GRID_COLUMNS,
    GRID_ROWS,
    GRID_ROWS_WITH_TICKER,
    ComposedDisplay,
    DisplayConfig,
    Theme,
    WidgetInstance,
)


logger = logging.getLogger("signage.widgets.composer")

SYNTHESIZED_TICKER_ID = "default-ticker"


def compose(config: DisplayConfig, registry: Optional[WidgetRegistry] = None) -> ComposedDisplay:
    """
    Partition a config for rendering.

    Ticker instances never enter the grid flow. The fixed strip is shown only
    when ticker_enabled is set; if no ticker instance exists then, a
    full-width one is synthesized at the origin.
    """
    registry = registry if registry is not None else widget_registry

    grid_widgets = [i for i in config.layout if i.type != FIXED_WIDGET_TYPE]
    fixed_widget = None
    if config.ticker_enabled:
        fixed_widget = next((i for i in config.layout if i.type == FIXED_WIDGET_TYPE), None)
        if fixed_widget is None:
            fixed_widget = _synthesize_ticker(registry)

    return ComposedDisplay(
        grid_widgets=grid_widgets,
        fixed_widget=fixed_widget,
        row_count=GRID_ROWS_WITH_TICKER if config.ticker_enabled else GRID_ROWS,
        columns=GRID_COLUMNS,
        theme=config.theme,
        school_name=config.school_name,
        coming_soon=config.coming_soon,
        logo=config.logo,
    )


def _synthesize_ticker(registry: WidgetRegistry) -> WidgetInstance:
    descriptor = registry.get(FIXED_WIDGET_TYPE)
    return WidgetInstance(
        id=SYNTHESIZED_TICKER_ID,
        type=FIXED_WIDGET_TYPE,
        x=0,
        y=0,
        w=GRID_COLUMNS,
        h=1,
        config=descriptor.new_config() if descriptor else {},
    )


def render_placeholder(message: str) -> str:
    return f'<div class="widget-placeholder">{html.escape(message)}</div>'


def render_instance(instance: WidgetInstance, theme: Theme, registry: Optional[WidgetRegistry] = None) -> str:
    """
    Render one instance to an HTML fragment.

    Returns:
        The widget's markup, wrapped in a "Coming Soon" overlay when the
        instance is flagged, or a placeholder for unknown/broken widgets
    """
    registry = registry if registry is not None else widget_registry
    descriptor = registry.get(instance.type)
    if descriptor is None:
        logger.warning(f"Unknown widget type '{instance.type}' for {instance.id}")
        return render_placeholder(f"Unknown widget: {instance.type}")

    try:
        content = descriptor.render(descriptor.parse_config(instance.config), theme)
    except Exception as e:
        logger.error(f"Render failed for {instance.id} ({instance.type}): {e}")
        return render_placeholder(f"{descriptor.name} unavailable")

    if instance.coming_soon:
        return (
            '<div class="coming-soon">'
            f'<div class="coming-soon-content">{content}</div>'
            '<div class="coming-soon-overlay">Coming Soon</div>'
            "</div>"
        )
    return content

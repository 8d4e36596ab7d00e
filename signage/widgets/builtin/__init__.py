"""
Built-in widgets.

Every module in this package describes one widget type and exposes a
`register(registry)` function. register_builtin_widgets() calls them all in
a fixed order; the application runs it once at startup, before any request
can reach the registry.
"""

import logging

from signage.widgets.builtin import (
    air_quality,
    bus_connection,
    cafeteria_menu,
    climbing_gym,
    clock,
    events_list,
    image,
    media_player,
    news_ticker,
    poster_carousel,
    poster_feed,
    qrcode,
    slideshow,
    weather,
    web,
    widget_stack,
    youtube,
)
from signage.widgets.registry import WidgetRegistry


logger = logging.getLogger("signage.widgets.builtin")

BUILTIN_MODULES = (
    clock,
    image,
    news_ticker,
    weather,
    events_list,
    web,
    youtube,
    slideshow,
    poster_carousel,
    media_player,
    qrcode,
    air_quality,
    poster_feed,
    bus_connection,
    climbing_gym,
    widget_stack,
    cafeteria_menu,
)


def register_builtin_widgets(registry: WidgetRegistry) -> WidgetRegistry:
    """Register every built-in widget type into `registry`."""
    for module in BUILTIN_MODULES:
        module.register(registry)
    logger.info(f"Registered {len(BUILTIN_MODULES)} built-in widgets ({len(registry)} total)")
    return registry


def create_default_registry() -> WidgetRegistry:
    """A new registry holding only the built-in widgets."""
    return register_builtin_widgets(WidgetRegistry())

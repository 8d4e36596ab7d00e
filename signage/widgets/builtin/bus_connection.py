"""Bus Connection widget - LED-style arrival board fed by a GTFS-realtime proxy."""

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


# Width of the simulated LED matrix, in dots
DISPLAY_WIDTH = 128


class BusConnectionConfig(WidgetConfig):
    glow: bool = True
    scroll_headsigns: bool = Field(default=True, alias="scrollHeadsigns")
    display_height: int = Field(default=32, ge=32, le=64, alias="displayHeight")
    padding: int = Field(default=8, ge=0, le=24)
    proxy_url: str = Field(default="", alias="proxyUrl")


def render(config: BusConnectionConfig, theme: Theme) -> str:
    classes = "led-board" + (" led-glow" if config.glow else "")
    proxy = config.proxy_url.strip()
    proxy_attr = f' data-proxy-url="{esc(proxy)}"' if proxy else ""
    body = (
        f'<div class="{classes}" data-width="{DISPLAY_WIDTH}" data-height="{config.display_height}" '
        f'data-scroll="{str(config.scroll_headsigns).lower()}" style="padding:{config.padding}px"{proxy_attr}>'
        '<div class="led-row">No departures</div></div>'
    )
    return frame("widget-bus", body, theme)


editor = schema_editor([
    EditorField(name="glow", label="LED Glow Effect", kind=FieldKind.BOOLEAN),
    EditorField(name="scrollHeadsigns", label="Scroll Long Names", kind=FieldKind.BOOLEAN),
    EditorField(name="displayHeight", label="Display Height", kind=FieldKind.NUMBER, minimum=32, maximum=64),
    EditorField(name="padding", label="Padding", kind=FieldKind.NUMBER, minimum=0, maximum=24),
    EditorField(name="proxyUrl", label="GTFS-RT Proxy URL", kind=FieldKind.URL),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="bus-connection",
        name="Bus Connection",
        description="Live bus arrival display for the campus exchange",
        icon="bus",
        min_w=3,
        min_h=2,
        max_w=12,
        max_h=4,
        default_w=6,
        default_h=2,
        render=render,
        editor=editor,
        default_props={
            "glow": True,
            "scrollHeadsigns": True,
            "displayHeight": 32,
            "padding": 8,
            "proxyUrl": "",
        },
        config_model=BusConnectionConfig,
    ))

"""
News Ticker widget - scrolling announcements in the fixed bottom strip.

This is the one widget type the composer keeps out of the grid flow
(see FIXED_WIDGET_TYPE). Without configured items it shows a short set of
sample announcements so an enabled strip is never blank.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from signage.widgets.builtin.base import WidgetConfig, esc
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import FIXED_WIDGET_TYPE, GRID_COLUMNS, Theme


class TickerItem(BaseModel):
    id: Union[int, str] = 0
    label: str = ""
    text: str


SAMPLE_ITEMS = [
    TickerItem(id=1, label="REMINDER", text="Library closes at 10PM tonight for maintenance"),
    TickerItem(id=2, label="WEATHER", text="Rain expected this afternoon, bring an umbrella!"),
    TickerItem(id=3, label="SPORTS", text="Basketball team advances to regional finals, game Saturday 7PM"),
    TickerItem(id=4, label="ALERT", text="Parking Lot B closed tomorrow for resurfacing"),
    TickerItem(id=5, label="EVENT", text="Free pizza at Student Center, 12PM today while supplies last"),
]


class NewsTickerConfig(WidgetConfig):
    speed: int = Field(default=30, ge=1, description="Seconds per full scroll")
    label: str = "Breaking"
    api_url: Optional[str] = Field(default=None, alias="apiUrl")
    items: List[TickerItem] = Field(default_factory=list)


def render(config: NewsTickerConfig, theme: Theme) -> str:
    items = config.items or SAMPLE_ITEMS
    entries = "".join(
        f'<span class="ticker-item"><strong>{esc(item.label)}</strong> {esc(item.text)}</span>'
        for item in items + items  # doubled for a seamless loop
    )
    api = f' data-api-url="{esc(config.api_url)}"' if config.api_url else ""
    return (
        f'<div class="widget widget-ticker" style="background:{esc(theme.accent)}"{api}>'
        f'<div class="ticker-label" style="background:{esc(theme.primary)};color:{esc(theme.accent)}">'
        f"{esc(config.label)}</div>"
        f'<div class="ticker-track" style="animation-duration:{config.speed}s">{entries}</div>'
        "</div>"
    )


editor = schema_editor([
    EditorField(name="label", label="Label"),
    EditorField(name="speed", label="Scroll duration (seconds)", kind=FieldKind.NUMBER, minimum=5, maximum=120),
    EditorField(name="apiUrl", label="Feed URL", kind=FieldKind.URL,
                help_text="JSON array of {id, label, text}; refreshed by the display"),
    EditorField(name="items", label="Announcements", kind=FieldKind.LIST),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type=FIXED_WIDGET_TYPE,
        name="News Ticker",
        description="Scrolling announcements and alerts",
        icon="megaphone",
        min_w=GRID_COLUMNS,
        min_h=1,
        max_h=1,
        default_w=GRID_COLUMNS,
        default_h=1,
        render=render,
        editor=editor,
        default_props={"speed": 30, "label": "Breaking"},
        config_model=NewsTickerConfig,
    ))

"""
Events List widget - upcoming campus events.

Events come either from the config itself (`events`) or from a feed the
display fetches (`apiUrl` in json/ical/rss form, optionally through a CORS
proxy). The server renders the configured events; feed refresh happens on
the display.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class CampusEvent(BaseModel):
    id: Union[int, str] = 0
    title: str
    date: str = ""
    time: str = ""
    location: str = ""
    category: Optional[str] = None


SAMPLE_EVENTS = [
    CampusEvent(id=1, title="Club Fair", date="Mar 10", time="11:00 AM", location="Student Center"),
    CampusEvent(id=2, title="Guest Lecture: AI Ethics", date="Mar 11", time="2:00 PM", location="Hall B"),
    CampusEvent(id=3, title="Open Mic Night", date="Mar 12", time="7:00 PM", location="Coffee House"),
    CampusEvent(id=4, title="Study Abroad Info Session", date="Mar 13", time="3:30 PM", location="Room 204"),
    CampusEvent(id=5, title="Yoga on the Lawn", date="Mar 14", time="8:00 AM", location="West Lawn"),
]


class EventsListConfig(WidgetConfig):
    title: str = "Upcoming Events"
    max_items: int = Field(default=10, ge=1, alias="maxItems")
    source_type: Literal["json", "ical", "rss"] = Field(default="json", alias="sourceType")
    api_url: Optional[str] = Field(default=None, alias="apiUrl")
    cors_proxy: str = Field(default="", alias="corsProxy")
    cache_ttl_seconds: int = Field(default=300, ge=0, alias="cacheTtlSeconds")
    display_mode: Literal["scroll", "ticker", "paginate"] = Field(default="scroll", alias="displayMode")
    rotation_seconds: int = Field(default=5, ge=1, alias="rotationSeconds")
    selected_categories: List[str] = Field(default_factory=list, alias="selectedCategories")
    events: List[CampusEvent] = Field(default_factory=list)

    def visible_events(self) -> List[CampusEvent]:
        events = self.events or ([] if self.api_url else SAMPLE_EVENTS)
        if self.selected_categories:
            events = [e for e in events if e.category in self.selected_categories]
        return events[: self.max_items]


def render(config: EventsListConfig, theme: Theme) -> str:
    cards = "".join(
        '<li class="event-card">'
        f'<div class="event-title">{esc(e.title)}</div>'
        f'<div class="event-meta">{esc(e.date)} {esc(e.time)} &middot; {esc(e.location)}</div>'
        "</li>"
        for e in config.visible_events()
    )
    feed = ""
    if config.api_url:
        feed = (
            f' data-api-url="{esc(config.api_url)}" data-source-type="{config.source_type}"'
            f' data-cors-proxy="{esc(config.cors_proxy.strip())}" data-ttl="{config.cache_ttl_seconds}"'
        )
    body = (
        f'<ul class="events events-{config.display_mode}" '
        f'data-rotation="{config.rotation_seconds}"{feed}>{cards}</ul>'
    )
    return frame("widget-events", body, theme, title=config.title)


editor = schema_editor([
    EditorField(name="title", label="Widget Title"),
    EditorField(name="maxItems", label="Maximum Items", kind=FieldKind.NUMBER, minimum=1, maximum=50),
    EditorField(name="sourceType", label="Source Type", kind=FieldKind.SELECT, options=["json", "ical", "rss"]),
    EditorField(name="apiUrl", label="API URL (optional)", kind=FieldKind.URL),
    EditorField(name="corsProxy", label="CORS Proxy (optional)", kind=FieldKind.URL),
    EditorField(name="cacheTtlSeconds", label="Cache TTL (seconds)", kind=FieldKind.NUMBER, minimum=0),
    EditorField(name="displayMode", label="Display Mode", kind=FieldKind.SELECT,
                options=["scroll", "ticker", "paginate"]),
    EditorField(name="rotationSeconds", label="Rotation (seconds)", kind=FieldKind.NUMBER, minimum=1),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="events-list",
        name="Events List",
        description="Display upcoming campus events",
        icon="calendar",
        min_w=3,
        min_h=2,
        default_w=4,
        default_h=3,
        render=render,
        editor=editor,
        default_props={
            "maxItems": 10,
            "title": "Upcoming Events",
            "sourceType": "json",
            "cacheTtlSeconds": 300,
            "corsProxy": "",
            "displayMode": "scroll",
            "rotationSeconds": 5,
        },
        config_model=EventsListConfig,
    ))

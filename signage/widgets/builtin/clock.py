"""Clock widget - current time and date, ticking client-side."""

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class ClockConfig(WidgetConfig):
    show_seconds: bool = Field(default=False, alias="showSeconds")
    show_date: bool = Field(default=True, alias="showDate")
    format24h: bool = Field(default=False, alias="format24h")


def render(config: ClockConfig, theme: Theme) -> str:
    # The display page script fills .clock-time / .clock-date from the data attributes
    body = (
        f'<div class="clock" data-seconds="{esc(config.show_seconds).lower()}" '
        f'data-24h="{esc(config.format24h).lower()}">'
        '<div class="clock-time"></div>'
        + ('<div class="clock-date"></div>' if config.show_date else "")
        + "</div>"
    )
    return frame("widget-clock", body, theme)


editor = schema_editor([
    EditorField(name="showSeconds", label="Show seconds", kind=FieldKind.BOOLEAN),
    EditorField(name="showDate", label="Show date", kind=FieldKind.BOOLEAN),
    EditorField(name="format24h", label="24-hour format", kind=FieldKind.BOOLEAN),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="clock",
        name="Clock",
        description="Displays current time and date",
        icon="clock",
        min_w=2,
        min_h=1,
        default_w=3,
        default_h=1,
        render=render,
        editor=editor,
        default_props={"showSeconds": False, "showDate": True, "format24h": False},
        config_model=ClockConfig,
    ))

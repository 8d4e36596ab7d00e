"""Weather widget - current conditions for a named location."""

from typing import Literal

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class WeatherConfig(WidgetConfig):
    location: str = "Campus"
    units: Literal["fahrenheit", "celsius"] = "fahrenheit"
    show_details: bool = Field(default=True, alias="showDetails")


def render(config: WeatherConfig, theme: Theme) -> str:
    unit = "F" if config.units == "fahrenheit" else "C"
    details = '<dl class="weather-details"></dl>' if config.show_details else ""
    body = (
        f'<div class="weather" data-location="{esc(config.location)}" data-units="{config.units}">'
        f'<div class="weather-location">{esc(config.location)}</div>'
        f'<div class="weather-temp">--&deg;{unit}</div>{details}</div>'
    )
    return frame("widget-weather", body, theme)


editor = schema_editor([
    EditorField(name="location", label="Location"),
    EditorField(name="units", label="Units", kind=FieldKind.SELECT, options=["fahrenheit", "celsius"]),
    EditorField(name="showDetails", label="Show details", kind=FieldKind.BOOLEAN),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="weather",
        name="Weather",
        description="Display current weather conditions",
        icon="sun",
        min_w=2,
        min_h=2,
        max_w=4,
        max_h=3,
        default_w=3,
        default_h=2,
        render=render,
        editor=editor,
        default_props={"location": "Campus", "units": "fahrenheit", "showDetails": True},
        config_model=WeatherConfig,
    ))

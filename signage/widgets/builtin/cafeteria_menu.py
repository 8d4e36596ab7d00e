"""
Cafeteria Menu widget - the meal being served right now.

The meal period follows the configured end times (HH:MM). The menu itself is
fetched by the display from the Dana Hospitality locations or the menu page.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


_HHMM = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")

MEAL_LABELS = {"breakfast": "Breakfast", "lunch": "Lunch", "dinner": "Dinner"}


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


class CafeteriaMenuConfig(WidgetConfig):
    menu_url: str = Field(default="https://unbc.icaneat.ca/menu/", alias="menuUrl")
    dana_locations: str = Field(default="48784,48786", alias="danaLocations")
    refresh_interval: int = Field(default=30, ge=1, alias="refreshInterval", description="Minutes")
    cors_proxy: str = Field(default="", alias="corsProxy")
    breakfast_end: str = Field(default="10:30", alias="breakfastEnd")
    lunch_end: str = Field(default="14:00", alias="lunchEnd")
    dinner_end: str = Field(default="19:00", alias="dinnerEnd")

    @field_validator("breakfast_end", "lunch_end", "dinner_end")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not _HHMM.match(value):
            raise ValueError("expected HH:MM")
        return value

    def meal_period(self, now: datetime) -> str:
        """Meal being served at `now`; after dinner it is breakfast again."""
        minutes = now.hour * 60 + now.minute
        if minutes < _minutes(self.breakfast_end):
            return "breakfast"
        if minutes < _minutes(self.lunch_end):
            return "lunch"
        if minutes < _minutes(self.dinner_end):
            return "dinner"
        return "breakfast"


def render(config: CafeteriaMenuConfig, theme: Theme, now: Optional[datetime] = None) -> str:
    meal = config.meal_period(now or datetime.now())
    locations = ",".join(loc.strip() for loc in config.dana_locations.split(",") if loc.strip())
    body = (
        f'<div class="menu" data-meal="{meal}" data-menu-url="{esc(config.menu_url)}" '
        f'data-locations="{esc(locations)}" data-cors-proxy="{esc(config.cors_proxy.strip())}" '
        f'data-refresh="{config.refresh_interval}"><ul class="menu-items"></ul></div>'
    )
    return frame("widget-menu", body, theme, title=MEAL_LABELS[meal])


editor = schema_editor([
    EditorField(name="menuUrl", label="Menu Page URL", kind=FieldKind.URL),
    EditorField(name="danaLocations", label="Dana Location IDs", help_text="Comma-separated, e.g. 48784,48786"),
    EditorField(name="breakfastEnd", label="Breakfast ends at"),
    EditorField(name="lunchEnd", label="Lunch ends at"),
    EditorField(name="dinnerEnd", label="Dinner ends at"),
    EditorField(name="refreshInterval", label="Auto-refresh every (minutes)", kind=FieldKind.NUMBER,
                minimum=1, maximum=120),
    EditorField(name="corsProxy", label="CORS Proxy (optional)", kind=FieldKind.URL),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="cafeteria-menu",
        name="Cafeteria Menu",
        description="Displays campus cafeteria menu with time-sensitive meals",
        icon="utensils",
        min_w=2,
        min_h=2,
        default_w=3,
        default_h=3,
        render=render,
        editor=editor,
        default_props={
            "menuUrl": "https://unbc.icaneat.ca/menu/",
            "danaLocations": "48784,48786",
            "refreshInterval": 30,
            "corsProxy": "",
            "breakfastEnd": "10:30",
            "lunchEnd": "14:00",
            "dinnerEnd": "19:00",
        },
        config_model=CafeteriaMenuConfig,
    ))

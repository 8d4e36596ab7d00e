"""
Climbing Gym widget - live occupancy from a Rock Gym Pro portal.

The display polls the portal page (through a CORS proxy) every
`refreshInterval` minutes. The server renders the gym name and whether it is
open right now according to the weekly schedule.
"""

from datetime import datetime
from typing import Dict, NamedTuple, Optional

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


DEFAULT_PORTAL_URL = (
    "https://portal.rockgympro.com/portal/public/e4f8e07377b8d1ba053944154f4c2c50/"
    "occupancy?&iframeid=occupancyCounter&fId="
)


class DaySchedule(NamedTuple):
    open: str
    close: str
    label: str


_WEEKDAY = DaySchedule("16:30", "22:00", "Mon-Fri: 4:30 PM - 10:00 PM")

# Keyed by datetime.weekday(): Monday is 0
SCHEDULE: Dict[int, DaySchedule] = {
    0: _WEEKDAY,
    1: _WEEKDAY,
    2: _WEEKDAY,
    3: _WEEKDAY,
    4: _WEEKDAY,
    5: DaySchedule("12:00", "18:30", "Sat: 12:00 PM - 6:30 PM"),
    6: DaySchedule("14:00", "20:00", "Sun: 2:00 PM - 8:00 PM"),
}


class ClimbingGymConfig(WidgetConfig):
    gym_name: str = Field(default="OVERhang", alias="gymName")
    portal_url: str = Field(default=DEFAULT_PORTAL_URL, alias="portalUrl")
    refresh_interval: int = Field(default=5, ge=1, alias="refreshInterval", description="Minutes")
    cors_proxy: str = Field(default="", alias="corsProxy")
    show_capacity_bar: bool = Field(default=True, alias="showCapacityBar")
    show_hours: bool = Field(default=True, alias="showHours")


def is_open(now: datetime) -> bool:
    schedule = SCHEDULE[now.weekday()]
    return schedule.open <= now.strftime("%H:%M") < schedule.close


def render(config: ClimbingGymConfig, theme: Theme, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    bar = '<div class="capacity-bar"><div class="capacity-fill"></div></div>' if config.show_capacity_bar else ""
    hours = ""
    if config.show_hours:
        status = "Open" if is_open(now) else "Closed"
        hours = (
            f'<div class="gym-status gym-{status.lower()}">{status}</div>'
            f'<div class="gym-hours">{esc(SCHEDULE[now.weekday()].label)}</div>'
        )
    body = (
        f'<div class="gym" data-portal-url="{esc(config.portal_url)}" '
        f'data-cors-proxy="{esc(config.cors_proxy.strip())}" data-refresh="{config.refresh_interval}">'
        f'<div class="gym-count">--</div>{bar}{hours}</div>'
    )
    return frame("widget-gym", body, theme, title=config.gym_name)


editor = schema_editor([
    EditorField(name="gymName", label="Gym Name"),
    EditorField(name="portalUrl", label="Rock Gym Pro Portal URL", kind=FieldKind.URL),
    EditorField(name="showCapacityBar", label="Show Capacity Bar", kind=FieldKind.BOOLEAN),
    EditorField(name="showHours", label="Show Hours & Open/Closed Status", kind=FieldKind.BOOLEAN),
    EditorField(name="refreshInterval", label="Auto-refresh every (minutes)", kind=FieldKind.NUMBER,
                minimum=1, maximum=30),
    EditorField(name="corsProxy", label="CORS Proxy (optional)", kind=FieldKind.URL),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="climbing-gym",
        name="Climbing Gym",
        description="Live occupancy counter for a climbing gym via Rock Gym Pro",
        icon="mountain",
        min_w=2,
        min_h=2,
        default_w=3,
        default_h=2,
        render=render,
        editor=editor,
        default_props={
            "gymName": "OVERhang",
            "portalUrl": DEFAULT_PORTAL_URL,
            "refreshInterval": 5,
            "corsProxy": "",
            "showCapacityBar": True,
            "showHours": True,
        },
        config_model=ClimbingGymConfig,
    ))

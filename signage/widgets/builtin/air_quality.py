"""
Air Quality widget - AQI, UV and pollutant levels for a coordinate.

Its editor has a heavyweight extra: a map-based coordinate picker. The
picker is loaded asynchronously when the editor opens (see EditorSession)
and must be closed when the editor goes away.
"""

import asyncio
import logging
from typing import Any, Dict

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


logger = logging.getLogger("signage.widgets.air_quality")

DEFAULT_LATITUDE = 53.8931
DEFAULT_LONGITUDE = -122.8142


class AirQualityConfig(WidgetConfig):
    latitude: float = Field(default=DEFAULT_LATITUDE, ge=-90, le=90)
    longitude: float = Field(default=DEFAULT_LONGITUDE, ge=-180, le=180)
    location_name: str = Field(default="UNBC Campus", alias="locationName")
    refresh_interval: int = Field(default=15, ge=1, alias="refreshInterval", description="Minutes")
    show_details: bool = Field(default=True, alias="showDetails")


def render(config: AirQualityConfig, theme: Theme) -> str:
    details = '<dl class="aqi-details"></dl>' if config.show_details else ""
    body = (
        f'<div class="aqi" data-lat="{config.latitude}" data-lon="{config.longitude}" '
        f'data-refresh="{config.refresh_interval}">'
        f'<div class="aqi-location">{esc(config.location_name)}</div>'
        f'<div class="aqi-value">--</div>{details}</div>'
    )
    return frame("widget-air-quality", body, theme, title="Air Quality")


editor = schema_editor([
    EditorField(name="locationName", label="Location Name"),
    EditorField(name="latitude", label="Latitude", kind=FieldKind.NUMBER, minimum=-90, maximum=90),
    EditorField(name="longitude", label="Longitude", kind=FieldKind.NUMBER, minimum=-180, maximum=180),
    EditorField(name="refreshInterval", label="Refresh (minutes)", kind=FieldKind.NUMBER, minimum=1),
    EditorField(name="showDetails", label="Show Details", kind=FieldKind.BOOLEAN),
])


# ---------------------------------------------------------------------------
# MAP PICKER CAPABILITY
# ---------------------------------------------------------------------------

class MapPicker:
    """
    Coordinate picker backing the air-quality editor.

    apply() turns a clicked point into a config patch. A closed picker
    rejects further picks.
    """

    def __init__(self, zoom: int = 10):
        self.zoom = zoom
        self.active = False

    async def start(self) -> None:
        # Stand-in for fetching the style/tiles of the map view
        await asyncio.sleep(0)
        self.active = True
        logger.debug("Map picker started")

    def apply(self, latitude: float, longitude: float) -> Dict[str, Any]:
        if not self.active:
            raise RuntimeError("Map picker is closed")
        latitude = max(-90.0, min(90.0, float(latitude)))
        longitude = ((float(longitude) + 180.0) % 360.0) - 180.0
        return {"latitude": round(latitude, 4), "longitude": round(longitude, 4)}

    async def close(self) -> None:
        self.active = False
        logger.debug("Map picker closed")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "map-picker", "zoom": self.zoom, "active": self.active}


async def load_map_picker() -> MapPicker:
    picker = MapPicker()
    await picker.start()
    return picker


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="air-quality",
        name="Air Quality",
        description="Air quality index, UV, and pollutant levels with map coordinate picker",
        icon="leaf",
        min_w=2,
        min_h=2,
        default_w=3,
        default_h=3,
        render=render,
        editor=editor,
        default_props={
            "latitude": DEFAULT_LATITUDE,
            "longitude": DEFAULT_LONGITUDE,
            "locationName": "UNBC Campus",
            "refreshInterval": 15,
            "showDetails": True,
        },
        config_model=AirQualityConfig,
        capability_loader=load_map_picker,
    ))

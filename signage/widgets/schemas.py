"""
Display Configuration Schemas - Pydantic models for the signage layout.

A DisplayConfig is the whole state of one signage screen: the placed widget
instances, the color theme and a handful of global settings. It travels
between machines as a compact token (see codec.py), so the models keep the
original camelCase wire names as aliases.

Example DisplayConfig (wire form):
    {
        "layout": [
            {"id": "clock-1", "type": "clock", "x": 10, "y": 0, "w": 2, "h": 1}
        ],
        "theme": {"primary": "#035642", "accent": "#B79527", "background": "#022b21"},
        "schoolName": "Campus Hub",
        "tickerEnabled": false
    }
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# GRID CONSTANTS
# ---------------------------------------------------------------------------
# The grid is always 12 columns wide. The ticker strip takes one of the 8
# rows when enabled. These are configuration-level constants; nothing in the
# collision code enforces them.

GRID_COLUMNS = 12
GRID_ROWS = 8
GRID_ROWS_WITH_TICKER = 7

# The one widget type that is never placed in the grid flow
FIXED_WIDGET_TYPE = "news-ticker"


# ---------------------------------------------------------------------------
# THEME
# ---------------------------------------------------------------------------

class Theme(BaseModel):
    """
    Display color theme.

    Values are opaque strings to the engine (hex or any CSS color).
    """
    primary: str = Field(default="#035642", description="Primary brand color")
    accent: str = Field(default="#B79527", description="Accent / highlight color")
    background: str = Field(default="#022b21", description="Page background color")


class LogoConfig(BaseModel):
    """Optional header logo, either inline SVG markup or an image URL."""
    type: Literal["svg", "url"]
    value: str


# ---------------------------------------------------------------------------
# WIDGET INSTANCE
# ---------------------------------------------------------------------------

class WidgetInstance(BaseModel):
    """
    One placed widget on the grid.

    `config` is an opaque mapping that only the matching widget descriptor
    interprets. Positions are zero-based grid cells; sizes are cell spans.
    Sizes are not clamped against the descriptor bounds here.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique instance ID within the layout (e.g. 'clock-1')")
    type: str = Field(description="Widget type from the registry (e.g. 'clock')")
    x: int = Field(default=0, description="Zero-based column")
    y: int = Field(default=0, description="Zero-based row")
    w: int = Field(default=1, description="Column span")
    h: int = Field(default=1, description="Row span")
    config: Dict[str, Any] = Field(
        default_factory=dict,
        alias="props",
        description="Per-instance widget data, interpreted by the widget only",
    )
    coming_soon: bool = Field(
        default=False,
        alias="comingSoon",
        description="Render greyed out with a 'Coming Soon' overlay",
    )


# ---------------------------------------------------------------------------
# DISPLAY CONFIG
# ---------------------------------------------------------------------------

class DisplayConfig(BaseModel):
    """
    Complete configuration of one signage display.

    Layout order is preserved for rendering but has no meaning for placement;
    a widget's position is purely its x/y/w/h.
    """
    model_config = ConfigDict(populate_by_name=True)

    layout: List[WidgetInstance] = Field(default_factory=list)
    theme: Theme = Field(default_factory=Theme)
    school_name: str = Field(default="Campus Hub", alias="schoolName")
    ticker_enabled: bool = Field(default=False, alias="tickerEnabled")
    coming_soon: bool = Field(default=False, alias="comingSoon")
    logo: Optional[LogoConfig] = None
    aspect_ratio: Optional[float] = Field(default=None, alias="aspectRatio")
    cors_proxy: Optional[str] = Field(default=None, alias="corsProxy")

    def get_instance(self, instance_id: str) -> Optional[WidgetInstance]:
        """Find an instance by ID, or None."""
        for instance in self.layout:
            if instance.id == instance_id:
                return instance
        return None

    def to_wire(self) -> Dict[str, Any]:
        """
        Serialize to the camelCase wire form used by tokens and the API.

        Optional fields that are unset and flags that are false are left out,
        which keeps tokens short. Instance `props` is always present and
        kept verbatim, nulls included.
        """
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not data.get("comingSoon"):
            data.pop("comingSoon", None)
        data["layout"] = [instance.model_dump(by_alias=True) for instance in self.layout]
        for item in data["layout"]:
            if not item["comingSoon"]:
                del item["comingSoon"]
        return data


# ---------------------------------------------------------------------------
# GRID NODES
# ---------------------------------------------------------------------------

class GridPosition(BaseModel):
    """Geometry of one instance as reported by the grid engine."""
    id: str
    x: int
    y: int
    w: int
    h: int


class GridNode(GridPosition):
    """A grid item with its size constraints (taken from the descriptor)."""
    min_w: Optional[int] = None
    min_h: Optional[int] = None
    max_w: Optional[int] = None
    max_h: Optional[int] = None


# ---------------------------------------------------------------------------
# COMPOSER OUTPUT
# ---------------------------------------------------------------------------

class ComposedDisplay(BaseModel):
    """
    Result of composing a DisplayConfig for the display surface.

    Attributes:
        grid_widgets: Instances drawn in the grid flow
        fixed_widget: Instance drawn in the fixed ticker strip (None = no strip)
        row_count: Rows available to the grid (7 with ticker, 8 without)
        columns: Grid column count
    """
    grid_widgets: List[WidgetInstance] = Field(default_factory=list)
    fixed_widget: Optional[WidgetInstance] = None
    row_count: int = GRID_ROWS
    columns: int = GRID_COLUMNS
    theme: Theme = Field(default_factory=Theme)
    school_name: str = ""
    coming_soon: bool = False
    logo: Optional[LogoConfig] = None

"""
Default Configurations - built-in fallback config and demo presets.

The default configuration is what the display shows when the token is
missing or cannot be decoded: an empty 12x8 grid, no ticker, campus colors.

Presets are complete example layouts an operator can load into the
configurator as a starting point.

Usage:
======
    from signage.widgets.defaults import get_default_config, get_preset

    config = get_default_config()
    preset = get_preset("campus-classic")
    if preset:
        layout.replace(preset.config)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from signage.widgets.schemas import DisplayConfig, Theme, WidgetInstance


logger = logging.getLogger("signage.widgets.defaults")


# ---------------------------------------------------------------------------
# DEFAULT CONFIGURATION
# ---------------------------------------------------------------------------

DEFAULT_THEME = Theme(primary="#035642", accent="#B79527", background="#022b21")

DEFAULT_CONFIG = DisplayConfig(
    layout=[],
    theme=DEFAULT_THEME,
    school_name="Campus Hub",
    ticker_enabled=False,
)


def get_default_config() -> DisplayConfig:
    """Fresh copy of the default configuration (safe to mutate)."""
    return DEFAULT_CONFIG.model_copy(deep=True)


# ---------------------------------------------------------------------------
# PRESETS
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Preset:
    """A named demo configuration."""
    id: str
    name: str
    description: str
    icon: str
    config: DisplayConfig

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "config": self.config.to_wire(),
        }


def _widget(id: str, type: str, x: int, y: int, w: int, h: int, **props: Any) -> WidgetInstance:
    return WidgetInstance(id=id, type=type, x=x, y=y, w=w, h=h, config=props)


def _ticker() -> WidgetInstance:
    return _widget("news-ticker-1", "news-ticker", 0, 7, 12, 1)


DEMO_PRESETS: List[Preset] = [
    Preset(
        id="campus-classic",
        name="Campus Classic",
        description="Traditional campus display with clock, events, and news",
        icon="school",
        config=DisplayConfig(
            layout=[
                _widget("clock-1", "clock", 9, 0, 3, 1, showSeconds=True, showDate=True, format24h=False),
                _widget("poster-1", "poster-carousel", 0, 0, 6, 5, rotationSeconds=8),
                _widget("events-1", "events-list", 6, 1, 6, 4, title="Upcoming Events", maxItems=5),
                _ticker(),
            ],
            theme=Theme(primary="#035642", accent="#B79527", background="#022b21"),
            school_name="Campus Hub",
            ticker_enabled=True,
        ),
    ),
    Preset(
        id="media-showcase",
        name="Media Showcase",
        description="Video and image-focused display for visual content",
        icon="film",
        config=DisplayConfig(
            layout=[
                _widget("youtube-1", "youtube", 0, 0, 8, 5, videoId="dQw4w9WgXcQ",
                        autoplay=True, muted=True, loop=True),
                _widget("image-1", "image", 8, 0, 4, 2, alt="Students studying", fit="cover",
                        url="https://images.unsplash.com/photo-1523240795612-9a054b0db644?w=600"),
                _widget("image-2", "image", 8, 2, 4, 3, alt="Campus life", fit="cover",
                        url="https://images.unsplash.com/photo-1517486808906-6ca8b3f04846?w=600"),
                _widget("clock-1", "clock", 0, 5, 3, 1, showSeconds=False, showDate=True),
                _ticker(),
            ],
            theme=Theme(primary="#1a1a2e", accent="#e94560", background="#16213e"),
            school_name="Media Center",
            ticker_enabled=True,
        ),
    ),
    Preset(
        id="minimal-info",
        name="Minimal Info",
        description="Clean, minimalist layout with essential information",
        icon="sparkles",
        config=DisplayConfig(
            layout=[
                _widget("clock-1", "clock", 4, 2, 4, 2, showSeconds=False, showDate=True, format24h=True),
                _widget("weather-1", "weather", 4, 4, 4, 2, location="New York", units="fahrenheit"),
            ],
            theme=Theme(primary="#0f0f0f", accent="#ffffff", background="#000000"),
            school_name="Info Display",
            ticker_enabled=False,
        ),
    ),
    Preset(
        id="events-focus",
        name="Events Focus",
        description="Large events list with supporting content",
        icon="calendar",
        config=DisplayConfig(
            layout=[
                _widget("events-1", "events-list", 0, 0, 7, 5, title="This Week on Campus", maxItems=8),
                _widget("clock-1", "clock", 7, 0, 5, 1, showSeconds=True, showDate=True),
                _widget("poster-1", "poster-carousel", 7, 1, 5, 4, rotationSeconds=6),
                _ticker(),
            ],
            theme=Theme(primary="#2d3436", accent="#00b894", background="#1e272e"),
            school_name="Events Board",
            ticker_enabled=True,
        ),
    ),
    Preset(
        id="web-dashboard",
        name="Web Dashboard",
        description="Embed external websites and live content",
        icon="globe",
        config=DisplayConfig(
            layout=[
                _widget("web-1", "web", 0, 0, 8, 5, url="https://www.wikipedia.org", refreshInterval=300),
                _widget("clock-1", "clock", 8, 0, 4, 1, showSeconds=True, showDate=True),
                _widget("weather-1", "weather", 8, 1, 4, 3, location="Boston", units="fahrenheit"),
            ],
            theme=Theme(primary="#2c3e50", accent="#3498db", background="#1a252f"),
            school_name="Web Dashboard",
            ticker_enabled=False,
        ),
    ),
    Preset(
        id="slideshow-gallery",
        name="Photo Gallery",
        description="Beautiful slideshow with campus photos",
        icon="images",
        config=DisplayConfig(
            layout=[
                _widget("slideshow-1", "slideshow", 0, 0, 9, 5, duration=5, transition="fade",
                        showCaptions=True, showProgress=True, slides=[
                            {"url": "https://images.unsplash.com/photo-1607237138185-eedd9c632b0b?w=1200",
                             "caption": "Welcome to Our Campus"},
                            {"url": "https://images.unsplash.com/photo-1562774053-701939374585?w=1200",
                             "caption": "State-of-the-Art Facilities"},
                        ]),
                _widget("clock-1", "clock", 9, 0, 3, 1, showSeconds=False, showDate=True),
                _widget("events-1", "events-list", 9, 1, 3, 4, title="Today", maxItems=4),
                _ticker(),
            ],
            theme=Theme(primary="#1b4332", accent="#d4a373", background="#081c15"),
            school_name="Photo Gallery",
            ticker_enabled=True,
        ),
    ),
]


def list_presets() -> List[Preset]:
    return list(DEMO_PRESETS)


def get_preset(preset_id: str) -> Optional[Preset]:
    """Look up a preset by ID, or None."""
    for preset in DEMO_PRESETS:
        if preset.id == preset_id:
            return preset
    logger.debug(f"Unknown preset '{preset_id}'")
    return None

"""
Poster Feed widget - posters pulled from an RSS feed.

The display fetches `feedUrl` and takes each item's first image as a poster.
Without a feed a built-in sample set is shown.
"""

from typing import Literal, Optional

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.builtin.poster_carousel import Poster
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


SAMPLE_FEED_POSTERS = [
    Poster(id="1", title="Spring Festival",
           image="https://images.unsplash.com/photo-1723274565296-2945e2ebc306?w=400&h=520&fit=crop"),
    Poster(id="2", title="Career Fair",
           image="https://images.unsplash.com/photo-1607930232028-f01079639b00?w=400&h=520&fit=crop"),
    Poster(id="3", title="Basketball Finals",
           image="https://images.unsplash.com/photo-1677757103853-a304b6a182f5?w=400&h=520&fit=crop"),
    Poster(id="4", title="Art Exhibition",
           image="https://images.unsplash.com/photo-1676312830459-f6f13dfdd899?w=400&h=520&fit=crop"),
]


class PosterFeedConfig(WidgetConfig):
    feed_url: Optional[str] = Field(default=None, alias="feedUrl")
    rotation_seconds: int = Field(default=8, ge=1, alias="rotationSeconds")
    animation_mode: Literal["stack", "carousel", "fade"] = Field(default="stack", alias="animationMode")


def render(config: PosterFeedConfig, theme: Theme) -> str:
    cards = "".join(
        f'<figure class="feed-poster{" active" if i == 0 else ""}">'
        f'<img src="{esc(p.image)}" alt="{esc(p.title)}"><figcaption>{esc(p.title)}</figcaption></figure>'
        for i, p in enumerate(SAMPLE_FEED_POSTERS)
    )
    feed = f' data-feed-url="{esc(config.feed_url)}"' if config.feed_url else ""
    body = (
        f'<div class="poster-feed poster-feed-{config.animation_mode}" '
        f'data-rotation="{config.rotation_seconds}"{feed}>{cards}</div>'
    )
    return frame("widget-poster-feed", body, theme)


editor = schema_editor([
    EditorField(name="feedUrl", label="Feed URL", kind=FieldKind.URL),
    EditorField(name="animationMode", label="Animation Mode", kind=FieldKind.SELECT,
                options=["stack", "carousel", "fade"]),
    EditorField(name="rotationSeconds", label="Rotation Speed (seconds)", kind=FieldKind.NUMBER,
                minimum=3, maximum=60),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="poster-feed",
        name="Poster Feed",
        description="RSS feed posters with stack, carousel, or fade animations",
        icon="newspaper",
        min_w=3,
        min_h=2,
        default_w=6,
        default_h=4,
        render=render,
        editor=editor,
        default_props={"rotationSeconds": 8, "animationMode": "stack"},
        config_model=PosterFeedConfig,
    ))

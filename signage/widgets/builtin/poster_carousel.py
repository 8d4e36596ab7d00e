"""
Poster Carousel widget - rotating event posters and announcements.

Posters are taken from the config, or fetched by the display from `apiUrl`
when dataSource is "api". With no posters configured a built-in sample set
is shown.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class Poster(BaseModel):
    id: Union[int, str] = 0
    title: str
    subtitle: str = ""
    image: str


SAMPLE_POSTERS = [
    Poster(id=1, title="Spring Festival", subtitle="March 15-17 | Main Quad",
           image="https://images.unsplash.com/photo-1533174072545-7a4b6ad7a6c3?w=800&h=600&fit=crop"),
    Poster(id=2, title="Career Fair", subtitle="Meet 50+ employers | March 20",
           image="https://images.unsplash.com/photo-1540575467063-178a50c2df87?w=800&h=600&fit=crop"),
]


class PosterCarouselConfig(WidgetConfig):
    rotation_seconds: int = Field(default=10, ge=1, alias="rotationSeconds")
    data_source: Literal["default", "api"] = Field(default="default", alias="dataSource")
    api_url: Optional[str] = Field(default=None, alias="apiUrl")
    max_stories: int = Field(default=10, ge=1, alias="maxStories")
    posters: List[Poster] = Field(default_factory=list)


def render(config: PosterCarouselConfig, theme: Theme) -> str:
    posters = (config.posters or SAMPLE_POSTERS)[: config.max_stories]
    slides = "".join(
        f'<article class="poster{" active" if i == 0 else ""}" style="background-image:url(\'{esc(p.image)}\')">'
        f'<h3>{esc(p.title)}</h3><p>{esc(p.subtitle)}</p></article>'
        for i, p in enumerate(posters)
    )
    api = ""
    if config.data_source == "api" and config.api_url:
        api = f' data-api-url="{esc(config.api_url)}"'
    body = f'<div class="posters" data-rotation="{config.rotation_seconds}"{api}>{slides}</div>'
    return frame("widget-posters", body, theme)


editor = schema_editor([
    EditorField(name="rotationSeconds", label="Rotation Speed (seconds)", kind=FieldKind.NUMBER,
                minimum=3, maximum=60),
    EditorField(name="dataSource", label="Data Source", kind=FieldKind.SELECT, options=["default", "api"]),
    EditorField(name="apiUrl", label="API URL (optional)", kind=FieldKind.URL),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="poster-carousel",
        name="Poster Carousel",
        description="Rotating display of event posters and announcements",
        icon="carousel",
        min_w=4,
        min_h=3,
        default_w=8,
        default_h=5,
        render=render,
        editor=editor,
        default_props={"rotationSeconds": 10},
        config_model=PosterCarouselConfig,
    ))

"""Slideshow widget - rotating images with captions."""

from typing import List, Literal

from pydantic import BaseModel, Field

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class Slide(BaseModel):
    url: str
    caption: str = ""


class SlideshowConfig(WidgetConfig):
    slides: List[Slide] = Field(default_factory=list)
    duration: int = Field(default=5, ge=1)
    transition: Literal["fade", "slide", "none"] = "fade"
    show_captions: bool = Field(default=True, alias="showCaptions")
    show_progress: bool = Field(default=True, alias="showProgress")


def render(config: SlideshowConfig, theme: Theme) -> str:
    if not config.slides:
        return empty_state("widget-slideshow", "No slides added", theme)

    slides = []
    for index, slide in enumerate(config.slides):
        caption = ""
        if config.show_captions and slide.caption:
            caption = f"<figcaption>{esc(slide.caption)}</figcaption>"
        active = " active" if index == 0 else ""
        slides.append(
            f'<figure class="slide{active}"><img src="{esc(slide.url)}" alt="{esc(slide.caption)}">{caption}</figure>'
        )
    dots = ""
    if config.show_progress and len(config.slides) > 1:
        dots = '<div class="slide-dots">' + '<span class="dot"></span>' * len(config.slides) + "</div>"

    body = (
        f'<div class="slides transition-{config.transition}" data-duration="{config.duration}">'
        f'{"".join(slides)}</div>{dots}'
    )
    return frame("widget-slideshow", body, theme)


editor = schema_editor([
    EditorField(name="slides", label="Slides", kind=FieldKind.LIST,
                help_text="List of {url, caption}"),
    EditorField(name="duration", label="Duration (seconds per slide)", kind=FieldKind.NUMBER,
                minimum=1, maximum=60),
    EditorField(name="transition", label="Transition Effect", kind=FieldKind.SELECT,
                options=["fade", "slide", "none"]),
    EditorField(name="showCaptions", label="Show Captions", kind=FieldKind.BOOLEAN),
    EditorField(name="showProgress", label="Show Progress Dots", kind=FieldKind.BOOLEAN),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="slideshow",
        name="Slideshow",
        description="Rotating image slideshow with captions",
        icon="slideshow",
        min_w=3,
        min_h=2,
        default_w=6,
        default_h=4,
        render=render,
        editor=editor,
        default_props={
            "slides": [],
            "duration": 5,
            "transition": "fade",
            "showCaptions": True,
            "showProgress": True,
        },
        config_model=SlideshowConfig,
    ))

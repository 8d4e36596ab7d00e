"""Image widget - a single static image."""

from typing import Literal

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class ImageConfig(WidgetConfig):
    url: str = ""
    alt: str = "Image"
    fit: Literal["cover", "contain", "fill"] = "cover"


def render(config: ImageConfig, theme: Theme) -> str:
    if not config.url:
        return empty_state("widget-image", "No image selected", theme)
    body = (
        f'<img src="{esc(config.url)}" alt="{esc(config.alt)}" '
        f'style="width:100%;height:100%;object-fit:{config.fit}">'
    )
    return frame("widget-image", body, theme)


editor = schema_editor([
    EditorField(name="url", label="Image URL", kind=FieldKind.URL),
    EditorField(name="alt", label="Alt text"),
    EditorField(name="fit", label="Fit", kind=FieldKind.SELECT, options=["cover", "contain", "fill"]),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="image",
        name="Image",
        description="Display a static image",
        icon="image",
        min_w=2,
        min_h=2,
        default_w=4,
        default_h=3,
        render=render,
        editor=editor,
        default_props={"url": "", "alt": "Image", "fit": "cover"},
        config_model=ImageConfig,
    ))

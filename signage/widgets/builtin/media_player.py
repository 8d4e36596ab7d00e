"""Media Player widget - a video or audio file."""

from typing import Literal

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class MediaPlayerConfig(WidgetConfig):
    url: str = ""
    media_type: Literal["video", "audio"] = Field(default="video", alias="type")
    autoplay: bool = False
    muted: bool = True
    loop: bool = True
    controls: bool = True


def render(config: MediaPlayerConfig, theme: Theme) -> str:
    if not config.url:
        return empty_state("widget-media", "No media selected", theme)
    flags = [name for name in ("autoplay", "muted", "loop", "controls") if getattr(config, name)]
    tag = config.media_type
    body = f'<{tag} src="{esc(config.url)}" {" ".join(flags)} playsinline></{tag}>'
    return frame("widget-media", body, theme)


editor = schema_editor([
    EditorField(name="type", label="Media Type", kind=FieldKind.SELECT, options=["video", "audio"]),
    EditorField(name="url", label="Media URL", kind=FieldKind.URL),
    EditorField(name="autoplay", label="Autoplay", kind=FieldKind.BOOLEAN),
    EditorField(name="muted", label="Muted", kind=FieldKind.BOOLEAN),
    EditorField(name="loop", label="Loop", kind=FieldKind.BOOLEAN),
    EditorField(name="controls", label="Show Controls", kind=FieldKind.BOOLEAN),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="media-player",
        name="Media Player",
        description="Play video or audio files",
        icon="film",
        min_w=3,
        min_h=2,
        default_w=6,
        default_h=4,
        render=render,
        editor=editor,
        default_props={
            "url": "",
            "type": "video",
            "autoplay": False,
            "muted": True,
            "loop": True,
            "controls": True,
        },
        config_model=MediaPlayerConfig,
    ))

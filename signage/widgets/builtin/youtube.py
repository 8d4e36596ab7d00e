"""YouTube widget."""

from urllib.parse import urlencode

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class YouTubeConfig(WidgetConfig):
    video_id: str = Field(default="", alias="videoId")
    autoplay: bool = False
    muted: bool = True
    loop: bool = True

    def embed_url(self) -> str:
        params = {
            "autoplay": int(self.autoplay),
            "mute": int(self.muted),
            "loop": int(self.loop),
            "controls": 0,
        }
        if self.loop:
            # Looping a single video needs the playlist parameter
            params["playlist"] = self.video_id
        return f"https://www.youtube-nocookie.com/embed/{self.video_id}?{urlencode(params)}"


def render(config: YouTubeConfig, theme: Theme) -> str:
    if not config.video_id:
        return empty_state("widget-youtube", "No video selected", theme)
    body = (
        f'<iframe src="{esc(config.embed_url())}" title="YouTube video" '
        'allow="autoplay; encrypted-media" allowfullscreen></iframe>'
    )
    return frame("widget-youtube", body, theme)


editor = schema_editor([
    EditorField(name="videoId", label="Video ID"),
    EditorField(name="autoplay", label="Autoplay", kind=FieldKind.BOOLEAN),
    EditorField(name="muted", label="Muted", kind=FieldKind.BOOLEAN),
    EditorField(name="loop", label="Loop", kind=FieldKind.BOOLEAN),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="youtube",
        name="YouTube",
        description="Embed YouTube videos",
        icon="tv",
        min_w=3,
        min_h=2,
        default_w=6,
        default_h=4,
        render=render,
        editor=editor,
        default_props={"videoId": "", "autoplay": False, "muted": True, "loop": True},
        config_model=YouTubeConfig,
    ))

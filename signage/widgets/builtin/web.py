"""Web Embed widget - an external page in an iframe."""

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class WebConfig(WidgetConfig):
    url: str = ""
    refresh_interval: int = Field(default=0, ge=0, alias="refreshInterval")


def render(config: WebConfig, theme: Theme) -> str:
    if not config.url:
        return empty_state("widget-web", "No URL configured", theme)
    refresh = f' data-refresh="{config.refresh_interval}"' if config.refresh_interval else ""
    body = (
        f'<iframe src="{esc(config.url)}" title="Embedded page"{refresh} '
        'sandbox="allow-scripts allow-same-origin" loading="lazy"></iframe>'
    )
    return frame("widget-web", body, theme)


editor = schema_editor([
    EditorField(name="url", label="URL", kind=FieldKind.URL),
    EditorField(name="refreshInterval", label="Refresh Interval (seconds)", kind=FieldKind.NUMBER,
                minimum=0, help_text="0 disables reloading"),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="web",
        name="Web Embed",
        description="Embed external web content",
        icon="globe",
        min_w=3,
        min_h=2,
        default_w=6,
        default_h=4,
        render=render,
        editor=editor,
        default_props={"url": "", "refreshInterval": 0},
        config_model=WebConfig,
    ))

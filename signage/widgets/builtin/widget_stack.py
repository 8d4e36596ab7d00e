"""
Widget Stack widget - cycles through other widgets in one grid cell.

Each child is a `{id, type, props}` entry. Children are rendered through the
registry the stack was registered in, so a child whose type is not
registered shows the usual unknown-widget placeholder instead of breaking
the stack.
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from signage.widgets.builtin.base import WidgetConfig, esc, frame
from signage.widgets.composer import render_instance
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme, WidgetInstance


class StackChild(BaseModel):
    id: str
    type: str
    props: Dict[str, Any] = Field(default_factory=dict)


DEFAULT_CHILDREN = [
    StackChild(id="default-clock", type="clock"),
    StackChild(id="default-weather", type="weather"),
]


class WidgetStackConfig(WidgetConfig):
    rotation_seconds: int = Field(default=8, ge=1, alias="rotationSeconds")
    animation_mode: Literal["stack", "carousel", "fade"] = Field(default="fade", alias="animationMode")
    children: List[StackChild] = Field(default_factory=list)

    def visible_children(self) -> List[StackChild]:
        return self.children or DEFAULT_CHILDREN


def render(config: WidgetStackConfig, theme: Theme, registry: WidgetRegistry) -> str:
    items = "".join(
        f'<div class="stack-item{" active" if i == 0 else ""}" data-id="{esc(child.id)}">'
        f"{render_instance(WidgetInstance(id=child.id, type=child.type, config=child.props), theme, registry)}"
        "</div>"
        for i, child in enumerate(config.visible_children())
    )
    body = (
        f'<div class="stack stack-{config.animation_mode}" '
        f'data-rotation="{config.rotation_seconds}">{items}</div>'
    )
    return frame("widget-stack", body, theme)


editor = schema_editor([
    EditorField(name="animationMode", label="Animation Mode", kind=FieldKind.SELECT,
                options=["fade", "stack", "carousel"]),
    EditorField(name="rotationSeconds", label="Rotation Speed (seconds)", kind=FieldKind.NUMBER,
                minimum=3, maximum=120),
    EditorField(name="children", label="Widgets", kind=FieldKind.LIST,
                help_text="Each entry is {id, type, props}"),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="widget-stack",
        name="Widget Stack",
        description="Cycle through multiple widgets with stack, carousel, or fade animations",
        icon="layers",
        min_w=2,
        min_h=2,
        default_w=4,
        default_h=3,
        render=lambda config, theme: render(config, theme, registry),
        editor=editor,
        default_props={"rotationSeconds": 8, "animationMode": "fade", "children": []},
        config_model=WidgetStackConfig,
    ))

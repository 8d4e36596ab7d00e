"""QR Code widget - encodes text or a URL; the display draws the code."""

from typing import Literal

from pydantic import Field

from signage.widgets.builtin.base import WidgetConfig, empty_state, esc, frame
from signage.widgets.editor import EditorField, FieldKind, schema_editor
from signage.widgets.registry import WidgetDescriptor, WidgetRegistry
from signage.widgets.schemas import Theme


class QRCodeConfig(WidgetConfig):
    text: str = ""
    label: str = ""
    fg_color: str = Field(default="#000000", alias="fgColor")
    bg_color: str = Field(default="#ffffff", alias="bgColor")
    error_correction: Literal["L", "M", "Q", "H"] = Field(default="M", alias="errorCorrection")


def render(config: QRCodeConfig, theme: Theme) -> str:
    if not config.text:
        return empty_state("widget-qrcode", "Enter text or a URL", theme)
    label = f'<p class="qr-label">{esc(config.label)}</p>' if config.label else ""
    body = (
        f'<div class="qr" data-text="{esc(config.text)}" data-level="{config.error_correction}" '
        f'data-fg="{esc(config.fg_color)}" data-bg="{esc(config.bg_color)}"></div>{label}'
    )
    return frame("widget-qrcode", body, theme)


editor = schema_editor([
    EditorField(name="text", label="Text / URL"),
    EditorField(name="label", label="Label"),
    EditorField(name="errorCorrection", label="Error Correction", kind=FieldKind.SELECT,
                options=["L", "M", "Q", "H"]),
    EditorField(name="fgColor", label="Foreground", kind=FieldKind.COLOR),
    EditorField(name="bgColor", label="Background", kind=FieldKind.COLOR),
])


def register(registry: WidgetRegistry) -> None:
    registry.register(WidgetDescriptor(
        type="qrcode",
        name="QR Code",
        description="Generate and display a QR code from text or a URL",
        icon="qrCode",
        min_w=2,
        min_h=2,
        default_w=3,
        default_h=3,
        render=render,
        editor=editor,
        default_props={
            "text": "",
            "label": "",
            "fgColor": "#000000",
            "bgColor": "#ffffff",
            "errorCorrection": "M",
        },
        config_model=QRCodeConfig,
    ))

"""Shared markup helpers for the built-in widgets."""

import html
from typing import Optional

from pydantic import BaseModel, ConfigDict

from signage.widgets.schemas import Theme


class WidgetConfig(BaseModel):
    """Base for typed widget configs: camelCase keys in, extra keys ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def frame(css_class: str, body: str, theme: Theme, title: Optional[str] = None) -> str:
    """Wrap widget markup in the common card frame."""
    heading = f'<h2 class="widget-title" style="color:{esc(theme.accent)}">{esc(title)}</h2>' if title else ""
    return (
        f'<section class="widget {css_class}" '
        f'style="--primary:{esc(theme.primary)};--accent:{esc(theme.accent)}">'
        f"{heading}{body}</section>"
    )


def empty_state(css_class: str, message: str, theme: Theme) -> str:
    return frame(css_class, f'<p class="widget-empty">{esc(message)}</p>', theme)

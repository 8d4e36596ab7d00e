"""
Display Router - The read-only signage surface.

The display is driven entirely by the `config` query parameter:

    GET /display?config=<token>

A missing or broken token is not an error; the default configuration is
shown instead. The page is rendered server-side: every grid widget is
placed in a 12-column CSS grid by its x/y/w/h, and the ticker (if enabled)
gets its own strip below the grid.

Usage:
======
1. Build a layout in the configurator and save it
2. Open the share URL on the screen's browser (kiosk mode)
"""

import html
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from signage.deps import get_registry
from signage.widgets.codec import decode_config_or_default
from signage.widgets.composer import compose, render_instance
from signage.widgets.registry import WidgetRegistry
from signage.widgets.schemas import ComposedDisplay, WidgetInstance


logger = logging.getLogger("signage.display")

EMPTY_STATE_MESSAGE = "No widgets configured"


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/display", tags=["display"])


# ---------------------------------------------------------------------------
# PAGE RENDERING
# ---------------------------------------------------------------------------

def _cell(instance: WidgetInstance, composed: ComposedDisplay, registry: WidgetRegistry) -> str:
    style = f"grid-column:{instance.x + 1} / span {instance.w};grid-row:{instance.y + 1} / span {instance.h}"
    content = render_instance(instance, composed.theme, registry)
    return f'<div class="cell" data-id="{html.escape(instance.id)}" style="{style}">{content}</div>'


def _header(composed: ComposedDisplay) -> str:
    logo = ""
    if composed.logo is not None:
        if composed.logo.type == "url":
            logo = f'<img class="logo" src="{html.escape(composed.logo.value)}" alt="">'
        else:
            # Operator SVG is shown as an image so any script in it never runs
            source = "data:image/svg+xml;charset=utf-8," + quote(composed.logo.value, safe="")
            logo = f'<img class="logo" src="{html.escape(source)}" alt="">'
    return (
        f'<header>{logo}<h1>{html.escape(composed.school_name)}</h1>'
        '<time class="header-clock"></time></header>'
    )


def get_display_html(composed: ComposedDisplay, registry: WidgetRegistry) -> str:
    """
    Render the full display page for a composed configuration.
    """
    theme = composed.theme
    if composed.grid_widgets:
        cells = "".join(_cell(i, composed, registry) for i in composed.grid_widgets)
        main = (
            f'<main class="grid" style="grid-template-columns:repeat({composed.columns}, 1fr);'
            f'grid-template-rows:repeat({composed.row_count}, 1fr)">{cells}</main>'
        )
    else:
        main = f'<main class="empty"><p>{EMPTY_STATE_MESSAGE}</p></main>'

    ticker = ""
    if composed.fixed_widget is not None:
        ticker = f'<footer class="ticker">{render_instance(composed.fixed_widget, theme, registry)}</footer>'

    banner = '<div class="display-coming-soon">Coming Soon</div>' if composed.coming_soon else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(composed.school_name)}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}

        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: {html.escape(theme.background)};
            color: #ffffff;
            height: 100vh;
            display: flex;
            flex-direction: column;
            overflow: hidden;
        }}

        header {{
            display: flex;
            align-items: center;
            gap: 1rem;
            padding: 0.75rem 1.5rem;
            background: {html.escape(theme.primary)};
            border-bottom: 3px solid {html.escape(theme.accent)};
        }}

        header h1 {{ font-size: 1.5rem; flex: 1; }}
        .logo {{ height: 2.5rem; }}

        main.grid {{ flex: 1; display: grid; gap: 0.75rem; padding: 0.75rem; }}
        main.empty {{ flex: 1; display: flex; align-items: center; justify-content: center; opacity: 0.6; }}

        .cell {{ min-width: 0; min-height: 0; overflow: hidden; }}

        .widget {{
            height: 100%;
            border-radius: 12px;
            padding: 1rem;
            background: rgba(255, 255, 255, 0.06);
        }}

        .widget-placeholder {{
            height: 100%;
            display: flex;
            align-items: center;
            justify-content: center;
            border: 1px dashed rgba(255, 255, 255, 0.3);
            border-radius: 12px;
        }}

        .coming-soon {{ position: relative; height: 100%; }}
        .coming-soon-content {{ height: 100%; filter: grayscale(1); opacity: 0.4; }}
        .coming-soon-overlay {{
            position: absolute;
            inset: 0;
            display: flex;
            align-items: center;
            justify-content: center;
            font-weight: 700;
            letter-spacing: 0.2em;
            text-transform: uppercase;
        }}

        footer.ticker {{ height: calc((100vh - 4rem) / 8); }}
        .widget-ticker {{ display: flex; height: 100%; overflow: hidden; white-space: nowrap; }}
        .ticker-track {{ display: flex; gap: 3rem; animation: scroll linear infinite; }}

        @keyframes scroll {{
            from {{ transform: translateX(0); }}
            to {{ transform: translateX(-50%); }}
        }}
    </style>
</head>
<body>
    {_header(composed)}
    {banner}
    {main}
    {ticker}
</body>
</html>"""


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.get("", response_class=HTMLResponse)
def show_display(
    config: Optional[str] = Query(None, description="Encoded display configuration"),
    registry: WidgetRegistry = Depends(get_registry),
):
    """
    Render the display page for a config token.

    Never fails for a bad token: it falls back to the default layout.
    """
    composed = compose(decode_config_or_default(config), registry)
    logger.debug(f"Rendering display: {len(composed.grid_widgets)} widget(s), {composed.row_count} rows")
    return HTMLResponse(content=get_display_html(composed, registry))


@router.get("/compose")
def compose_display(
    config: Optional[str] = Query(None, description="Encoded display configuration"),
    registry: WidgetRegistry = Depends(get_registry),
):
    """
    Composer output as JSON (for client-side renderers and debugging).

    Returns:
        grid_widgets, fixed_widget, row_count, columns, theme and header data
    """
    composed = compose(decode_config_or_default(config), registry)
    return composed.model_dump(by_alias=True)

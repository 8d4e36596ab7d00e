"""
Configurator API schemas - Pydantic models for the /configure endpoints.
These define the request formats the configurator UI sends.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from signage.widgets.grid import GestureKind
from signage.widgets.schemas import LogoConfig


# ---------------------------------------------------------------------------
# SESSIONS
# ---------------------------------------------------------------------------

class SessionCreate(BaseModel):
    """
    Schema for opening a configurator session.

    Example request body:
    {
        "token": "eNqrVspJLS..."
    }

    Both fields are optional; without them the session starts from the
    default configuration. A token that does not decode also starts from
    the default.
    """
    token: Optional[str] = Field(None, description="Existing display token to edit")
    preset: Optional[str] = Field(None, description="Preset ID to start from")


# ---------------------------------------------------------------------------
# WIDGETS
# ---------------------------------------------------------------------------

class WidgetCreate(BaseModel):
    """
    Schema for adding a widget.

    Example request body:
    {
        "type": "image",
        "x": 0,
        "y": 0
    }

    Omit x/y to auto-place the widget in the first free spot.
    """
    type: str = Field(..., min_length=1, description="Registered widget type")
    x: Optional[int] = Field(None, ge=0)
    y: Optional[int] = Field(None, ge=0)


class ConfigPatch(BaseModel):
    """Shallow patch merged into a widget's config."""
    patch: Dict[str, Any] = Field(default_factory=dict)


class ComingSoonUpdate(BaseModel):
    coming_soon: bool


# ---------------------------------------------------------------------------
# GRID GESTURES
# ---------------------------------------------------------------------------

class GestureBegin(BaseModel):
    instance_id: str
    kind: GestureKind = GestureKind.DRAG


class GestureStep(BaseModel):
    """
    One intermediate geometry update of a drag or resize.

    A drag step sends x/y, a resize step sends w/h.
    """
    instance_id: str
    x: Optional[int] = None
    y: Optional[int] = None
    w: Optional[int] = None
    h: Optional[int] = None


# ---------------------------------------------------------------------------
# DISPLAY SETTINGS
# ---------------------------------------------------------------------------

class SettingsUpdate(BaseModel):
    """
    Schema for updating global display settings.

    All fields are optional - only provided fields are updated.
    """
    school_name: Optional[str] = Field(None, max_length=120)
    ticker_enabled: Optional[bool] = None
    coming_soon: Optional[bool] = None
    logo: Optional[LogoConfig] = None
    aspect_ratio: Optional[float] = Field(None, gt=0)
    cors_proxy: Optional[str] = None


# ---------------------------------------------------------------------------
# EDITOR
# ---------------------------------------------------------------------------

class EditorOpen(BaseModel):
    instance_id: str


class EditorSubmit(BaseModel):
    """Form values submitted from the edit dialog, keyed by field name."""
    values: Dict[str, Any] = Field(default_factory=dict)


class CapabilityInput(BaseModel):
    """Interaction with the editor's loaded capability (e.g. a map click)."""
    params: Dict[str, Any] = Field(default_factory=dict)


class SaveResponse(BaseModel):
    token: str
    share_url: str
    widgets: int
    hidden_widgets: List[str] = Field(default_factory=list, description="IDs left out of the share link")


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"
    detail: Optional[str] = None

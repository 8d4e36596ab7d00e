"""
Configurator Router - API behind the layout editor.

Each operator works in an in-memory configurator session. The session owns
the layout being edited, the grid engine that resolves drags and resizes,
and the widget edit dialog. Saving returns the display token and the share
URL; nothing else is persisted.

Endpoints:
==========
POST   /configure/sessions                          Open a session (optionally from a token or preset)
GET    /configure/sessions/{id}                     Session state and current config
DELETE /configure/sessions/{id}                     Close a session
POST   /configure/sessions/{id}/widgets             Add a widget
DELETE /configure/sessions/{id}/widgets/{wid}       Remove a widget (idempotent)
PATCH  /configure/sessions/{id}/widgets/{wid}/config
PUT    /configure/sessions/{id}/widgets/{wid}/coming-soon
POST   /configure/sessions/{id}/gestures/begin      Start a drag/resize
POST   /configure/sessions/{id}/gestures/step       Intermediate geometry update
POST   /configure/sessions/{id}/gestures/end        Finish the gesture
GET    /configure/sessions/{id}/layout              Current grid geometry (synchronous)
PUT    /configure/sessions/{id}/positions           Bulk positions from a client-side grid
PUT    /configure/sessions/{id}/theme
PATCH  /configure/sessions/{id}/settings
POST   /configure/sessions/{id}/presets/{preset}    Load a preset
POST   /configure/sessions/{id}/save                Token + share URL
POST   /configure/sessions/{id}/editor              Open the edit dialog
POST   /configure/sessions/{id}/editor/submit       Submit form values
POST   /configure/sessions/{id}/editor/capability   Feed the loaded capability (map click)
DELETE /configure/sessions/{id}/editor              Close the edit dialog
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from signage.core.config import settings
from signage.deps import get_registry, get_session
from signage.schemas.configure import (
    CapabilityInput,
    ComingSoonUpdate,
    ConfigPatch,
    EditorOpen,
    EditorSubmit,
    GestureBegin,
    GestureStep,
    SaveResponse,
    SessionCreate,
    SettingsUpdate,
    StatusResponse,
    WidgetCreate,
)
from signage.services.configurator import ConfiguratorSession, session_store
from signage.services.editor_session import EditorClosed
from signage.widgets.codec import decode_config
from signage.widgets.defaults import get_preset
from signage.widgets.exceptions import UnknownWidgetType
from signage.widgets.layout import is_in_bounds
from signage.widgets.registry import WidgetRegistry
from signage.widgets.schemas import GridPosition, Theme


logger = logging.getLogger("signage.configure")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/configure", tags=["configure"])


def _instance_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Widget not found")


# ---------------------------------------------------------------------------
# SESSIONS
# ---------------------------------------------------------------------------

@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    request: SessionCreate,
    registry: WidgetRegistry = Depends(get_registry),
):
    """
    Open a configurator session.

    Starts from the given token or preset, or from the default configuration.

    Raises:
        404 Not Found: If the preset does not exist
    """
    config = None
    if request.preset:
        preset = get_preset(request.preset)
        if preset is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preset not found")
        config = preset.config
    elif request.token:
        config = decode_config(request.token)
        if config is None:
            logger.info("Session token did not decode, starting from the default config")

    session = await session_store.create(config=config, registry=registry)
    return session.to_dict()


@router.get("/sessions/{session_id}")
async def get_session_state(session: ConfiguratorSession = Depends(get_session)):
    return session.to_dict()


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session: ConfiguratorSession = Depends(get_session)):
    await session_store.remove(session.id)


# ---------------------------------------------------------------------------
# WIDGETS
# ---------------------------------------------------------------------------

@router.post("/sessions/{session_id}/widgets", status_code=status.HTTP_201_CREATED)
async def add_widget(
    request: WidgetCreate,
    session: ConfiguratorSession = Depends(get_session),
):
    """
    Add a widget of a registered type.

    Raises:
        400 Bad Request: If the widget type is not registered
    """
    position = (request.x, request.y) if request.x is not None and request.y is not None else None
    try:
        instance = session.add_widget(request.type, position)
    except UnknownWidgetType as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return instance.model_dump(by_alias=True)


@router.delete("/sessions/{session_id}/widgets/{instance_id}")
async def remove_widget(instance_id: str, session: ConfiguratorSession = Depends(get_session)):
    removed = await session.remove_widget(instance_id)
    return {"removed": removed, "ticker_enabled": session.config.ticker_enabled}


@router.patch("/sessions/{session_id}/widgets/{instance_id}/config")
async def patch_widget_config(
    instance_id: str,
    request: ConfigPatch,
    session: ConfiguratorSession = Depends(get_session),
):
    """Shallow-merge a patch into the widget config."""
    instance = session.update_widget_config(instance_id, request.patch)
    if instance is None:
        raise _instance_not_found()
    return instance.model_dump(by_alias=True)


@router.put("/sessions/{session_id}/widgets/{instance_id}/coming-soon")
async def set_widget_coming_soon(
    instance_id: str,
    request: ComingSoonUpdate,
    session: ConfiguratorSession = Depends(get_session),
):
    instance = session.set_coming_soon(instance_id, request.coming_soon)
    if instance is None:
        raise _instance_not_found()
    return instance.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# GRID GESTURES
# ---------------------------------------------------------------------------

@router.post("/sessions/{session_id}/gestures/begin", response_model=StatusResponse)
async def begin_gesture(request: GestureBegin, session: ConfiguratorSession = Depends(get_session)):
    try:
        session.begin_gesture(request.instance_id, request.kind)
    except KeyError:
        raise _instance_not_found()
    return StatusResponse(detail=session.grid.state.value)


@router.post("/sessions/{session_id}/gestures/step")
async def gesture_step(request: GestureStep, session: ConfiguratorSession = Depends(get_session)):
    """
    Apply one intermediate drag (x/y) or resize (w/h) step.

    The change is emitted to the layout once the gesture stream has been
    quiet for the debounce interval.
    """
    node = session.grid.get_node(request.instance_id)
    if node is None:
        raise _instance_not_found()

    applied = True
    if request.x is not None or request.y is not None:
        applied = session.move(
            request.instance_id,
            request.x if request.x is not None else node.x,
            request.y if request.y is not None else node.y,
        )
    if applied and (request.w is not None or request.h is not None):
        applied = session.resize(
            request.instance_id,
            request.w if request.w is not None else node.w,
            request.h if request.h is not None else node.h,
        )
    return {
        "applied": applied,
        "layout": [p.model_dump() for p in session.grid.get_current_layout()],
    }


@router.post("/sessions/{session_id}/gestures/end", response_model=StatusResponse)
async def end_gesture(session: ConfiguratorSession = Depends(get_session)):
    session.end_gesture()
    return StatusResponse(detail=session.grid.state.value)


@router.get("/sessions/{session_id}/layout")
async def get_current_layout(session: ConfiguratorSession = Depends(get_session)):
    return [p.model_dump() for p in session.grid.get_current_layout()]


@router.put("/sessions/{session_id}/positions")
async def set_positions(positions: List[GridPosition], session: ConfiguratorSession = Depends(get_session)):
    updated = session.set_positions(positions)
    return {"updated": updated}


# ---------------------------------------------------------------------------
# DISPLAY SETTINGS
# ---------------------------------------------------------------------------

@router.put("/sessions/{session_id}/theme")
async def set_theme(theme: Theme, session: ConfiguratorSession = Depends(get_session)):
    session.set_theme(theme)
    return session.config.theme.model_dump()


@router.patch("/sessions/{session_id}/settings")
async def update_settings(request: SettingsUpdate, session: ConfiguratorSession = Depends(get_session)):
    # Keep nested models (logo) as objects
    changes = {name: getattr(request, name) for name in request.model_fields_set}
    config = session.update_settings(**changes)
    return config.to_wire()


@router.post("/sessions/{session_id}/presets/{preset_id}")
async def load_preset(preset_id: str, session: ConfiguratorSession = Depends(get_session)):
    if not await session.load_preset(preset_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preset not found")
    return session.to_dict()


@router.post("/sessions/{session_id}/save", response_model=SaveResponse)
async def save_session(session: ConfiguratorSession = Depends(get_session)):
    """
    Flush pending grid changes and return the token and share URL.

    Widgets outside the visible grid stay in the token but are left out of
    the share URL; their IDs are listed in hidden_widgets.
    """
    token = session.save()
    hidden = [i.id for i in session.config.layout if not is_in_bounds(i)]
    return SaveResponse(
        token=token,
        share_url=session.share_url(settings.PUBLIC_BASE_URL),
        widgets=len(session.config.layout),
        hidden_widgets=hidden,
    )


# ---------------------------------------------------------------------------
# EDITOR DIALOG
# ---------------------------------------------------------------------------

@router.post("/sessions/{session_id}/editor")
async def open_editor(request: EditorOpen, session: ConfiguratorSession = Depends(get_session)):
    try:
        handle = await session.editor.open(request.instance_id)
    except KeyError:
        raise _instance_not_found()
    return handle.to_dict()


@router.post("/sessions/{session_id}/editor/submit")
async def submit_editor(request: EditorSubmit, session: ConfiguratorSession = Depends(get_session)):
    try:
        patch = session.editor.submit(request.values)
    except EditorClosed as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return {"patch": patch, "editor": session.editor.current.to_dict()}


@router.post("/sessions/{session_id}/editor/capability")
async def use_editor_capability(request: CapabilityInput, session: ConfiguratorSession = Depends(get_session)):
    try:
        patch = session.editor.apply_capability(request.params)
    except EditorClosed as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return {"patch": patch}


@router.delete("/sessions/{session_id}/editor", status_code=status.HTTP_204_NO_CONTENT)
async def close_editor(session: ConfiguratorSession = Depends(get_session)):
    await session.editor.close()

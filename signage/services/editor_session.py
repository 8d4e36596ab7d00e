"""
Editor Session - lifecycle of the widget edit dialog.

One EditorSession belongs to one configurator session and shows at most one
editor at a time. Opening an editor:

1. Closes the editor that was open before (tearing down its capability)
2. Builds the widget's EditorForm with on_change bound to
   LayoutModel.update_instance_config for that instance
3. If the widget declares a capability_loader (e.g. the air-quality map
   picker), awaits it with a timeout. A failed or slow load degrades the
   editor to a "capability unavailable" state; the form still works.

Every open gets its own handle with a `cancelled` flag. Closing (or opening
another widget) sets the flag, and every deferred update checks it first,
so a load that finishes after its dialog closed is torn down instead of
leaking into the next dialog.

Usage:
    editor = EditorSession(layout)
    view = await editor.open("air-quality-1a2b3c4d")
    editor.submit({"locationName": "Library"})
    editor.apply_capability({"latitude": 53.9, "longitude": -122.8})
    await editor.close()
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from signage.core.config import settings
from signage.widgets.editor import EditorForm
from signage.widgets.layout import LayoutModel


logger = logging.getLogger("signage.services.editor_session")

NO_OPTIONS_MESSAGE = "No configuration options available"


class EditorState(str, Enum):
    """State of the currently open editor."""
    LOADING = "loading"      # Capability still loading
    READY = "ready"          # Form (and capability, if any) usable
    DEGRADED = "degraded"    # Capability failed to load; form still usable
    READ_ONLY = "read_only"  # Widget has no editor or is not registered


class EditorClosed(Exception):
    """Raised when acting on an editor that is no longer open."""
    pass


@dataclass
class OpenEditor:
    """Handle for one opened editor dialog."""
    instance_id: str
    widget_type: str
    state: EditorState
    form: Optional[EditorForm] = None
    capability: Any = None
    error: Optional[str] = None
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "instance_id": self.instance_id,
            "type": self.widget_type,
            "state": self.state.value,
        }
        if self.form is not None:
            data["form"] = self.form.to_dict()
        else:
            data["message"] = NO_OPTIONS_MESSAGE
        if self.capability is not None and hasattr(self.capability, "to_dict"):
            data["capability"] = self.capability.to_dict()
        if self.error:
            data["error"] = self.error
        return data


class EditorSession:
    """Opens, drives and tears down widget editors for one layout."""

    def __init__(self, layout: LayoutModel, load_timeout: Optional[float] = None):
        self._layout = layout
        self._load_timeout = settings.EDITOR_LOAD_TIMEOUT_SECONDS if load_timeout is None else load_timeout
        self._current: Optional[OpenEditor] = None

    @property
    def current(self) -> Optional[OpenEditor]:
        return self._current

    async def open(self, instance_id: str) -> OpenEditor:
        """
        Open the editor for an instance, closing any previous one.

        Raises:
            KeyError: If the instance is not in the layout
        """
        instance = self._layout.get_instance(instance_id)
        if instance is None:
            raise KeyError(instance_id)

        await self.close()

        descriptor = self._layout.registry.get(instance.type)
        if descriptor is None or descriptor.editor is None:
            handle = OpenEditor(instance_id, instance.type, EditorState.READ_ONLY)
            self._current = handle
            return handle

        handle = OpenEditor(instance_id, instance.type, EditorState.READY)
        handle.form = descriptor.editor(dict(instance.config), self._change_callback(handle))
        self._current = handle

        if descriptor.capability_loader is not None:
            handle.state = EditorState.LOADING
            await self._load_capability(handle, descriptor.capability_loader)
        return handle

    async def close(self) -> None:
        """Close the open editor, if any, and release its capability."""
        handle = self._current
        if handle is None:
            return
        self._current = None
        handle.cancelled = True
        await self._teardown(handle)

    def submit(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit form values of the open editor.

        Returns:
            The patch applied to the instance config

        Raises:
            EditorClosed: If no editable form is open
            ValueError: If a value does not fit its field
        """
        handle = self._require_open()
        if handle.form is None:
            raise EditorClosed(NO_OPTIONS_MESSAGE)
        return handle.form.submit(values)

    def apply_capability(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Feed an interaction with the loaded capability back into the config.

        Raises:
            EditorClosed: If no editor is open or its capability is not loaded
        """
        handle = self._require_open()
        if handle.capability is None or handle.state != EditorState.READY:
            raise EditorClosed(f"Editor capability is {handle.state.value}")
        patch = handle.capability.apply(**params)
        handle.form.submit(patch)
        return patch

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _require_open(self) -> OpenEditor:
        if self._current is None:
            raise EditorClosed("No editor is open")
        return self._current

    def _change_callback(self, handle: OpenEditor):
        def on_change(patch: Dict[str, Any]) -> None:
            if handle.cancelled:
                logger.info(f"Dropping change for closed editor of {handle.instance_id}")
                return
            self._layout.update_instance_config(handle.instance_id, patch)
        return on_change

    async def _load_capability(self, handle: OpenEditor, loader) -> None:
        try:
            capability = await asyncio.wait_for(loader(), timeout=self._load_timeout)
        except asyncio.TimeoutError:
            if not handle.cancelled:
                handle.state = EditorState.DEGRADED
                handle.error = f"Capability did not load within {self._load_timeout}s"
            logger.warning(f"Editor capability for {handle.instance_id} timed out")
            return
        except asyncio.CancelledError:
            handle.cancelled = True
            logger.info(f"Editor capability load for {handle.instance_id} cancelled")
            raise
        except Exception as e:
            if not handle.cancelled:
                handle.state = EditorState.DEGRADED
                handle.error = "Capability failed to load"
            logger.warning(f"Editor capability for {handle.instance_id} failed to load: {e}")
            return

        if handle.cancelled:
            logger.info(f"Editor for {handle.instance_id} closed during load, releasing capability")
            await _release(capability)
            return

        handle.capability = capability
        handle.state = EditorState.READY

    async def _teardown(self, handle: OpenEditor) -> None:
        capability, handle.capability = handle.capability, None
        if capability is not None:
            await _release(capability)


async def _release(capability: Any) -> None:
    close = getattr(capability, "close", None)
    if close is None:
        return
    try:
        result = close()
        if asyncio.iscoroutine(result):
            await result
    except Exception as e:
        logger.error(f"Failed to release editor capability: {e}")

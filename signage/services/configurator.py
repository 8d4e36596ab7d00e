"""
Configurator Service - in-memory configurator sessions.

A configurator session is one operator editing one display: a LayoutModel,
the GridEngine mirroring its geometry, and the EditorSession for the edit
dialog. The grid engine's debounced "layout changed" emission is wired to
LayoutModel.set_positions, so the model converges on the grid after every
quiet period; save() flushes any pending emission first.

Storage:
- Sessions live in an OrderedDict keyed by ID
- Singleton store instance
- Oldest session evicted (and closed) when the store is full

Usage:
    from signage.services.configurator import session_store

    session = await session_store.create()
    clock = session.add_widget("clock")
    session.begin_gesture(clock.id, GestureKind.DRAG)
    session.move(clock.id, 6, 2)
    session.end_gesture()
    token = session.save()
"""

import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from signage.core.config import settings
from signage.services.editor_session import EditorSession
from signage.widgets.codec import build_share_url, encode_config
from signage.widgets.defaults import get_preset
from signage.widgets.grid import GestureKind, GridEngine, Scheduler
from signage.widgets.layout import LayoutModel
from signage.widgets.registry import WidgetRegistry
from signage.widgets.schemas import DisplayConfig, GridPosition, Theme, WidgetInstance


logger = logging.getLogger("signage.services.configurator")


class ConfiguratorSession:
    """One operator's editing state for one display."""

    def __init__(
        self,
        session_id: str,
        config: Optional[DisplayConfig] = None,
        registry: Optional[WidgetRegistry] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.id = session_id
        self.created_at = datetime.now(timezone.utc)
        self.layout = LayoutModel(config, registry)
        self.grid = GridEngine(
            rows=self.layout.row_count,
            on_layout_change=self._on_layout_change,
            scheduler=scheduler,
        )
        self.editor = EditorSession(self.layout)
        self._sync_grid()

    @property
    def config(self) -> DisplayConfig:
        return self.layout.config

    # -------------------------------------------------------------------------
    # WIDGETS
    # -------------------------------------------------------------------------

    def add_widget(self, widget_type: str, position: Optional[Tuple[int, int]] = None) -> WidgetInstance:
        """Create an instance (raises UnknownWidgetType) and put it on the grid."""
        self.grid.flush()
        instance = self.layout.create_instance(widget_type, position)
        self._sync_grid()
        return instance

    async def remove_widget(self, instance_id: str) -> bool:
        self.grid.flush()
        current = self.editor.current
        if current is not None and current.instance_id == instance_id:
            await self.editor.close()
        removed = self.layout.remove_instance(instance_id)
        self._sync_grid()
        return removed

    def update_widget_config(self, instance_id: str, patch: Dict[str, Any]) -> Optional[WidgetInstance]:
        return self.layout.update_instance_config(instance_id, patch)

    def set_coming_soon(self, instance_id: str, coming_soon: bool) -> Optional[WidgetInstance]:
        return self.layout.set_coming_soon(instance_id, coming_soon)

    # -------------------------------------------------------------------------
    # GRID GESTURES
    # -------------------------------------------------------------------------

    def begin_gesture(self, instance_id: str, kind: GestureKind) -> None:
        self.grid.begin_gesture(instance_id, kind)

    def move(self, instance_id: str, x: int, y: int) -> bool:
        return self.grid.move(instance_id, x, y)

    def resize(self, instance_id: str, w: int, h: int) -> bool:
        return self.grid.resize(instance_id, w, h)

    def end_gesture(self) -> None:
        self.grid.end_gesture()

    def set_positions(self, positions: List[GridPosition]) -> int:
        """Apply positions reported by a client-side grid directly."""
        self.grid.flush()
        updated = self.layout.set_positions(positions)
        self._sync_grid()
        return updated

    # -------------------------------------------------------------------------
    # DISPLAY SETTINGS
    # -------------------------------------------------------------------------

    def set_theme(self, theme: Theme) -> None:
        self.layout.set_theme(theme)

    def update_settings(self, ticker_enabled: Optional[bool] = None, **changes: Any) -> DisplayConfig:
        self.grid.flush()
        if ticker_enabled is not None:
            self.layout.set_ticker_enabled(ticker_enabled)
        self.layout.update_settings(**changes)
        self._sync_grid()
        return self.layout.config

    async def load_preset(self, preset_id: str) -> bool:
        """Replace the whole config with a preset. Returns False if unknown."""
        preset = get_preset(preset_id)
        if preset is None:
            return False
        await self.editor.close()
        self.grid.close()
        self.layout.replace(preset.config)
        self._sync_grid()
        logger.info(f"Session {self.id} loaded preset '{preset_id}'")
        return True

    async def clear(self) -> None:
        await self.editor.close()
        self.grid.close()
        self.layout.clear()
        self._sync_grid()

    # -------------------------------------------------------------------------
    # SAVE / SHARE
    # -------------------------------------------------------------------------

    def save(self) -> str:
        """Flush pending grid changes and return the config token."""
        self.grid.flush()
        self.layout.set_positions(self.grid.get_current_layout())
        return encode_config(self.layout.config)

    def share_url(self, base_url: Optional[str] = None) -> str:
        self.grid.flush()
        return build_share_url(self.layout.config, base_url or settings.PUBLIC_BASE_URL)

    async def close(self) -> None:
        await self.editor.close()
        self.grid.close()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "row_count": self.layout.row_count,
            "grid_state": self.grid.state.value,
            "pending_change": self.grid.has_pending_change,
            "config": self.layout.config.to_wire(),
        }

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _sync_grid(self) -> None:
        self.grid.rows = self.layout.row_count
        self.grid.load(self.layout.grid_nodes())

    def _on_layout_change(self, positions: List[GridPosition]) -> None:
        updated = self.layout.set_positions(positions)
        logger.debug(f"Session {self.id}: synced {updated} widget position(s)")


class SessionStore:
    """
    In-memory store of configurator sessions.

    Sessions are not persisted; the token returned by save() is the only
    durable form of a layout.
    """

    def __init__(self, max_sessions: Optional[int] = None):
        self._sessions: "OrderedDict[str, ConfiguratorSession]" = OrderedDict()
        self._max_sessions = settings.MAX_SESSIONS if max_sessions is None else max_sessions

    async def create(
        self,
        config: Optional[DisplayConfig] = None,
        registry: Optional[WidgetRegistry] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> ConfiguratorSession:
        while len(self._sessions) >= self._max_sessions:
            evicted_id, evicted = self._sessions.popitem(last=False)
            await evicted.close()
            logger.info(f"Evicted configurator session {evicted_id}")

        session = ConfiguratorSession(uuid4().hex, config, registry, scheduler)
        self._sessions[session.id] = session
        logger.info(f"Created configurator session {session.id}")
        return session

    def get(self, session_id: str) -> Optional[ConfiguratorSession]:
        return self._sessions.get(session_id)

    async def remove(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.close()
        return True

    def clear_all(self) -> None:
        """Drop all sessions. Use for testing only."""
        for session in self._sessions.values():
            session.grid.close()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


# Singleton instance
session_store = SessionStore()

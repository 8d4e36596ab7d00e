"""
Grid Interaction Engine - drag/resize handling for the configurator grid.

The engine keeps the authoritative geometry of every grid node while the
operator drags and resizes widgets. It follows "floating" placement:
widgets never compact upwards to fill freed space, and a move only pushes
the neighbours it actually overlaps (downwards, as few as needed). Widgets
the operator did not touch are never deleted or resized.

A single drag produces a burst of intermediate geometry updates. Those are
coalesced by a Debouncer: once gestures have been quiet for the debounce
interval, the full current node set is emitted exactly once through
`on_layout_change`. get_current_layout() returns the same data
synchronously at any time (e.g. for an explicit save).

State machine:
==============
    IDLE --begin_gesture(drag)--> DRAGGING --end_gesture--> IDLE
    IDLE --begin_gesture(resize)--> RESIZING --end_gesture--> IDLE

Row bounds are soft. The nominal row count only describes the visible area;
pushed widgets may go below it, up to `row_overflow` extra rows. A move that
would need more room than that is reverted instead of looping.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, Generic, Iterable, List, Optional, Protocol, TypeVar

from signage.core.config import settings
from signage.widgets.exceptions import CollisionUnresolvable
from signage.widgets.schemas import GRID_COLUMNS, GRID_ROWS, GridNode, GridPosition


logger = logging.getLogger("signage.widgets.grid")

T = TypeVar("T")


# ---------------------------------------------------------------------------
# SCHEDULING
# ---------------------------------------------------------------------------

class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback later and cancel it."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer(Generic[T]):
    """
    Hold the latest value and deliver it once after a quiet period.

    Every trigger() cancels the pending timer and schedules a new one, so a
    burst of triggers closer together than `delay` results in one callback
    carrying the last value.
    """

    def __init__(self, callback: Callable[[T], None], delay: float, scheduler: Optional[Scheduler] = None):
        self._callback = callback
        self._delay = delay
        self._scheduler = scheduler or AsyncioScheduler()
        self._handle: Optional[TimerHandle] = None
        self._value: Optional[T] = None
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def trigger(self, value: T) -> None:
        self._value = value
        self._pending = True
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def flush(self) -> bool:
        """Deliver the pending value now. Returns False if nothing was pending."""
        if not self._pending:
            return False
        if self._handle is not None:
            self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._value = None
        self._pending = False

    def _fire(self) -> None:
        self._handle = None
        if not self._pending:
            return
        value = self._value
        self._value = None
        self._pending = False
        self._callback(value)


# ---------------------------------------------------------------------------
# GRID ENGINE
# ---------------------------------------------------------------------------

class GestureKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


class EngineState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


LayoutChangeCallback = Callable[[List[GridPosition]], None]


class GridEngine:
    """
    Authoritative node geometry for one configurator grid.

    Args:
        columns: Grid width in cells
        rows: Nominal visible rows (a hint, not a ceiling)
        row_overflow: Extra rows allowed when pushing widgets down
        on_layout_change: Receives the full node set after each quiet period
        debounce_ms: Quiet period length
        scheduler: Timer source for the debouncer (asyncio loop by default)
    """

    def __init__(
        self,
        columns: int = GRID_COLUMNS,
        rows: int = GRID_ROWS,
        row_overflow: Optional[int] = None,
        on_layout_change: Optional[LayoutChangeCallback] = None,
        debounce_ms: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.columns = columns
        self.rows = rows
        self.row_overflow = settings.GRID_ROW_OVERFLOW if row_overflow is None else row_overflow
        self._nodes: Dict[str, GridNode] = {}
        self._state = EngineState.IDLE
        self._active_id: Optional[str] = None
        self._on_layout_change = on_layout_change
        delay_ms = settings.LAYOUT_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self._debouncer: Debouncer[List[GridPosition]] = Debouncer(self._emit, delay_ms / 1000, scheduler)

    # -------------------------------------------------------------------------
    # STATE
    # -------------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def max_row(self) -> int:
        return self.rows + self.row_overflow

    @property
    def has_pending_change(self) -> bool:
        return self._debouncer.pending

    def get_node(self, node_id: str) -> Optional[GridNode]:
        return self._nodes.get(node_id)

    def get_current_layout(self) -> List[GridPosition]:
        """Current geometry of every node, in insertion order."""
        return [GridPosition(id=n.id, x=n.x, y=n.y, w=n.w, h=n.h) for n in self._nodes.values()]

    # -------------------------------------------------------------------------
    # SYNC FROM THE LAYOUT MODEL
    # -------------------------------------------------------------------------

    def load(self, nodes: Iterable[GridNode]) -> None:
        """
        Make the engine's node set match the given nodes.

        Nodes not in the input are removed, new ones are added, existing ones
        take the given geometry and bounds. Syncing resolves no collisions
        and emits nothing: the caller already holds this state.
        """
        incoming = {n.id: n.model_copy() for n in nodes}
        for node_id in list(self._nodes):
            if node_id not in incoming:
                del self._nodes[node_id]
        for node_id, node in incoming.items():
            self._nodes[node_id] = node

    # -------------------------------------------------------------------------
    # GESTURES
    # -------------------------------------------------------------------------

    def begin_gesture(self, node_id: str, kind: GestureKind) -> None:
        """
        Start a drag or resize on one node.

        Raises:
            KeyError: If the node is not on the grid
        """
        if node_id not in self._nodes:
            raise KeyError(node_id)
        self._active_id = node_id
        self._state = EngineState.DRAGGING if kind == GestureKind.DRAG else EngineState.RESIZING

    def move(self, node_id: str, x: int, y: int) -> bool:
        """
        Move a node, pushing overlapped neighbours down.

        Returns:
            False if the move was reverted because it could not be resolved
        """
        node = self._require(node_id)
        return self._apply(node_id, x=x, y=y, w=node.w, h=node.h)

    def resize(self, node_id: str, w: int, h: int) -> bool:
        """Resize a node within its bounds, pushing overlapped neighbours down."""
        node = self._require(node_id)
        return self._apply(node_id, x=node.x, y=node.y, w=w, h=h)

    def end_gesture(self) -> None:
        """Finish the current gesture and schedule the change emission."""
        self._state = EngineState.IDLE
        self._active_id = None
        self._debouncer.trigger(self.get_current_layout())

    def flush(self) -> bool:
        """Emit a pending change immediately."""
        return self._debouncer.flush()

    def close(self) -> None:
        """Drop any pending emission (the grid is going away)."""
        self._debouncer.cancel()

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _require(self, node_id: str) -> GridNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise KeyError(node_id)
        return node

    def _clamp(self, node: GridNode, x: int, y: int, w: int, h: int) -> GridNode:
        max_w = min(node.max_w or self.columns, self.columns)
        w = max(node.min_w or 1, min(w, max_w))
        h = max(node.min_h or 1, min(h, node.max_h or self.max_row))
        x = max(0, min(x, self.columns - w))
        y = max(0, min(y, self.max_row - h))
        return node.model_copy(update={"x": x, "y": y, "w": w, "h": h})

    def _apply(self, node_id: str, x: int, y: int, w: int, h: int) -> bool:
        snapshot = {nid: n.model_copy() for nid, n in self._nodes.items()}
        target = self._clamp(self._nodes[node_id], x, y, w, h)
        self._nodes[node_id] = target
        try:
            self._fix_collisions(target, depth=0)
        except CollisionUnresolvable as e:
            logger.warning(f"Reverting {self._state.value} of {node_id}: {e}")
            self._nodes = snapshot
            return False

        self._debouncer.trigger(self.get_current_layout())
        return True

    def _fix_collisions(self, moved: GridNode, depth: int) -> None:
        if depth > len(self._nodes):
            raise CollisionUnresolvable("collision chain longer than the node count", moved.id)

        colliding = sorted(
            (n for n in self._nodes.values() if n.id != moved.id and _overlaps(moved, n)),
            key=lambda n: (n.y, n.x),
        )
        for node_id in [n.id for n in colliding]:
            # An earlier push in this loop may already have moved it clear
            other = self._nodes[node_id]
            if not _overlaps(moved, other):
                continue
            new_y = moved.y + moved.h
            if new_y + other.h > self.max_row:
                raise CollisionUnresolvable(
                    f"pushing {other.id} to row {new_y} exceeds {self.max_row} rows", other.id
                )
            pushed = other.model_copy(update={"y": new_y})
            self._nodes[other.id] = pushed
            self._fix_collisions(pushed, depth + 1)

    def _emit(self, layout: List[GridPosition]) -> None:
        if self._on_layout_change is not None:
            self._on_layout_change(layout)


def _overlaps(a: GridNode, b: GridNode) -> bool:
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h

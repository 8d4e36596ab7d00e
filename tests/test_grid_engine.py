"""
Tests for the Grid Interaction Engine.

This module tests:
- The Debouncer (hold latest value, flush after a quiet period)
- Debounce law: N gesture events in one window -> 1 emission of the full set
- Floating collision resolution (push down, never compact)
- Size/position clamping against node bounds
- Revert when the row allowance is exhausted
- Sync from the layout model without emissions
"""

import asyncio

import pytest

from signage.widgets.grid import Debouncer, EngineState, GestureKind, GridEngine
from signage.widgets.schemas import GridNode


def _engine(scheduler, emitted, **kwargs) -> GridEngine:
    kwargs.setdefault("row_overflow", 32)
    return GridEngine(on_layout_change=emitted.append, debounce_ms=100, scheduler=scheduler, **kwargs)


def _geometry(layout):
    return {p.id: (p.x, p.y, p.w, p.h) for p in layout}


# ---------------------------------------------------------------------------
# DEBOUNCER TESTS
# ---------------------------------------------------------------------------

class TestDebouncer:
    """Tests for the generic coalescing operator."""

    def test_burst_delivers_last_value_once(self, scheduler):
        received = []
        debouncer = Debouncer(received.append, 0.1, scheduler)

        for value in range(5):
            debouncer.trigger(value)
            scheduler.advance(0.05)

        assert received == []
        scheduler.advance(0.1)
        assert received == [4]
        assert not debouncer.pending

    def test_separate_quiet_periods_deliver_separately(self, scheduler):
        received = []
        debouncer = Debouncer(received.append, 0.1, scheduler)

        debouncer.trigger("a")
        scheduler.advance(0.2)
        debouncer.trigger("b")
        scheduler.advance(0.2)

        assert received == ["a", "b"]

    def test_flush_delivers_immediately(self, scheduler):
        received = []
        debouncer = Debouncer(received.append, 0.1, scheduler)

        debouncer.trigger("x")
        assert debouncer.flush() is True
        scheduler.advance(1)

        assert received == ["x"]
        assert debouncer.flush() is False

    def test_cancel_drops_value(self, scheduler):
        received = []
        debouncer = Debouncer(received.append, 0.1, scheduler)

        debouncer.trigger("x")
        debouncer.cancel()
        scheduler.advance(1)

        assert received == []

    @pytest.mark.asyncio
    async def test_asyncio_scheduler(self):
        received = []
        debouncer = Debouncer(received.append, 0.02)

        for value in range(3):
            debouncer.trigger(value)
        await asyncio.sleep(0.1)

        assert received == [2]


# ---------------------------------------------------------------------------
# DEBOUNCE LAW TESTS
# ---------------------------------------------------------------------------

class TestLayoutChangeEmission:
    """Exactly one emission per quiet period, carrying every node."""

    def test_drag_burst_emits_once_with_full_latest_set(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted)
        engine.load([
            GridNode(id="a", x=0, y=0, w=2, h=1),
            GridNode(id="b", x=6, y=4, w=3, h=2),
        ])

        engine.begin_gesture("a", GestureKind.DRAG)
        for step in range(1, 6):
            engine.move("a", step, 0)
            scheduler.advance(0.01)
        engine.end_gesture()
        scheduler.advance(0.05)

        assert emitted == []

        scheduler.advance(0.2)

        assert len(emitted) == 1
        assert _geometry(emitted[0]) == {"a": (5, 0, 2, 1), "b": (6, 4, 3, 2)}

    def test_two_gestures_two_emissions(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted)
        engine.load([GridNode(id="a", x=0, y=0, w=2, h=1)])

        for x in (3, 7):
            engine.begin_gesture("a", GestureKind.DRAG)
            engine.move("a", x, 0)
            engine.end_gesture()
            scheduler.advance(0.2)

        assert [p[0].x for p in emitted] == [3, 7]

    def test_current_layout_available_before_emission(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted)
        engine.load([GridNode(id="a", x=0, y=0, w=2, h=1)])

        engine.move("a", 4, 3)

        assert _geometry(engine.get_current_layout()) == {"a": (4, 3, 2, 1)}
        assert emitted == []
        assert engine.has_pending_change

    def test_flush_emits_pending_change(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted)
        engine.load([GridNode(id="a", x=0, y=0, w=2, h=1)])
        engine.move("a", 1, 1)

        engine.flush()
        scheduler.advance(1)

        assert len(emitted) == 1

    def test_load_emits_nothing(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted)

        engine.load([GridNode(id="a", x=0, y=0, w=2, h=1), GridNode(id="b", x=0, y=0, w=2, h=1)])
        engine.load([GridNode(id="b", x=1, y=1, w=2, h=1)])
        scheduler.advance(1)

        assert emitted == []
        assert _geometry(engine.get_current_layout()) == {"b": (1, 1, 2, 1)}


# ---------------------------------------------------------------------------
# STATE MACHINE TESTS
# ---------------------------------------------------------------------------

class TestGestureState:
    """Idle -> Dragging/Resizing -> Idle."""

    def test_transitions(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([GridNode(id="a", x=0, y=0, w=2, h=1)])

        assert engine.state == EngineState.IDLE
        engine.begin_gesture("a", GestureKind.DRAG)
        assert engine.state == EngineState.DRAGGING
        engine.end_gesture()
        assert engine.state == EngineState.IDLE
        engine.begin_gesture("a", GestureKind.RESIZE)
        assert engine.state == EngineState.RESIZING

    def test_unknown_node(self, scheduler):
        engine = _engine(scheduler, [])
        with pytest.raises(KeyError):
            engine.begin_gesture("ghost", GestureKind.DRAG)
        with pytest.raises(KeyError):
            engine.move("ghost", 0, 0)


# ---------------------------------------------------------------------------
# COLLISION TESTS
# ---------------------------------------------------------------------------

class TestCollisions:
    """Floating collision resolution."""

    def test_move_pushes_overlapped_neighbours_down(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([
            GridNode(id="a", x=0, y=0, w=4, h=2),
            GridNode(id="b", x=0, y=2, w=4, h=2),
            GridNode(id="c", x=0, y=4, w=4, h=1),
            GridNode(id="far", x=8, y=0, w=2, h=2),
        ])

        assert engine.move("a", 0, 1) is True

        assert _geometry(engine.get_current_layout()) == {
            "a": (0, 1, 4, 2),
            "b": (0, 3, 4, 2),
            "c": (0, 5, 4, 1),
            "far": (8, 0, 2, 2),
        }

    def test_vacated_space_is_not_compacted(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([
            GridNode(id="a", x=0, y=0, w=4, h=2),
            GridNode(id="b", x=0, y=2, w=4, h=2),
        ])

        engine.move("a", 8, 0)

        assert _geometry(engine.get_current_layout())["b"] == (0, 2, 4, 2)

    def test_resize_pushes_neighbour(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([
            GridNode(id="a", x=0, y=0, w=4, h=2),
            GridNode(id="b", x=0, y=2, w=4, h=2),
        ])

        engine.resize("a", 4, 3)

        assert _geometry(engine.get_current_layout())["b"] == (0, 3, 4, 2)

    def test_widgets_may_extend_below_visible_rows(self, scheduler):
        engine = _engine(scheduler, [], rows=8, row_overflow=4)
        engine.load([
            GridNode(id="a", x=0, y=0, w=4, h=4),
            GridNode(id="b", x=0, y=4, w=4, h=4),
        ])

        assert engine.move("a", 0, 2) is True
        assert _geometry(engine.get_current_layout())["b"] == (0, 6, 4, 4)

    def test_unresolvable_move_is_reverted(self, scheduler):
        emitted = []
        engine = _engine(scheduler, emitted, rows=4, row_overflow=0)
        engine.load([
            GridNode(id="a", x=0, y=0, w=4, h=2),
            GridNode(id="b", x=0, y=2, w=4, h=2),
        ])

        assert engine.move("a", 0, 1) is False

        assert _geometry(engine.get_current_layout()) == {"a": (0, 0, 4, 2), "b": (0, 2, 4, 2)}
        scheduler.advance(1)
        assert emitted == []


# ---------------------------------------------------------------------------
# CLAMPING TESTS
# ---------------------------------------------------------------------------

class TestClamping:
    """Geometry stays inside the columns and the node's size bounds."""

    def test_move_clamped_to_columns(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([GridNode(id="a", x=0, y=0, w=4, h=1)])

        engine.move("a", 11, -3)

        assert _geometry(engine.get_current_layout())["a"] == (8, 0, 4, 1)

    def test_resize_respects_bounds(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([GridNode(id="w", x=0, y=0, w=3, h=2, min_w=2, min_h=2, max_w=4, max_h=3)])

        engine.resize("w", 10, 10)
        assert _geometry(engine.get_current_layout())["w"] == (0, 0, 4, 3)

        engine.resize("w", 1, 1)
        assert _geometry(engine.get_current_layout())["w"] == (0, 0, 2, 2)

    def test_resize_at_right_edge_shifts_left(self, scheduler):
        engine = _engine(scheduler, [])
        engine.load([GridNode(id="a", x=10, y=0, w=2, h=1)])

        engine.resize("a", 6, 1)

        assert _geometry(engine.get_current_layout())["a"] == (6, 0, 6, 1)

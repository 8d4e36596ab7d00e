"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Widget registry populated with the built-in widgets
- Layout model bound to that registry
- Manual scheduler (deterministic debounce timers)
- Test client (FastAPI TestClient)
"""

from typing import Callable, Generator, List

import pytest
from fastapi.testclient import TestClient
from lzstring import LZString

from signage.main import app
from signage.services.configurator import session_store
from signage.widgets.builtin import create_default_registry
from signage.widgets.layout import LayoutModel
from signage.widgets.registry import WidgetRegistry
from signage.widgets.schemas import DisplayConfig, Theme, WidgetInstance


# ---------------------------------------------------------------------------
# MANUAL SCHEDULER
# ---------------------------------------------------------------------------
# Stands in for the event loop's call_later: time only moves when a test
# calls advance(), so debounce behaviour is exact and instant.

class ManualTimer:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    def __init__(self):
        self.now = 0.0
        self.timers: List[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [t for t in self.timers if not t.cancelled and t.when <= self.now]
        self.timers = [t for t in self.timers if not t.cancelled and t.when > self.now]
        for timer in sorted(due, key=lambda t: t.when):
            timer.callback()

    @property
    def pending(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


# ---------------------------------------------------------------------------
# ENGINE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> WidgetRegistry:
    """A fresh registry with every built-in widget registered."""
    return create_default_registry()


@pytest.fixture
def layout(registry: WidgetRegistry) -> LayoutModel:
    """An empty layout bound to the test registry."""
    return LayoutModel(registry=registry)


@pytest.fixture
def sample_config() -> DisplayConfig:
    """
    A config with a clock, an image and a ticker.

    Returns:
        DisplayConfig with tickerEnabled and a custom theme
    """
    return DisplayConfig(
        layout=[
            WidgetInstance(id="clock-1", type="clock", x=9, y=0, w=3, h=1,
                           config={"showSeconds": True, "showDate": True, "format24h": False}),
            WidgetInstance(id="image-1", type="image", x=0, y=0, w=4, h=3,
                           config={"url": "https://example.edu/a.png", "alt": "Quad", "fit": "contain"}),
            WidgetInstance(id="news-ticker-1", type="news-ticker", x=0, y=7, w=12, h=1,
                           config={"speed": 40, "label": "News"}),
        ],
        theme=Theme(primary="#1a1a2e", accent="#e94560", background="#16213e"),
        school_name="North Campus",
        ticker_enabled=True,
    )


# ---------------------------------------------------------------------------
# TOKEN FIXTURES
# ---------------------------------------------------------------------------

def lz_token(text: str) -> str:
    """Compress raw document text the way display links are encoded."""
    return LZString().compressToEncodedURIComponent(text)


@pytest.fixture(scope="session")
def deeply_nested_token() -> str:
    """A short token whose JSON nests arrays far past the interpreter's recursion limit."""
    return lz_token('{"layout":' + "[" * 200000 + "]" * 200000 + "}")


@pytest.fixture
def lone_surrogate_token() -> str:
    """A token whose JSON escapes decode to text that cannot be written as UTF-8."""
    return lz_token('{"schoolName":"\\ud800 Campus","layout":[]}')


# ---------------------------------------------------------------------------
# CLIENT FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client.

    The context manager keeps one event loop alive for the whole test, so
    debounce timers scheduled by one request can fire before the next.
    Configurator sessions are dropped afterwards.
    """
    with TestClient(app) as test_client:
        yield test_client
    session_store.clear_all()

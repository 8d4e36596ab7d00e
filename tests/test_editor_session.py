"""
Tests for the Editor Session.

This module tests:
- Opening editors and submitting form values
- Read-only editors for unknown or option-less widgets
- Async capability loading (success, timeout, failure)
- Teardown of capabilities on close and when a load outlives its dialog
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from signage.services.editor_session import EditorClosed, EditorSession, EditorState, NO_OPTIONS_MESSAGE
from signage.widgets.builtin.air_quality import MapPicker
from signage.widgets.editor import EditorField, schema_editor
from signage.widgets.registry import WidgetDescriptor
from signage.widgets.schemas import DisplayConfig, WidgetInstance


class FakeCapability:
    def __init__(self):
        self.closed = False

    def apply(self, **params):
        return dict(params)

    def close(self):
        self.closed = True


def _register_loader_widget(registry, loader):
    registry.register(WidgetDescriptor(
        type="with-loader",
        name="With Loader",
        description="",
        icon="x",
        min_w=1,
        min_h=1,
        default_w=1,
        default_h=1,
        render=lambda config, theme: "",
        editor=schema_editor([EditorField(name="title", label="Title")]),
        default_props={"title": "Hello"},
        capability_loader=loader,
    ))


# ---------------------------------------------------------------------------
# OPEN / SUBMIT TESTS
# ---------------------------------------------------------------------------

class TestOpenAndSubmit:
    """Tests for opening editors and submitting values."""

    @pytest.mark.asyncio
    async def test_open_shows_current_values(self, layout):
        image = layout.create_instance("image")
        editor = EditorSession(layout)

        handle = await editor.open(image.id)

        assert handle.state == EditorState.READY
        assert handle.form.values == {"url": "", "alt": "Image", "fit": "cover"}
        assert editor.current is handle

    @pytest.mark.asyncio
    async def test_submit_changes_only_that_field(self, layout):
        image = layout.create_instance("image")
        editor = EditorSession(layout)
        await editor.open(image.id)

        patch = editor.submit({"url": "https://example.edu/quad.png"})

        assert patch == {"url": "https://example.edu/quad.png"}
        assert image.config == {"url": "https://example.edu/quad.png", "alt": "Image", "fit": "cover"}

    @pytest.mark.asyncio
    async def test_invalid_value_rejected(self, layout):
        image = layout.create_instance("image")
        editor = EditorSession(layout)
        await editor.open(image.id)

        with pytest.raises(ValueError):
            editor.submit({"fit": "stretch"})

        assert image.config["fit"] == "cover"

    @pytest.mark.asyncio
    async def test_open_missing_instance(self, layout):
        with pytest.raises(KeyError):
            await EditorSession(layout).open("ghost")

    @pytest.mark.asyncio
    async def test_unknown_type_is_read_only(self, layout):
        layout.replace(DisplayConfig(layout=[WidgetInstance(id="h", type="hologram")]))
        editor = EditorSession(layout)

        handle = await editor.open("h")

        assert handle.state == EditorState.READ_ONLY
        assert handle.to_dict()["message"] == NO_OPTIONS_MESSAGE
        with pytest.raises(EditorClosed):
            editor.submit({"anything": 1})

    @pytest.mark.asyncio
    async def test_submit_without_open_editor(self, layout):
        with pytest.raises(EditorClosed):
            EditorSession(layout).submit({"url": "x"})

    @pytest.mark.asyncio
    async def test_change_after_close_is_dropped(self, layout):
        image = layout.create_instance("image")
        editor = EditorSession(layout)
        handle = await editor.open(image.id)

        await editor.close()
        handle.form.submit({"url": "https://late.example.edu/x.png"})

        assert image.config["url"] == ""
        assert editor.current is None


# ---------------------------------------------------------------------------
# CAPABILITY TESTS
# ---------------------------------------------------------------------------

class TestCapabilities:
    """Tests for async capability loading and teardown."""

    @pytest.mark.asyncio
    async def test_map_picker_loads_and_applies(self, layout):
        widget = layout.create_instance("air-quality")
        editor = EditorSession(layout)

        handle = await editor.open(widget.id)

        assert handle.state == EditorState.READY
        assert isinstance(handle.capability, MapPicker)
        assert handle.to_dict()["capability"]["kind"] == "map-picker"

        patch = editor.apply_capability({"latitude": 54.0, "longitude": -122.75})

        assert patch == {"latitude": 54.0, "longitude": -122.75}
        assert widget.config["latitude"] == 54.0
        assert widget.config["locationName"] == "UNBC Campus"

    @pytest.mark.asyncio
    async def test_close_releases_capability(self, layout):
        widget = layout.create_instance("air-quality")
        editor = EditorSession(layout)
        handle = await editor.open(widget.id)
        picker = handle.capability

        await editor.close()

        assert picker.active is False
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_opening_another_editor_closes_previous(self, layout):
        air = layout.create_instance("air-quality")
        clock = layout.create_instance("clock")
        editor = EditorSession(layout)
        picker = (await editor.open(air.id)).capability

        await editor.open(clock.id)

        assert picker.active is False
        assert editor.current.instance_id == clock.id

    @pytest.mark.asyncio
    async def test_slow_load_degrades(self, layout, registry):
        async def slow_loader():
            await asyncio.sleep(10)
            return FakeCapability()

        _register_loader_widget(registry, slow_loader)
        widget = layout.create_instance("with-loader")
        editor = EditorSession(layout, load_timeout=0.01)

        handle = await editor.open(widget.id)

        assert handle.state == EditorState.DEGRADED
        assert "did not load" in handle.error
        editor.submit({"title": "Still editable"})
        assert widget.config["title"] == "Still editable"
        with pytest.raises(EditorClosed):
            editor.apply_capability({"x": 1})

    @pytest.mark.asyncio
    async def test_failed_load_degrades(self, layout, registry):
        async def broken_loader():
            raise ConnectionError("tiles unavailable")

        _register_loader_widget(registry, broken_loader)
        widget = layout.create_instance("with-loader")
        editor = EditorSession(layout)

        handle = await editor.open(widget.id)

        assert handle.state == EditorState.DEGRADED
        assert handle.error == "Capability failed to load"
        assert handle.capability is None

    @pytest.mark.asyncio
    async def test_load_finishing_after_close_is_released(self, layout, registry):
        started = asyncio.Event()
        gate = asyncio.Event()
        capability = FakeCapability()

        async def gated_loader():
            started.set()
            await gate.wait()
            return capability

        _register_loader_widget(registry, gated_loader)
        widget = layout.create_instance("with-loader")
        editor = EditorSession(layout, load_timeout=5)

        opening = asyncio.create_task(editor.open(widget.id))
        await started.wait()
        assert editor.current.state == EditorState.LOADING

        await editor.close()
        gate.set()
        handle = await opening

        assert capability.closed is True
        assert handle.capability is None
        assert handle.state == EditorState.LOADING
        assert editor.current is None

    @pytest.mark.asyncio
    async def test_loader_runs_once_per_open(self, layout, registry):
        capability = FakeCapability()
        loader = AsyncMock(return_value=capability)
        _register_loader_widget(registry, loader)
        widget = layout.create_instance("with-loader")
        editor = EditorSession(layout)

        handle = await editor.open(widget.id)
        await editor.open(widget.id)

        assert loader.await_count == 2
        assert capability.closed is True
        assert handle.cancelled is True

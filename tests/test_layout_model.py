"""
Tests for the Layout Model.

This module tests:
- Instance creation (defaults, deep-copied props, unknown types)
- Auto-placement and the full-grid fallback
- Config merging, removal and bulk positions
- Ticker coupling and global settings
- Bounds helpers
"""

import pytest

from signage.widgets.exceptions import UnknownWidgetType
from signage.widgets.layout import LayoutModel, filter_in_bounds, find_placement, is_in_bounds
from signage.widgets.schemas import DisplayConfig, GridPosition, LogoConfig, Theme, WidgetInstance


# ---------------------------------------------------------------------------
# CREATE INSTANCE TESTS
# ---------------------------------------------------------------------------

class TestCreateInstance:
    """Tests for LayoutModel.create_instance."""

    def test_image_uses_descriptor_defaults(self, layout):
        image = layout.create_instance("image")

        assert (image.w, image.h) == (4, 3)
        assert image.config == {"url": "", "alt": "Image", "fit": "cover"}
        assert layout.get_instance(image.id) is image

    def test_unknown_type_raises(self, layout):
        with pytest.raises(UnknownWidgetType) as exc_info:
            layout.create_instance("hologram")

        assert exc_info.value.widget_type == "hologram"
        assert layout.config.layout == []

    def test_config_not_shared_between_instances(self, layout, registry):
        first = layout.create_instance("slideshow")
        second = layout.create_instance("slideshow")

        first.config["slides"].append({"url": "a.png"})

        assert second.config["slides"] == []
        assert registry.get("slideshow").default_props["slides"] == []

    def test_ids_are_unique(self, layout):
        ids = {layout.create_instance("clock").id for _ in range(20)}
        assert len(ids) == 20

    def test_explicit_position(self, layout):
        clock = layout.create_instance("clock", position=(5, 6))
        assert (clock.x, clock.y) == (5, 6)

    def test_auto_place_avoids_existing_widgets(self, layout):
        first = layout.create_instance("image")
        second = layout.create_instance("image")

        assert (first.x, first.y) == (0, 0)
        assert (second.x, second.y) == (4, 0)

    def test_full_grid_places_below_lowest_widget(self, layout):
        layout.replace(DisplayConfig(layout=[
            WidgetInstance(id="big", type="image", x=0, y=0, w=12, h=8),
        ]))

        clock = layout.create_instance("clock")

        assert (clock.x, clock.y) == (0, 8)
        assert (clock.w, clock.h) == (3, 1)

    def test_creating_ticker_enables_strip(self, layout):
        ticker = layout.create_instance("news-ticker")

        assert layout.config.ticker_enabled is True
        assert (ticker.x, ticker.y, ticker.w, ticker.h) == (0, 7, 12, 1)
        assert layout.row_count == 7


# ---------------------------------------------------------------------------
# FIND PLACEMENT TESTS
# ---------------------------------------------------------------------------

class TestFindPlacement:
    """Tests for the first-fit placement scan."""

    def test_empty_grid_places_at_origin(self):
        assert find_placement([], 12, 8, 4, 3, 2, 2) == (0, 0, 4, 3)

    def test_shrinks_towards_minimum(self):
        occupied = [WidgetInstance(id="a", type="image", x=0, y=0, w=12, h=6)]

        assert find_placement(occupied, 12, 8, 4, 3, 2, 2) == (0, 6, 4, 2)

    def test_nothing_fits(self):
        occupied = [WidgetInstance(id="a", type="image", x=0, y=0, w=12, h=8)]
        assert find_placement(occupied, 12, 8, 2, 2, 1, 1) is None

    def test_row_major_scan(self):
        occupied = [WidgetInstance(id="a", type="clock", x=0, y=0, w=3, h=1)]
        assert find_placement(occupied, 12, 8, 3, 1, 3, 1) == (3, 0, 3, 1)


# ---------------------------------------------------------------------------
# UPDATE / REMOVE TESTS
# ---------------------------------------------------------------------------

class TestInstanceUpdates:
    """Tests for config merging, removal and positions."""

    def test_update_is_shallow_merge(self, layout):
        image = layout.create_instance("image")

        layout.update_instance_config(image.id, {"url": "https://example.edu/x.png"})

        assert image.config == {"url": "https://example.edu/x.png", "alt": "Image", "fit": "cover"}

    def test_updates_apply_in_call_order(self, layout):
        clock = layout.create_instance("clock")

        layout.update_instance_config(clock.id, {"showSeconds": True})
        layout.update_instance_config(clock.id, {"showSeconds": False})

        assert clock.config["showSeconds"] is False

    def test_update_missing_id_is_noop(self, layout):
        assert layout.update_instance_config("ghost", {"a": 1}) is None

    def test_remove_is_idempotent(self, layout):
        clock = layout.create_instance("clock")

        assert layout.remove_instance(clock.id) is True
        assert layout.remove_instance(clock.id) is False
        assert layout.config.layout == []

    def test_removing_last_ticker_disables_strip(self, layout):
        ticker = layout.create_instance("news-ticker")
        layout.remove_instance(ticker.id)
        assert layout.config.ticker_enabled is False

    def test_set_positions_ignores_unknown_and_keeps_missing(self, layout):
        a = layout.create_instance("clock", position=(0, 0))
        b = layout.create_instance("clock", position=(3, 0))

        updated = layout.set_positions([
            GridPosition(id=a.id, x=6, y=2, w=4, h=2),
            GridPosition(id="ghost", x=1, y=1, w=1, h=1),
        ])

        assert updated == 1
        assert (a.x, a.y, a.w, a.h) == (6, 2, 4, 2)
        assert (b.x, b.y) == (3, 0)

    def test_grid_nodes_carry_bounds(self, layout):
        layout.create_instance("weather")
        node = layout.grid_nodes()[0]
        assert (node.min_w, node.min_h, node.max_w, node.max_h) == (2, 2, 4, 3)

    def test_grid_nodes_for_unknown_type_have_no_bounds(self, layout):
        layout.replace(DisplayConfig(layout=[WidgetInstance(id="x", type="hologram")]))
        node = layout.grid_nodes()[0]
        assert node.min_w is None and node.max_w is None


# ---------------------------------------------------------------------------
# SETTINGS TESTS
# ---------------------------------------------------------------------------

class TestSettings:
    """Tests for ticker coupling and global display settings."""

    def test_enable_ticker_creates_one(self, layout):
        layout.set_ticker_enabled(True)

        tickers = [i for i in layout.config.layout if i.type == "news-ticker"]
        assert len(tickers) == 1
        assert layout.config.ticker_enabled is True

    def test_enable_ticker_twice_keeps_one(self, layout):
        layout.set_ticker_enabled(True)
        layout.set_ticker_enabled(True)
        assert sum(1 for i in layout.config.layout if i.type == "news-ticker") == 1

    def test_disable_ticker_removes_instances(self, layout):
        layout.create_instance("clock")
        layout.set_ticker_enabled(True)

        layout.set_ticker_enabled(False)

        assert [i.type for i in layout.config.layout] == ["clock"]
        assert layout.config.ticker_enabled is False

    def test_blank_school_name_falls_back(self, layout):
        layout.update_settings(school_name="   ")
        assert layout.config.school_name == "Campus Hub"

    def test_settings_are_normalized(self, layout):
        layout.update_settings(
            cors_proxy="  https://proxy.example.edu/  ",
            logo=LogoConfig(type="url", value=" "),
            aspect_ratio=-1,
            unknown_key="ignored",
        )

        assert layout.config.cors_proxy == "https://proxy.example.edu/"
        assert layout.config.logo is None
        assert layout.config.aspect_ratio is None

    def test_set_theme(self, layout):
        layout.set_theme(Theme(primary="#000000", accent="#ffffff", background="#111111"))
        assert layout.config.theme.background == "#111111"


# ---------------------------------------------------------------------------
# BOUNDS TESTS
# ---------------------------------------------------------------------------

class TestBounds:
    """Tests for is_in_bounds and filter_in_bounds."""

    def test_is_in_bounds(self):
        assert is_in_bounds(WidgetInstance(id="a", type="clock", x=9, y=7, w=3, h=1))
        assert not is_in_bounds(WidgetInstance(id="a", type="clock", x=10, y=0, w=3, h=1))
        assert not is_in_bounds(WidgetInstance(id="a", type="clock", x=0, y=8, w=1, h=1))

    def test_filter_drops_overflow_and_recomputes_ticker(self):
        config = DisplayConfig(
            layout=[
                WidgetInstance(id="ok", type="clock", x=0, y=0, w=3, h=1),
                WidgetInstance(id="low", type="clock", x=0, y=9, w=3, h=1),
                WidgetInstance(id="t", type="news-ticker", x=0, y=12, w=12, h=1),
            ],
            ticker_enabled=True,
        )

        filtered = filter_in_bounds(config)

        assert [i.id for i in filtered.layout] == ["ok"]
        assert filtered.ticker_enabled is False
        assert len(config.layout) == 3

    def test_model_copy_isolated_from_source(self, sample_config):
        layout = LayoutModel(sample_config)
        layout.update_instance_config("clock-1", {"showSeconds": False})
        assert sample_config.get_instance("clock-1").config["showSeconds"] is True

"""
Tests for the configuration codec.

This module tests:
- Round trip of configs built through LayoutModel operations
- URL safety and determinism of tokens
- Fallback to the default config for empty, truncated and invalid tokens
- Per-field defaults during normalization
- Hostile payloads (deep nesting, unencodable text, oversized tokens)
- Plain base64 tokens and share URLs
"""

import base64
import json
from urllib.parse import unquote

import pytest
from lzstring import LZString

from signage.widgets.codec import (
    build_share_url,
    decode_config,
    decode_config_or_default,
    encode_config,
    normalize_config,
)
from signage.widgets.defaults import get_default_config, get_preset, list_presets
from signage.widgets.exceptions import DecodeFailure
from signage.widgets.layout import LayoutModel
from signage.widgets.schemas import GridPosition, LogoConfig, Theme


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _plain_token(document) -> str:
    return _b64(json.dumps(document).encode("utf-8"))


def _lz_token(document) -> str:
    text = document if isinstance(document, str) else json.dumps(document)
    return LZString().compressToEncodedURIComponent(text)


# ---------------------------------------------------------------------------
# ROUND TRIP TESTS
# ---------------------------------------------------------------------------

class TestRoundTrip:
    """decode(encode(c)) reproduces c for configs built by legal operations."""

    def test_default_config(self):
        config = get_default_config()
        assert decode_config(encode_config(config)) == config

    def test_config_built_through_layout_operations(self, layout):
        image = layout.create_instance("image")
        clock = layout.create_instance("clock", position=(9, 0))
        layout.create_instance("weather")
        layout.set_ticker_enabled(True)
        layout.update_instance_config(image.id, {"url": "https://example.edu/ü.png", "extra": None})
        layout.set_positions([GridPosition(id=clock.id, x=8, y=5, w=4, h=2)])
        layout.set_coming_soon(clock.id, True)
        layout.set_theme(Theme(primary="#111111", accent="#222222", background="#333333"))
        layout.update_settings(
            school_name="Science Building",
            coming_soon=True,
            logo=LogoConfig(type="svg", value="<svg></svg>"),
            aspect_ratio=16 / 9,
            cors_proxy=" https://proxy.example.edu/ ",
        )

        decoded = decode_config(encode_config(layout.config))

        assert decoded == layout.config
        assert [i.id for i in decoded.layout] == [i.id for i in layout.config.layout]

    def test_widget_removal_round_trips(self, layout):
        keep = layout.create_instance("clock")
        drop = layout.create_instance("image")
        layout.remove_instance(drop.id)

        decoded = decode_config(encode_config(layout.config))

        assert [i.id for i in decoded.layout] == [keep.id]

    @pytest.mark.parametrize("preset_id", [p.id for p in list_presets()])
    def test_presets(self, preset_id):
        config = get_preset(preset_id).config
        assert decode_config(encode_config(config)) == config

    def test_unknown_types_survive(self, sample_config):
        sample_config.layout[0].type = "hologram"
        decoded = decode_config(encode_config(sample_config))
        assert decoded.layout[0].type == "hologram"


# ---------------------------------------------------------------------------
# TOKEN SHAPE TESTS
# ---------------------------------------------------------------------------

class TestTokenShape:
    """Tests for URL safety and determinism."""

    def test_token_is_url_safe(self, sample_config):
        token = encode_config(sample_config)
        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+-$")
        assert set(token) <= allowed

    def test_token_is_deterministic(self, sample_config):
        assert encode_config(sample_config) == encode_config(sample_config.model_copy(deep=True))

    def test_compression_shortens_large_layouts(self, layout):
        for _ in range(12):
            layout.create_instance("events-list")
        token = encode_config(layout.config)
        raw_json = json.dumps(layout.config.to_wire(), separators=(",", ":"))
        assert len(token) < len(raw_json)


# ---------------------------------------------------------------------------
# DECODE FAILURE TESTS
# ---------------------------------------------------------------------------

class TestDecodeFailure:
    """Broken tokens decode to None and fall back to the default wholesale."""

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_empty_token(self, token):
        assert decode_config(token) is None

    def test_truncated_token(self, sample_config):
        token = encode_config(sample_config)
        assert decode_config(token[: len(token) // 2]) is None

    @pytest.mark.parametrize("token", [
        "not a token!",
        "%%%%",
        _plain_token([1, 2, 3]),
        _plain_token("just a string"),
        _plain_token({"layout": [1, 2]}),
        _lz_token({"layout": ["clock"]}),
        _lz_token("{not json"),
        _b64(b"\xff\xfe\xfd"),
    ])
    def test_invalid_structure(self, token):
        assert decode_config(token) is None

    def test_every_failure_yields_identical_default(self, sample_config):
        token = encode_config(sample_config)
        results = [
            decode_config_or_default(""),
            decode_config_or_default(token[:10]),
            decode_config_or_default(_plain_token(["nope"])),
        ]

        assert all(r == get_default_config() for r in results)
        assert results[0] is not results[1]

    def test_default_is_empty_grid(self):
        config = decode_config_or_default(None)
        assert config.layout == []
        assert config.ticker_enabled is False
        assert config.theme == Theme(primary="#035642", accent="#B79527", background="#022b21")


# ---------------------------------------------------------------------------
# HOSTILE PAYLOAD TESTS
# ---------------------------------------------------------------------------

class TestHostilePayloads:
    """Well-formed tokens carrying documents that must still be rejected."""

    def test_deep_nesting_rejected(self, deeply_nested_token):
        assert decode_config(deeply_nested_token) is None

    def test_nesting_over_depth_limit_rejected(self):
        props = {}
        for _ in range(40):
            props = {"inner": props}
        token = _lz_token({"layout": [{"id": "a", "type": "clock", "props": props}]})

        assert decode_config(token) is None

    def test_moderate_nesting_accepted(self):
        props = {"children": [{"id": "c", "type": "clock", "props": {"format24h": True}}]}
        token = _lz_token({"layout": [{"id": "s", "type": "widget-stack", "props": props}]})

        assert decode_config(token).layout[0].config == props

    def test_lone_surrogate_rejected(self, lone_surrogate_token):
        assert decode_config(lone_surrogate_token) is None
        assert decode_config(_plain_token({"schoolName": "\ud800 Campus", "layout": []})) is None

    def test_oversized_token_rejected(self):
        assert decode_config("A" * 20000) is None

    def test_decoded_config_can_be_encoded_again(self, sample_config):
        sample_config.school_name = "Campus \U0001F393 Hub"
        decoded = decode_config(encode_config(sample_config))

        assert decoded.school_name == "Campus \U0001F393 Hub"
        assert decode_config(encode_config(decoded)) == decoded


# ---------------------------------------------------------------------------
# LZ-STRING COMPATIBILITY TESTS
# ---------------------------------------------------------------------------

class TestLinkCompatibility:
    """Tokens from existing display links (lz-string, URI-safe alphabet)."""

    def test_existing_link_token(self):
        document = {
            "layout": [{"id": "clock-1", "type": "clock", "x": 10, "y": 0, "w": 2, "h": 1}],
            "theme": {"primary": "#035642", "accent": "#B79527", "background": "#022b21"},
            "schoolName": "Campus Hub",
            "tickerEnabled": True,
            "gridRows": 8,
            "corsProxy": "",
        }

        config = decode_config(_lz_token(document))

        assert config.layout[0].id == "clock-1"
        assert config.ticker_enabled is True
        assert config.cors_proxy == ""

    def test_utf16_surrogate_pairs_joined(self):
        # Browsers compress UTF-16 code units, so astral characters arrive as pairs
        text = json.dumps({"schoolName": "Campus \U0001F393", "layout": []}, ensure_ascii=False)
        raw = text.encode("utf-16-le")
        code_units = "".join(chr(int.from_bytes(raw[i:i + 2], "little")) for i in range(0, len(raw), 2))

        config = decode_config(LZString().compressToEncodedURIComponent(code_units))

        assert config.school_name == "Campus \U0001F393"

    def test_form_decoded_plus_signs(self, sample_config):
        token = encode_config(sample_config)
        assert decode_config(token.replace("+", " ")) == sample_config

    def test_encode_matches_lz_string(self, sample_config):
        document = json.dumps(sample_config.to_wire(), separators=(",", ":"))
        assert encode_config(sample_config) == LZString().compressToEncodedURIComponent(document)


# ---------------------------------------------------------------------------
# NORMALIZATION TESTS
# ---------------------------------------------------------------------------

class TestNormalization:
    """Missing or mistyped optional fields get per-field defaults."""

    def test_instance_defaults(self):
        config = normalize_config({"layout": [{}, {"type": "image", "x": "3", "w": 2.0}]})

        first, second = config.layout
        assert (first.id, first.type, first.x, first.y, first.w, first.h) == ("widget-0", "clock", 0, 0, 1, 1)
        assert first.config == {}
        assert (second.id, second.type, second.x, second.w) == ("image-1", "image", 0, 2)

    def test_non_string_type_gets_generic_id(self):
        config = normalize_config({"layout": [{"type": 5, "x": 1}]})
        assert (config.layout[0].id, config.layout[0].type) == ("widget-0", "clock")

    def test_positions_are_not_clamped(self):
        config = normalize_config({"layout": [{"id": "a", "type": "clock", "x": 40, "y": -2, "w": 99, "h": 0}]})
        instance = config.layout[0]
        assert (instance.x, instance.y, instance.w, instance.h) == (40, -2, 99, 0)

    def test_partial_theme_merged_over_default(self):
        config = normalize_config({"theme": {"primary": "#ff0000", "accent": 5}})
        assert config.theme == Theme(primary="#ff0000", accent="#B79527", background="#022b21")

    def test_missing_layout_uses_default(self):
        config = normalize_config({"layout": "oops", "tickerEnabled": "yes"})
        assert config.layout == []
        assert config.ticker_enabled is False

    def test_bad_optional_fields_dropped(self):
        config = normalize_config({
            "schoolName": "  ",
            "logo": {"type": "gif", "value": "x"},
            "aspectRatio": 0,
            "comingSoon": "true",
        })
        assert config.school_name == "Campus Hub"
        assert config.logo is None
        assert config.aspect_ratio is None
        assert config.coming_soon is False

    def test_non_object_entry_rejects_document(self):
        with pytest.raises(DecodeFailure):
            normalize_config({"layout": [{"id": "a"}, "b"]})


# ---------------------------------------------------------------------------
# LEGACY TOKENS / SHARE URL
# ---------------------------------------------------------------------------

class TestLegacyAndShare:
    """Tests for uncompressed tokens and share URLs."""

    def test_plain_base64_json_accepted(self):
        token = _plain_token({
            "layout": [{"id": "clock-1", "type": "clock", "x": 10, "y": 0, "w": 2, "h": 1, "props": {}}],
            "theme": {"primary": "#035642", "accent": "#B79527", "background": "#022b21"},
            "schoolName": "Campus Hub",
            "tickerEnabled": False,
        })

        config = decode_config(token)

        assert config.layout[0].id == "clock-1"
        assert config.layout[0].x == 10

    def test_share_url_drops_out_of_bounds_widgets(self, layout):
        layout.create_instance("clock", position=(0, 0))
        layout.create_instance("clock", position=(0, 10))

        url = build_share_url(layout.config, "https://signage.example.edu/")

        assert url.startswith("https://signage.example.edu/display?config=")
        shared = decode_config(unquote(url.split("config=", 1)[1]))
        assert len(shared.layout) == 1
        assert len(layout.config.layout) == 2

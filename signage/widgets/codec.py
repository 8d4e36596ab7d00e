"""
Configuration Codec - DisplayConfig <-> URL-safe token.

The display surface is driven only by the `config` query parameter, so the
whole DisplayConfig has to fit in a URL. Encoding is:

    config -> compact JSON (camelCase wire form) -> lz-string (URI-safe alphabet)

This is the token format of display links already in circulation, so those
links keep opening the layout they were made for.

Decoding reverses that and then normalizes the document field by field:
missing or mistyped optional fields get their documented defaults instead of
failing the whole decode. Structural damage (bad compression, non-JSON,
non-object document, non-object layout entry, text that cannot be written
back as UTF-8) rejects the token. A rejected token yields None; callers
substitute the default configuration.

Plain base64url-encoded JSON (no compression) is accepted as well, for
hand-written tokens.

Usage:
======
    from signage.widgets.codec import encode_config, decode_config_or_default

    token = encode_config(layout.config)
    config = decode_config_or_default(request.query_params.get("config"))
"""

import base64
import binascii
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from lzstring import LZString

from signage.core.config import settings
from signage.widgets.defaults import DEFAULT_CONFIG, get_default_config
from signage.widgets.exceptions import DecodeFailure
from signage.widgets.layout import filter_in_bounds
from signage.widgets.schemas import DisplayConfig, LogoConfig, Theme, WidgetInstance


logger = logging.getLogger("signage.widgets.codec")


# lz-string URI alphabet (A-Za-z0-9+-$) plus "_" from base64url
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9+$_-]+$")

_lz = LZString()


# ---------------------------------------------------------------------------
# ENCODING
# ---------------------------------------------------------------------------

def encode_config(config: DisplayConfig) -> str:
    """
    Encode a DisplayConfig as a URL-safe token.

    The token is a deterministic function of the config value: the same
    config always gives the same token.
    """
    # ASCII JSON keeps every character within one UTF-16 code unit
    document = json.dumps(config.to_wire(), separators=(",", ":"))
    return _lz.compressToEncodedURIComponent(document)


def build_share_url(config: DisplayConfig, base_url: str, path: str = "/display") -> str:
    """
    Build the shareable display URL for a config.

    Widgets outside the visible grid are dropped before encoding.
    """
    token = encode_config(filter_in_bounds(config))
    return f"{base_url.rstrip('/')}{path}?config={quote(token, safe='-$')}"


# ---------------------------------------------------------------------------
# DECODING
# ---------------------------------------------------------------------------

def decode_config(token: Optional[str]) -> Optional[DisplayConfig]:
    """
    Decode a token back into a DisplayConfig.

    Never raises. Returns None for an empty, truncated or malformed token;
    a token either decodes completely or not at all.
    """
    if not token or not token.strip():
        return None
    # A literal "+" arrives as a space when the query string is form-decoded
    token = token.replace(" ", "+").strip()
    try:
        document = _token_to_document(token)
        return normalize_config(document)
    except DecodeFailure as e:
        logger.info(f"Rejected display token ({len(token)} chars): {e}")
        return None


def decode_config_or_default(token: Optional[str]) -> DisplayConfig:
    """Decode a token, or return a fresh copy of the default configuration."""
    decoded = decode_config(token)
    return decoded if decoded is not None else get_default_config()


def _decompress(token: str) -> Optional[str]:
    try:
        text = _lz.decompressFromEncodedURIComponent(token)
    except Exception as e:
        # The decompressor indexes past the end or hits foreign characters on non-lz input
        logger.debug(f"Token is not lz-string compressed: {e!r}")
        return None
    if not text:
        return None
    try:
        # Decompressed text is UTF-16 code units; join surrogate pairs
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeError as e:
        logger.debug(f"Decompressed token is not valid text: {e}")
        return None


def _decode_base64(token: str) -> str:
    if "+" in token or "$" in token:
        raise DecodeFailure("token is neither lz-string nor base64url")
    padded = token + "=" * (-len(token) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"invalid base64 payload: {e}") from e


def _parse_document(text: str) -> Dict[str, Any]:
    if len(text) > settings.CONFIG_DOCUMENT_MAX_CHARS:
        raise DecodeFailure(f"payload too large ({len(text)} chars)")
    try:
        document = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DecodeFailure(f"payload is not JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeFailure("payload is not a JSON object")
    if _nesting_depth(document) > settings.CONFIG_DOCUMENT_MAX_DEPTH:
        raise DecodeFailure("payload is nested too deeply")

    try:
        # Lone surrogates from "\ud800"-style escapes cannot be encoded again
        json.dumps(document, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodeFailure(f"payload contains unencodable text: {e.reason}") from e
    return document


def _nesting_depth(document: Any) -> int:
    """Deepest container nesting of a parsed JSON value, computed without recursion."""
    deepest = 0
    stack = [(document, 1)]
    while stack:
        value, depth = stack.pop()
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def _token_to_document(token: str) -> Dict[str, Any]:
    if len(token) > settings.CONFIG_TOKEN_MAX_LENGTH:
        raise DecodeFailure(f"token too long ({len(token)} chars)")
    if not _TOKEN_PATTERN.match(token):
        raise DecodeFailure("token contains characters outside the token alphabet")

    text = _decompress(token)
    if text is not None:
        try:
            return _parse_document(text)
        except DecodeFailure as e:
            logger.debug(f"lz-string payload rejected, trying base64: {e}")
    return _parse_document(_decode_base64(token))


# ---------------------------------------------------------------------------
# NORMALIZATION
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_int(value: Any, default: int) -> int:
    return int(value) if _is_number(value) else default


def _normalize_instance(item: Any, index: int) -> WidgetInstance:
    if not isinstance(item, dict):
        raise DecodeFailure(f"layout entry {index} is not an object")

    raw_type = item.get("type")
    widget_type = raw_type if isinstance(raw_type, str) else "clock"
    # Fallback ids keep the raw type, so an entry without one becomes "widget-<n>"
    id_prefix = raw_type if isinstance(raw_type, str) else "widget"
    instance_id = item.get("id") if isinstance(item.get("id"), str) else f"{id_prefix}-{index}"
    props = item.get("props")

    return WidgetInstance(
        id=instance_id,
        type=widget_type,
        x=_as_int(item.get("x"), 0),
        y=_as_int(item.get("y"), 0),
        w=_as_int(item.get("w"), 1),
        h=_as_int(item.get("h"), 1),
        config=dict(props) if isinstance(props, dict) else {},
        coming_soon=item.get("comingSoon") is True,
    )


def _normalize_theme(raw: Any) -> Theme:
    merged = DEFAULT_CONFIG.theme.model_dump()
    if isinstance(raw, dict):
        merged.update({k: v for k, v in raw.items() if k in merged and isinstance(v, str)})
    return Theme(**merged)


def _normalize_logo(raw: Any) -> Optional[LogoConfig]:
    if not isinstance(raw, dict):
        return None
    if raw.get("type") not in ("svg", "url"):
        return None
    value = raw.get("value")
    if not isinstance(value, str) or not value.strip():
        return None
    return LogoConfig(type=raw["type"], value=value)


def normalize_config(raw: Dict[str, Any]) -> DisplayConfig:
    """
    Build a DisplayConfig from a wire document, defaulting field by field.

    Unknown widget types are kept as-is; only rendering treats them specially.

    Raises:
        DecodeFailure: If a layout entry is not an object
    """
    layout_raw = raw.get("layout")
    if isinstance(layout_raw, list):
        layout: List[WidgetInstance] = [_normalize_instance(item, i) for i, item in enumerate(layout_raw)]
    else:
        layout = [i.model_copy(deep=True) for i in DEFAULT_CONFIG.layout]

    school_name = raw.get("schoolName")
    if not isinstance(school_name, str) or not school_name.strip():
        school_name = DEFAULT_CONFIG.school_name

    ticker_enabled = raw.get("tickerEnabled")
    if not isinstance(ticker_enabled, bool):
        ticker_enabled = DEFAULT_CONFIG.ticker_enabled

    aspect_ratio = raw.get("aspectRatio")
    if not (_is_number(aspect_ratio) and aspect_ratio > 0):
        aspect_ratio = None

    cors_proxy = raw.get("corsProxy")
    cors_proxy = cors_proxy.strip() if isinstance(cors_proxy, str) else None

    return DisplayConfig(
        layout=layout,
        theme=_normalize_theme(raw.get("theme")),
        school_name=school_name,
        ticker_enabled=ticker_enabled,
        coming_soon=raw.get("comingSoon") is True,
        logo=_normalize_logo(raw.get("logo")),
        aspect_ratio=float(aspect_ratio) if aspect_ratio is not None else None,
        cors_proxy=cors_proxy,
    )

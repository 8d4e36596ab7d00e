"""
Configuration module - centralized settings for the signage service.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export PUBLIC_BASE_URL=https://signage.example.edu
        export LAYOUT_DEBOUNCE_MS=150
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "Campus Signage"

    # DEBUG: Enable debug mode (more verbose logging)
    DEBUG: bool = False

    # LOG_LEVEL: Root level for the "signage" logger tree
    LOG_LEVEL: str = "INFO"

    # PUBLIC_BASE_URL: Origin used when building shareable display links
    # - The display surface lives at {PUBLIC_BASE_URL}/display?config=<token>
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # CORS_ORIGINS: Origins allowed to call the configurator API
    # - Set as a JSON list: CORS_ORIGINS='["https://signage.example.edu"]'
    CORS_ORIGINS: List[str] = ["*"]

    # ---------------------------------------------------------------------------
    # GRID INTERACTION
    # ---------------------------------------------------------------------------
    # LAYOUT_DEBOUNCE_MS: Quiet period before a "layout changed" emission fires
    LAYOUT_DEBOUNCE_MS: int = 100

    # GRID_ROW_OVERFLOW: Rows allowed below the nominal row count while
    # pushing colliding widgets down. Bounds the collision resolution.
    GRID_ROW_OVERFLOW: int = 32

    # ---------------------------------------------------------------------------
    # DISPLAY TOKENS
    # ---------------------------------------------------------------------------
    # Limits applied when decoding a token; a token over any limit is treated
    # as broken and the default configuration is shown.
    # CONFIG_TOKEN_MAX_LENGTH: Longest accepted token, in characters
    CONFIG_TOKEN_MAX_LENGTH: int = 16384

    # CONFIG_DOCUMENT_MAX_CHARS: Longest accepted JSON document after decompression
    CONFIG_DOCUMENT_MAX_CHARS: int = 1_000_000

    # CONFIG_DOCUMENT_MAX_DEPTH: Deepest accepted object/array nesting
    CONFIG_DOCUMENT_MAX_DEPTH: int = 32

    # ---------------------------------------------------------------------------
    # CONFIGURATOR
    # ---------------------------------------------------------------------------
    # EDITOR_LOAD_TIMEOUT_SECONDS: Time allowed for loading a heavyweight editor
    # capability (e.g. the map picker). Slower loads degrade to a placeholder.
    EDITOR_LOAD_TIMEOUT_SECONDS: float = 5.0

    # MAX_SESSIONS: In-memory configurator sessions kept at once
    # - The oldest session is evicted when the limit is reached
    MAX_SESSIONS: int = 256


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from signage.core.config import settings
settings = Settings()

"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn signage.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signage.core.config import settings
from signage.core.logger import configure_logging
from signage.routers import configure, display, widgets
from signage.widgets.builtin import register_builtin_widgets
from signage.widgets.registry import widget_registry


# ---------------------------------------------------------------------------
# LOGGING
# ---------------------------------------------------------------------------
configure_logging("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)
logger = logging.getLogger("signage.main")

# ---------------------------------------------------------------------------
# WIDGET REGISTRY
# ---------------------------------------------------------------------------
# Populated here, at import time, before the app object exists. No request
# handler can run before this line, so none can see an empty registry.
register_builtin_widgets(widget_registry)

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The configurator UI may be served from another origin than the API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# display.router: /display (HTML) and /display/compose (JSON)
# configure.router: /configure/sessions/... for the layout editor
# widgets.router: /widgets catalog and /presets
app.include_router(display.router)
app.include_router(configure.router)
app.include_router(widgets.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Returns:
        {"status": "ok", "widgets": <registered widget count>}
    """
    return {"status": "ok", "widgets": len(widget_registry)}

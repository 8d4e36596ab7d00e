"""
Dependencies module - reusable FastAPI dependencies for route handlers.
"""

from fastapi import HTTPException, status

from signage.services.configurator import ConfiguratorSession, session_store
from signage.widgets.registry import WidgetRegistry, widget_registry


def get_registry() -> WidgetRegistry:
    """The application widget registry (populated in signage.main)."""
    return widget_registry


def get_session(session_id: str) -> ConfiguratorSession:
    """
    Resolve the configurator session named in the path.

    Raises:
        404 Not Found: If the session does not exist (or was evicted)
    """
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Configurator session not found",
        )
    return session

"""
Widget Catalog Router - registered widget types and demo presets.

The configurator sidebar lists what can be added (GET /widgets) and which
example layouts can be loaded (GET /presets).
"""

from fastapi import APIRouter, Depends, HTTPException, status

from signage.deps import get_registry
from signage.widgets.defaults import get_preset, list_presets
from signage.widgets.registry import WidgetRegistry


router = APIRouter(tags=["catalog"])


@router.get("/widgets")
def list_widgets(registry: WidgetRegistry = Depends(get_registry)):
    """All registered widget types in registration order."""
    return [d.to_catalog_entry() for d in registry.list_widgets()]


@router.get("/widgets/{widget_type}")
def get_widget(widget_type: str, registry: WidgetRegistry = Depends(get_registry)):
    descriptor = registry.get(widget_type)
    if descriptor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown widget type: {widget_type}")
    return descriptor.to_catalog_entry()


@router.get("/presets")
def get_presets():
    return [p.to_dict() for p in list_presets()]


@router.get("/presets/{preset_id}")
def get_preset_detail(preset_id: str):
    preset = get_preset(preset_id)
    if preset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preset not found")
    return preset.to_dict()

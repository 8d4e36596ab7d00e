"""
Routers module - API endpoint handlers organized by feature.

- display: the read-only display surface driven by a config token
- configure: configurator sessions (widgets, gestures, settings, editor, save)
- widgets: widget catalog and demo presets
"""

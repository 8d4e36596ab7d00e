"""
Services module - stateful pieces that sit between the routers and the engine.

- configurator: in-memory configurator sessions (layout + grid + editor)
- editor_session: lifecycle of the widget edit dialog
"""

# =============================================================================
# UI Module
# =============================================================================
# Textual-based user interface for Perch.
#
# Structure:
#   - render.py: Pure renderer, ViewState -> rich Text frame
#   - theme.py: Colors and styles used by the renderer
#   - screens/: The Textual screen that runs the event loop
# =============================================================================

# =============================================================================
# Screens
# =============================================================================
#   - MainScreen: Unread list / message detail, owns the view state
# =============================================================================

from perch.ui.screens.main import MainScreen

__all__ = ["MainScreen"]

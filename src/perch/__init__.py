# =============================================================================
# Perch: Unread Mail at a Glance
# =============================================================================
#
#   "Sits on the wire and watches the inbox."
#
# Perch is a small terminal app that lists your unread mail, lets you read a
# message without leaving the terminal, and keeps the list fresh in the
# background.
#
# Features:
#   - Unread list with filtering and relative received times
#   - Message reading in a scrollable view (marks the message read)
#   - Mark all as read
#   - Silent background refresh every 10 seconds
#   - Mail.app backend (AppleScript), plus a --demo mode with sample mail
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "perch"

# Main entry point - this is what gets called by the 'perch' command
from perch.app import main

__all__ = ["main", "__version__", "__app_name__"]

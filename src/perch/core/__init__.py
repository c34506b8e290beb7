# =============================================================================
# Perch Core Module
# =============================================================================
# The pure half of Perch: domain model, view state and the reducer that
# drives it. Nothing in here imports Textual or touches the terminal, so the
# whole state machine can be exercised directly in tests.
#
#   - EmailSummary: One unread message as listed by the provider
#   - ViewState / ViewMode: The single source of truth for the UI
#   - update(): The reducer, (ViewState, Event) -> commands
# =============================================================================

from perch.core.email import EmailSummary, relative_time
from perch.core.state import ViewMode, ViewState
from perch.core.reducer import update

__all__ = [
    "EmailSummary",
    "relative_time",
    "ViewMode",
    "ViewState",
    "update",
]

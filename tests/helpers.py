# =============================================================================
# Test Helpers
# =============================================================================

import io
from datetime import datetime

from rich.console import Console

from perch.core import ViewState, update
from perch.ui.render import FALLBACK_SIZE, render


# Fixed "now" for anything time dependent
NOW = datetime(2024, 1, 15, 12, 0, 0)


def apply(state: ViewState, *events) -> list:
    """
    Feed events to the reducer, checking invariants after each one.

    Returns:
        All commands issued, in order.
    """
    commands = []
    for event in events:
        commands.extend(update(state, event))
        assert state.invariant_violations() == [], f"after {event!r}"
    return commands


def of_type(commands: list, kind: type) -> list:
    """Commands of one type."""
    return [c for c in commands if isinstance(c, kind)]


def frame_text(state: ViewState) -> str:
    """Print render(state) on a terminal-sized console and return the plain text."""
    width, height = state.viewport_size if state.width > 0 else FALLBACK_SIZE
    console = Console(width=width, height=height, file=io.StringIO(), record=True)
    console.print(render(state))
    return console.export_text()

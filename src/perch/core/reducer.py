# =============================================================================
# Reducer
# =============================================================================
# The state machine behind Perch. `update(state, event)` applies exactly one
# event to the view state and returns the commands that should be issued as
# a result. It never performs I/O, never sleeps and never calls the provider.
#
#   Mode    Loading  Accepts
#   ------  -------  ----------------------------------------------------------
#   LIST    no       motion, filter, enter (read), r (refresh), a (mark all), q
#   LIST    yes      motion, filter, r, q           (enter / a are ignored)
#   DETAIL  -        scroll keys, q / escape (back to list)
#   any     error    r (retry), q (quit)            (error panel is showing)
#
# ctrl+c quits from anywhere. Timer ticks refresh the list in every mode
# without touching `loading` (unless configured otherwise) and always
# reschedule themselves, giving a steady cadence regardless of how long a
# fetch takes.
#
# Completions may arrive in any order relative to when their commands were
# issued. A body completion is only applied if it is for the summary we are
# still waiting on.
# =============================================================================

import logging
from datetime import datetime

from perch.core.events import (
    Command,
    Event,
    FetchBody,
    FetchBodyDone,
    FetchList,
    FetchListDone,
    KeyPress,
    MarkAllDone,
    MarkAllRead,
    Notify,
    Quit,
    Resize,
    ScheduleSpinner,
    ScheduleTick,
    SpinnerTick,
    Started,
    Tick,
)
from perch.core.spinner import FRAME_INTERVAL
from perch.core.state import ViewMode, ViewState

logger = logging.getLogger(__name__)


# Rows reserved around the list (status line, help bar, margins)
LIST_RESERVED_ROWS = 4

# Cells reserved around the body viewport (detail box border, padding, header)
VIEWPORT_RESERVED_COLUMNS = 10
VIEWPORT_RESERVED_ROWS = 12


def update(state: ViewState, event: Event) -> list[Command]:
    """
    Apply one event to the view state.

    Args:
        state: The view state. Mutated in place.
        event: The event to apply.

    Returns:
        Commands to issue, in order. May be empty.
    """
    if isinstance(event, KeyPress):
        return _on_key(state, event)
    if isinstance(event, Tick):
        return _on_tick(state, event)
    if isinstance(event, SpinnerTick):
        return _on_spinner_tick(state, event)
    if isinstance(event, FetchListDone):
        return _on_list_done(state, event)
    if isinstance(event, FetchBodyDone):
        return _on_body_done(state, event)
    if isinstance(event, MarkAllDone):
        return _on_mark_all_done(state, event)
    if isinstance(event, Resize):
        return _on_resize(state, event)
    if isinstance(event, Started):
        return _on_started(state)
    raise TypeError(f"Unknown event: {event!r}")


# =============================================================================
# Helpers
# =============================================================================

def _begin_loading(state: ViewState) -> list[Command]:
    """Raise the loading flag and start a fresh spinner tick chain."""
    state.loading = True
    return [ScheduleSpinner(FRAME_INTERVAL, state.spinner.restart())]


def _end_loading(state: ViewState) -> None:
    # A body fetch still in flight keeps the UI blocked
    if state.pending_email is None:
        state.loading = False


def _refresh(state: ViewState, show_loading: bool) -> list[Command]:
    """Issue a list fetch, optionally behind the loading indicator."""
    commands: list[Command] = [FetchList(blocking=show_loading)]
    if show_loading:
        commands.extend(_begin_loading(state))
    return commands


def _leave_detail(state: ViewState) -> None:
    state.mode = ViewMode.LIST
    state.current_email = None
    state.email_body = ""
    state.viewport.set_content("")


# =============================================================================
# Lifecycle
# =============================================================================

def _on_started(state: ViewState) -> list[Command]:
    logger.debug("Event loop started")
    commands: list[Command] = [FetchList(blocking=True), ScheduleTick(state.options.refresh_interval)]
    commands.extend(_begin_loading(state))
    return commands


def _on_resize(state: ViewState, event: Resize) -> list[Command]:
    state.width = event.width
    state.height = event.height
    state.email_list.set_size(event.width, event.height - LIST_RESERVED_ROWS)
    state.viewport.set_size(
        max(1, event.width - VIEWPORT_RESERVED_COLUMNS),
        max(1, event.height - VIEWPORT_RESERVED_ROWS),
    )
    return []


def _on_tick(state: ViewState, event: Tick) -> list[Command]:
    logger.debug(f"Refresh tick at {event.at:%H:%M:%S}")
    commands = _refresh(state, show_loading=state.options.background_shows_loading)
    commands.append(ScheduleTick(state.options.refresh_interval))
    return commands


def _on_spinner_tick(state: ViewState, event: SpinnerTick) -> list[Command]:
    if state.loading and state.spinner.advance(event.tag):
        return [ScheduleSpinner(FRAME_INTERVAL, event.tag)]
    return []


# =============================================================================
# Keys
# =============================================================================

def _on_key(state: ViewState, event: KeyPress) -> list[Command]:
    if event.key == "ctrl+c":
        return [Quit()]
    if state.last_error is not None:
        return _on_error_key(state, event)
    if state.mode is ViewMode.DETAIL:
        return _on_detail_key(state, event)
    return _on_list_key(state, event)


def _on_error_key(state: ViewState, event: KeyPress) -> list[Command]:
    if event.key == "q":
        return [Quit()]
    if event.key == "r":
        return _refresh(state, show_loading=state.options.manual_shows_loading)
    return []


def _on_detail_key(state: ViewState, event: KeyPress) -> list[Command]:
    if event.key in ("q", "escape"):
        _leave_detail(state)
        return []
    state.viewport.handle_key(event.key)
    return []


def _on_list_key(state: ViewState, event: KeyPress) -> list[Command]:
    # Motion and filter keys belong to the list; while a filter is being
    # typed it swallows everything
    if state.email_list.handle_key(event.key, event.character):
        return []

    if event.key == "q":
        return [Quit()]

    if event.key == "r":
        return _refresh(state, show_loading=state.options.manual_shows_loading)

    if event.key == "a":
        if state.loading or not state.emails:
            return []
        commands: list[Command] = [MarkAllRead()]
        commands.extend(_begin_loading(state))
        return commands

    if event.key == "enter":
        if state.loading:
            return []
        selected = state.selected_email
        if selected is None:
            return []
        state.pending_email = selected
        commands = [FetchBody(selected)]
        commands.extend(_begin_loading(state))
        return commands

    return []


# =============================================================================
# Command Completions
# =============================================================================

def _on_list_done(state: ViewState, event: FetchListDone) -> list[Command]:
    state.last_refresh = event.at or datetime.now()
    # A silent refresh must not clear loading raised by another command
    if event.blocking:
        _end_loading(state)

    if event.error is not None:
        logger.debug(f"List fetch failed: {event.error}")
        state.last_error = event.error
        return []

    # Wholesale replacement, never a merge
    state.emails = tuple(event.emails)
    state.loaded = True
    state.email_list.set_items(state.emails)
    state.last_error = None
    return []


def _on_body_done(state: ViewState, event: FetchBodyDone) -> list[Command]:
    if state.pending_email is None or event.email != state.pending_email:
        logger.debug(f"Ignoring body for {event.email}: not pending")
        return []

    state.pending_email = None
    state.loading = False

    if event.error is not None:
        state.last_error = event.error
        return []

    state.last_error = None
    state.current_email = event.email
    state.email_body = event.body
    state.mode = ViewMode.DETAIL
    state.viewport.set_content(event.body)
    state.viewport.goto_top()
    return []


def _on_mark_all_done(state: ViewState, event: MarkAllDone) -> list[Command]:
    _end_loading(state)
    # Reconcile with the (presumably now empty) unread set either way
    commands: list[Command] = [FetchList(blocking=False)]

    if event.error is not None:
        state.last_error = event.error
        commands.append(Notify(f"Mark all read failed: {event.error}", severity="error"))
    else:
        state.last_error = None
    return commands

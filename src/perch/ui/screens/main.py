# =============================================================================
# Main Screen
# =============================================================================
# The only screen in Perch, and the event loop that drives it.
#
# Everything that happens (keys, resizes, timers, finished provider calls) is
# turned into a perch.core event and posted back to this screen as an
# EventPosted message. Textual delivers those messages one at a time, so the
# handler below is the single serialization point: it runs the reducer,
# executes the commands it returns, and redraws the frame.
#
#   keyboard / resize / timers / workers
#               |
#               v
#     EventPosted message queue  --->  reducer.update(state, event)
#                                              |
#                                  commands    v
#     workers, timers, exit, notify  <---  _execute()
#                                              |
#                                              v
#                                   Static.update(render(state))
# =============================================================================

import logging
from datetime import datetime
from functools import partial

from textual import events
from textual.app import ComposeResult
from textual.message import Message as TextualMessage
from textual.screen import Screen
from textual.widgets import Static

from perch.core.events import (
    Command,
    Event,
    KeyPress,
    Notify,
    PROVIDER_COMMANDS,
    Quit,
    Resize,
    ScheduleSpinner,
    ScheduleTick,
    SpinnerTick,
    Started,
    Tick,
)
from perch.core.reducer import update
from perch.core.state import ViewOptions, ViewState
from perch.provider.base import MailProvider
from perch.runner import perform
from perch.ui.render import render

logger = logging.getLogger(__name__)


def normalize_key(key: str, character: str | None) -> str:
    """
    Map a Textual key to the names the reducer understands.

    Letters keep their case ("G" stays "G" rather than "shift+g") and "/"
    becomes "slash" whatever the keyboard layout reports.
    """
    if character == "/":
        return "slash"
    if character and len(character) == 1 and character.isalpha():
        return character
    return key


class MainScreen(Screen):
    """
    The unread-mail screen.

    Owns the ViewState for the lifetime of the app. No other object holds a
    reference to it.

    Attributes:
        provider: The mail provider commands run against.
        state: The view state (written only by the reducer).
    """

    CSS = """
    MainScreen {
        overflow: hidden;
    }

    #frame {
        width: 100%;
        height: 100%;
    }
    """

    class EventPosted(TextualMessage):
        """Carries one perch.core event into the screen's queue."""
        def __init__(self, event: Event) -> None:
            super().__init__()
            self.event = event

    def __init__(self, provider: MailProvider, options: ViewOptions | None = None) -> None:
        """
        Initialize the main screen.

        Args:
            provider: Mail provider to query.
            options: Refresh / display options from configuration.
        """
        super().__init__()
        self.provider = provider
        self.state = ViewState.initial(options)

    def compose(self) -> ComposeResult:
        yield Static(id="frame")

    def on_mount(self) -> None:
        """Kick off the initial fetch, refresh timer and spinner."""
        logger.info("Main screen mounted")
        size = self.app.size
        self.post_event(Resize(size.width, size.height))
        self.post_event(Started())

    # -------------------------------------------------------------------------
    # Input -> Events
    # -------------------------------------------------------------------------

    def post_event(self, event: Event) -> None:
        """Queue an event for the reducer. Safe to call from any coroutine."""
        self.post_message(self.EventPosted(event))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_event(
            KeyPress(key=normalize_key(event.key, event.character), character=event.character)
        )

    def on_resize(self, event: events.Resize) -> None:
        self.post_event(Resize(event.size.width, event.size.height))

    def _on_refresh_timer(self) -> None:
        self.post_event(Tick(datetime.now()))

    # -------------------------------------------------------------------------
    # Event Loop
    # -------------------------------------------------------------------------

    def on_main_screen_event_posted(self, message: EventPosted) -> None:
        """Apply one event to completion: reduce, execute, redraw."""
        logger.debug(f"Event: {message.event!r}")
        commands = update(self.state, message.event)
        for command in commands:
            self._execute(command)
        self.query_one("#frame", Static).update(render(self.state))

    def _execute(self, command: Command) -> None:
        """Carry out one command returned by the reducer."""
        if isinstance(command, PROVIDER_COMMANDS):
            self.run_worker(
                self._run_provider_command(command),
                name=type(command).__name__,
                group="provider",
                exit_on_error=False,
            )
        elif isinstance(command, ScheduleTick):
            # Rescheduled from every tick, so the cadence does not depend on
            # how long the fetch takes
            self.set_timer(command.delay, self._on_refresh_timer)
        elif isinstance(command, ScheduleSpinner):
            self.set_timer(command.delay, partial(self.post_event, SpinnerTick(command.tag)))
        elif isinstance(command, Notify):
            self.notify(command.message, severity=command.severity)
        elif isinstance(command, Quit):
            logger.info("Quit requested")
            self.app.exit(return_code=command.return_code)
        else:
            raise TypeError(f"Unknown command: {command!r}")

    async def _run_provider_command(self, command: Command) -> None:
        """Worker body: run the provider call and post its completion event."""
        event = await perform(command, self.provider)
        self.post_event(event)

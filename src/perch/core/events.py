# =============================================================================
# Events and Commands
# =============================================================================
# The reducer speaks two small closed vocabularies:
#
#   Events   - things that happened (key press, resize, timer, provider
#              query finished). Fed to the reducer one at a time.
#   Commands - things the reducer wants done (query the provider, schedule a
#              timer, quit). Executed by the screen / runner, never by the
#              reducer itself.
#
# Both are plain frozen dataclasses joined into union types, so handlers
# dispatch with isinstance() over a fixed set of variants.
# =============================================================================

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from perch.core.email import EmailSummary
from perch.core.errors import ProviderError


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Started:
    """The event loop is up. Triggers the initial fetch and timers."""


@dataclass(frozen=True)
class KeyPress:
    """
    A key from the terminal.

    Attributes:
        key: Normalized key name ("enter", "escape", "up", "q", "slash"...).
        character: The printable character, if the key produces one.
    """
    key: str
    character: str | None = None


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Periodic background refresh timer fired."""
    at: datetime


@dataclass(frozen=True)
class SpinnerTick:
    """Advance the loading spinner. Ticks with a stale tag are dropped."""
    tag: int


@dataclass(frozen=True)
class FetchListDone:
    """
    List fetch finished.

    Attributes:
        blocking: Copied from the FetchList that produced it. Only a
                  blocking fetch's completion clears `loading`.
    """
    emails: tuple[EmailSummary, ...] = ()
    error: ProviderError | None = None
    at: datetime | None = None
    blocking: bool = True


@dataclass(frozen=True)
class FetchBodyDone:
    """
    Body fetch finished.

    Attributes:
        email: The summary the fetch was issued for. Completions for anything
               other than the pending summary are ignored.
    """
    email: EmailSummary
    body: str = ""
    error: ProviderError | None = None


@dataclass(frozen=True)
class MarkAllDone:
    error: ProviderError | None = None


Event = Union[
    Started,
    KeyPress,
    Resize,
    Tick,
    SpinnerTick,
    FetchListDone,
    FetchBodyDone,
    MarkAllDone,
]


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchList:
    """
    Query the unread list.

    Attributes:
        blocking: The fetch raised the loading indicator and owns clearing
                  it. Silent background refreshes are not blocking.
    """
    blocking: bool = True


@dataclass(frozen=True)
class FetchBody:
    email: EmailSummary


@dataclass(frozen=True)
class MarkAllRead:
    pass


@dataclass(frozen=True)
class ScheduleTick:
    delay: float


@dataclass(frozen=True)
class ScheduleSpinner:
    delay: float
    tag: int


@dataclass(frozen=True)
class Notify:
    message: str
    severity: str = "information"   # "information", "warning" or "error"


@dataclass(frozen=True)
class Quit:
    return_code: int = 0


Command = Union[
    FetchList,
    FetchBody,
    MarkAllRead,
    ScheduleTick,
    ScheduleSpinner,
    Notify,
    Quit,
]

# Commands that talk to the mail provider (run off the event loop)
PROVIDER_COMMANDS = (FetchList, FetchBody, MarkAllRead)

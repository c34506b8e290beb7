# =============================================================================
# View State
# =============================================================================
# The single mutable record behind the UI. One instance lives for the whole
# process; only the reducer (perch.core.reducer.update) writes to it, one
# event at a time. The renderer reads it and nothing else holds a reference.
#
# Invariants (see ViewState.invariant_violations):
#   - mode is DETAIL exactly when current_email is set
#   - the list cursor is a valid index whenever the list is non-empty
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from perch.core.email import EmailSummary
from perch.core.errors import ProviderError
from perch.core.listing import EmailList
from perch.core.spinner import Spinner
from perch.core.viewport import Viewport


class ViewMode(Enum):
    """Which screen is showing."""
    LIST = "list"
    DETAIL = "detail"


@dataclass
class ViewOptions:
    """
    Behaviour knobs fed in from configuration.

    Attributes:
        refresh_interval: Seconds between background refresh ticks.
        manual_shows_loading: Whether a user-requested refresh ("r") blocks
                              the UI behind the loading indicator.
        background_shows_loading: Whether timer-driven refreshes do. Off by
                                  default so idle polling never flickers.
        time_format: strftime format for "last refreshed" times.
    """
    refresh_interval: float = 10.0
    manual_shows_loading: bool = True
    background_shows_loading: bool = False
    time_format: str = "%H:%M:%S"


@dataclass
class ViewState:
    """
    Everything the renderer needs to draw a frame.

    Attributes:
        mode: LIST or DETAIL.
        emails: Summaries from the most recent successful list fetch, in
                provider order.
        loaded: False until the first list fetch completes. An empty
                `emails` with loaded=True means "all caught up".
        current_email: The message shown in DETAIL mode.
        pending_email: The message whose body is being fetched. Set on
                       enter, cleared when the fetch completes.
        email_body: Body text of current_email.
        loading: True while a blocking command is outstanding.
        last_refresh: When the last list fetch completed (success or not).
        last_error: Most recent unacknowledged provider failure. Dominates
                    rendering while set.
        width, height: Last known terminal size in cells.
        email_list: Cursor / filter / paging state for the list view.
        viewport: Scroll state for the body in DETAIL mode.
        spinner: Loading animation state.
        options: Behaviour settings from configuration.
    """
    mode: ViewMode = ViewMode.LIST
    emails: tuple[EmailSummary, ...] = ()
    loaded: bool = False
    current_email: EmailSummary | None = None
    pending_email: EmailSummary | None = None
    email_body: str = ""
    loading: bool = True
    last_refresh: datetime | None = None
    last_error: ProviderError | None = None
    width: int = 0
    height: int = 0
    email_list: EmailList = field(default_factory=EmailList)
    viewport: Viewport = field(default_factory=Viewport)
    spinner: Spinner = field(default_factory=Spinner)
    options: ViewOptions = field(default_factory=ViewOptions)

    @classmethod
    def initial(cls, options: ViewOptions | None = None) -> "ViewState":
        """State at startup: list mode, nothing loaded, loading."""
        return cls(options=options or ViewOptions())

    @property
    def viewport_size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def selected_email(self) -> EmailSummary | None:
        """The list row under the cursor (None if the list is empty)."""
        return self.email_list.selected_item

    @property
    def selected_index(self) -> int | None:
        """Index into `emails` of the selected row, or None."""
        selected = self.selected_email
        if selected is None:
            return None
        return self.emails.index(selected)

    def invariant_violations(self) -> list[str]:
        """Describe every broken invariant. Empty list means consistent."""
        problems = []
        if (self.mode is ViewMode.DETAIL) != (self.current_email is not None):
            problems.append(
                f"mode={self.mode.value} but current_email="
                f"{'set' if self.current_email else 'unset'}"
            )
        if self.mode is ViewMode.LIST and self.email_list.visible_items:
            if not 0 <= self.email_list.cursor < len(self.email_list.visible_items):
                problems.append(f"cursor {self.email_list.cursor} out of range")
        if self.email_list.items != self.emails:
            problems.append("list items out of sync with emails")
        return problems

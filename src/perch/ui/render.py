# =============================================================================
# Renderer
# =============================================================================
# render(state) -> one full terminal frame as a rich renderable.
#
# The renderer is a pure function of the view state: it never mutates the
# state, never issues commands and never looks at the clock. Relative times
# ("5m ago") are measured against the last refresh, so rendering the same
# state twice always yields the same frame.
#
# Priority when several conditions hold:
#   1. last_error set       -> error panel (regardless of mode)
#   2. loading / not loaded -> spinner, nothing else
#   3. LIST, no emails      -> "All caught up!" panel
#   4. LIST                 -> list + status line + help bar
#   5. DETAIL               -> header, divider, scrolled body, help bar
# =============================================================================

from datetime import datetime

from rich import box
from rich.align import Align
from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from perch.core.email import EmailSummary, relative_time
from perch.core.listing import FilterState
from perch.core.state import ViewMode, ViewState
from perch.ui import theme


# Used until the first resize arrives
FALLBACK_SIZE = (80, 24)

# Below this width list rows drop the right-aligned time column
NARROW_WIDTH = 50

ERROR_BOX_WIDTH = 60

LIST_TITLE = "Unread Emails"


def render(state: ViewState) -> RenderableType:
    """
    Render the whole frame for `state`.

    Returns:
        A rich renderable sized to the terminal (state.width x state.height).
    """
    if state.last_error is not None:
        return render_error(state)
    if state.loading or not state.loaded:
        return render_loading(state)
    if state.mode is ViewMode.LIST and not state.emails:
        return render_empty(state)
    if state.mode is ViewMode.LIST:
        return render_list(state)
    return render_detail(state)


# =============================================================================
# Helpers
# =============================================================================

def _size(state: ViewState) -> tuple[int, int]:
    if state.width <= 0 or state.height <= 0:
        return FALLBACK_SIZE
    return state.width, state.height


def _line(*parts, style="") -> Text:
    """One frame row that never wraps onto the next."""
    return Text.assemble(*parts, style=style, no_wrap=True, overflow="ellipsis")


def help_bar(width: int, bindings: list[tuple[str, str]]) -> Text:
    """Render a full-width bar of key / description pairs."""
    bar = Text(style=theme.HELP_BAR, no_wrap=True, overflow="crop")
    for i, (key, description) in enumerate(bindings):
        if i:
            bar.append(" ")
        bar.append(f" {key} ", style=theme.HELP_KEY)
        bar.append(f" {description} ", style=theme.HELP_DESC)
    bar.align("left", width)
    return bar


def _refresh_info(state: ViewState, label: str) -> str:
    interval = f"{state.options.refresh_interval:g}s"
    if state.last_refresh is None:
        return f"{label}: never • Auto-refresh: {interval}"
    stamp = state.last_refresh.strftime(state.options.time_format)
    return f"{label} {stamp} • Auto-refresh: {interval}"


def _relative(email: EmailSummary, now: datetime | None) -> str:
    if now is None:
        return email.received
    return relative_time(email.received, now)


# =============================================================================
# Views
# =============================================================================

def render_error(state: ViewState) -> RenderableType:
    width, height = _size(state)
    error = state.last_error

    panel = Panel(
        Group(
            Text("Error", style=theme.ERROR_TITLE),
            Text(),
            Text(str(error) or type(error).__name__, style=theme.ERROR_MESSAGE),
            Text(),
            Text(error.hint, style=theme.ERROR_HINT),
            Text(),
            Text("'r' retry • 'q' quit", style=theme.ERROR_HINT),
        ),
        box=box.ROUNDED,
        border_style=theme.ERROR_BORDER,
        padding=(1, 2),
        width=min(ERROR_BOX_WIDTH, max(20, width - 2)),
    )
    return Align.center(panel, vertical="middle", width=width, height=height)


def render_loading(state: ViewState) -> RenderableType:
    width, height = _size(state)
    line = Text.assemble((state.spinner.view(), theme.SPINNER), " Loading...")
    return Align.center(line, vertical="middle", width=width, height=height)


def render_empty(state: ViewState) -> RenderableType:
    width, height = _size(state)
    content = Group(
        Text("All caught up!", style=theme.EMPTY_TITLE, justify="center"),
        Text(),
        Text("No unread emails in your inbox.", style=theme.EMPTY_SUBTITLE, justify="center"),
        Text(),
        Text(_refresh_info(state, "Last checked:"), style=theme.TIME_INFO, justify="center"),
    )
    return Group(
        Align.center(content, vertical="middle", width=width, height=max(1, height - 1)),
        help_bar(width, [("r", "refresh"), ("q", "quit")]),
    )


def render_list(state: ViewState) -> RenderableType:
    width, height = _size(state)
    email_list = state.email_list
    list_height = max(1, height - 4)

    count = len(state.emails)
    title = f" {LIST_TITLE} ({count}) " if count else f" {LIST_TITLE} "
    lines: list[Text] = [
        _line((title, theme.TITLE)),
        _status_line(state),
        Text(),
    ]

    for index, email in email_list.page_items():
        lines.extend(_list_item(email, index == email_list.cursor, width, state.last_refresh))

    if email_list.total_pages > 1:
        dots = _line("  ")
        for page in range(email_list.total_pages):
            style = theme.PAGE_ACTIVE if page == email_list.page else theme.PAGE_INACTIVE
            dots.append("•", style=style)
        lines.append(dots)

    # Pad (or clip) the list area to a fixed height
    lines = lines[:list_height]
    lines.extend(Text() for _ in range(list_height - len(lines)))

    lines.append(_line(" " + _refresh_info(state, "Updated"), style=theme.TIME_INFO))
    if email_list.is_filtering:
        bindings = [("enter", "apply filter"), ("esc", "cancel")]
    else:
        bindings = [
            ("enter", "read"),
            ("r", "refresh"),
            ("a", "mark all read"),
            ("/", "filter"),
            ("q", "quit"),
        ]
    lines.append(help_bar(width, bindings))
    return Group(*lines)


def _status_line(state: ViewState) -> Text:
    email_list = state.email_list
    visible = len(email_list.visible_items)
    noun = "item" if visible == 1 else "items"

    if email_list.filter_state is FilterState.FILTERING:
        return _line(("Filter: ", theme.STATUS), (email_list.filter_text + "█", theme.ITEM_TITLE))
    if email_list.filter_state is FilterState.APPLIED:
        if not visible:
            return _line(f"No items match “{email_list.filter_text}”", style=theme.STATUS)
        hidden = len(email_list.items) - visible
        return _line(
            f"“{email_list.filter_text}” {visible} {noun} • {hidden} filtered",
            style=theme.STATUS,
        )
    return _line(f"{visible} {noun}", style=theme.STATUS)


def _list_item(email: EmailSummary, selected: bool, width: int, now: datetime | None) -> list[Text]:
    """Three rows: subject (+ time), sender, spacer."""
    subject = email.title
    max_subject = max(10, width - 16)
    if len(subject) > max_subject:
        subject = subject[: max_subject - 1] + "…"

    if selected:
        border = Text("│", style=theme.SELECTED_BORDER)
        title_style, time_style, sender_style = (
            theme.SELECTED_TITLE, theme.SELECTED_TIME, theme.SELECTED_SENDER,
        )
    else:
        border = Text(" ")
        title_style, time_style, sender_style = (
            theme.ITEM_TITLE, theme.ITEM_TIME, theme.ITEM_SENDER,
        )

    title = Text("  " + subject, style=title_style)

    if width < NARROW_WIDTH:
        # No room for a time column: show it with the sender instead
        description = email.description(now) if now else email.sender
        return [
            _line(border, title),
            _line(border, Text("  " + description, style=sender_style)),
            Text(),
        ]

    when = Text(_relative(email, now), style=time_style)
    gap = max(1, width - title.cell_len - when.cell_len - 4)
    return [
        _line(border, title, " " * gap, when),
        _line(border, Text("  " + email.sender, style=sender_style)),
        Text(),
    ]


def render_detail(state: ViewState) -> RenderableType:
    width, _ = _size(state)
    email = state.current_email
    viewport = state.viewport

    body = [_line(line, style=theme.BODY) for line in viewport.visible_lines()]
    body.extend(Text() for _ in range(viewport.height - len(body)))

    panel = Panel(
        Group(
            _line(email.title, style=theme.HEADER),
            Text(),
            _line(("From: ", theme.META), (email.sender, theme.META_SENDER)),
            _line(("Date: ", theme.META), (email.received, theme.META_DATE)),
            Rule(style=theme.DIVIDER),
            Text(),
            *body,
        ),
        box=box.ROUNDED,
        border_style=theme.DETAIL_BORDER,
        padding=(1, 2),
        width=max(20, width - 4),
    )

    bindings = [
        ("q", "back"),
        ("esc", "back to list"),
        (f"{round(viewport.scroll_percent * 100)}%", "read"),
    ]
    # Only offer scrolling when the body doesn't fit
    if not (viewport.at_top and viewport.at_bottom):
        bindings.insert(0, ("↑/↓", "scroll"))

    return Group(Padding(panel, (0, 0, 0, 2)), help_bar(width, bindings))

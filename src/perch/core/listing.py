# =============================================================================
# Email List Model
# =============================================================================
# The list collaborator: owns cursor position, paging and filtering over the
# current sequence of EmailSummary items. The reducer hands it navigation and
# filter keys and only reads back the selected item.
#
# Motion rules:
#   - up/down move one row, clamped (no wrap-around)
#   - page keys move by a full page of rows
#   - home/end jump to the first/last visible row
#
# Filtering:
#   - "/" enters filter mode; typed characters edit the filter text
#   - enter applies the filter (or clears it when empty), escape cancels
#   - while a filter is applied, escape clears it
#   - matching is a case-insensitive substring test on filter_value
# =============================================================================

from enum import Enum, auto
from typing import Sequence

from perch.core.email import EmailSummary


class FilterState(Enum):
    """Filter lifecycle of the list."""
    UNFILTERED = auto()     # No filter
    FILTERING = auto()      # User is typing a filter
    APPLIED = auto()        # Filter text fixed, list navigable


class EmailList:
    """
    Cursor, paging and filter state for the unread list.

    Attributes:
        width: Width of the list area in cells.
        height: Height of the list area in rows (title and status included).
        cursor: Index into visible_items of the selected row.
        filter_text: Current filter text.
        filter_state: Where the filter is in its lifecycle.
    """

    # Rows per item: title line, description line, spacer
    ITEM_HEIGHT = 3

    # Rows above the items: title, status, blank
    CHROME_HEIGHT = 3

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.cursor = 0
        self.filter_text = ""
        self.filter_state = FilterState.UNFILTERED
        self._items: tuple[EmailSummary, ...] = ()

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    @property
    def items(self) -> tuple[EmailSummary, ...]:
        """All items, unfiltered."""
        return self._items

    def set_items(self, items: Sequence[EmailSummary]) -> None:
        """Replace the items. The cursor stays put but is clamped to bounds."""
        self._items = tuple(items)
        self._clamp()

    @property
    def visible_items(self) -> tuple[EmailSummary, ...]:
        """Items that pass the current filter."""
        if self.filter_state is FilterState.UNFILTERED or not self.filter_text:
            return self._items
        needle = self.filter_text.lower()
        return tuple(i for i in self._items if needle in i.filter_value.lower())

    @property
    def selected_item(self) -> EmailSummary | None:
        visible = self.visible_items
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    @property
    def is_filtering(self) -> bool:
        """True while the user is typing a filter."""
        return self.filter_state is FilterState.FILTERING

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def set_size(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)

    @property
    def per_page(self) -> int:
        """Number of items that fit on one page."""
        return max(1, (self.height - self.CHROME_HEIGHT) // self.ITEM_HEIGHT)

    @property
    def page(self) -> int:
        return self.cursor // self.per_page

    @property
    def total_pages(self) -> int:
        count = len(self.visible_items)
        return max(1, -(-count // self.per_page))

    def page_items(self) -> list[tuple[int, EmailSummary]]:
        """(visible index, item) pairs on the cursor's page."""
        start = self.page * self.per_page
        visible = self.visible_items
        return list(enumerate(visible[start:start + self.per_page], start=start))

    # -------------------------------------------------------------------------
    # Motion
    # -------------------------------------------------------------------------

    def cursor_up(self) -> None:
        self.cursor -= 1
        self._clamp()

    def cursor_down(self) -> None:
        self.cursor += 1
        self._clamp()

    def prev_page(self) -> None:
        self.cursor -= self.per_page
        self._clamp()

    def next_page(self) -> None:
        self.cursor += self.per_page
        self._clamp()

    def go_to_start(self) -> None:
        self.cursor = 0

    def go_to_end(self) -> None:
        self.cursor = len(self.visible_items) - 1
        self._clamp()

    def _clamp(self) -> None:
        last = len(self.visible_items) - 1
        self.cursor = max(0, min(self.cursor, last))

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def start_filter(self) -> None:
        self.filter_state = FilterState.FILTERING
        self.cursor = 0

    def apply_filter(self) -> None:
        if self.filter_text:
            self.filter_state = FilterState.APPLIED
        else:
            self.reset_filter()
        self._clamp()

    def reset_filter(self) -> None:
        self.filter_text = ""
        self.filter_state = FilterState.UNFILTERED
        self._clamp()

    # -------------------------------------------------------------------------
    # Key Handling
    # -------------------------------------------------------------------------

    _MOTIONS = {
        "up": "cursor_up",
        "k": "cursor_up",
        "down": "cursor_down",
        "j": "cursor_down",
        "pageup": "prev_page",
        "left": "prev_page",
        "h": "prev_page",
        "pagedown": "next_page",
        "right": "next_page",
        "l": "next_page",
        "home": "go_to_start",
        "g": "go_to_start",
        "end": "go_to_end",
        "G": "go_to_end",
    }

    def handle_key(self, key: str, character: str | None = None) -> bool:
        """
        Apply a key to the list.

        Returns:
            True if the list consumed the key, False if the caller should
            handle it.
        """
        if self.is_filtering:
            return self._handle_filter_key(key, character)

        if key in self._MOTIONS:
            getattr(self, self._MOTIONS[key])()
            return True
        if key == "slash":
            self.start_filter()
            return True
        if key == "escape" and self.filter_state is FilterState.APPLIED:
            self.reset_filter()
            return True
        return False

    def _handle_filter_key(self, key: str, character: str | None) -> bool:
        # Filter mode swallows every key; nothing reaches the reducer
        if key == "escape":
            self.reset_filter()
        elif key == "enter":
            self.apply_filter()
        elif key == "backspace":
            self.filter_text = self.filter_text[:-1]
            self._clamp()
        elif key == "up":
            self.cursor_up()
        elif key == "down":
            self.cursor_down()
        elif character and character.isprintable():
            self.filter_text += character
            self.cursor = 0
        return True

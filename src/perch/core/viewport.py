# =============================================================================
# Viewport Model
# =============================================================================
# A vertically scrollable window over a block of text, used for the message
# body in the detail view. Content is wrapped to the viewport width; the
# scroll offset is always clamped so the last page stays full.
# =============================================================================

import textwrap


class Viewport:
    """
    Scrollable text window.

    Usage:
        >>> vp = Viewport(width=40, height=10)
        >>> vp.set_content(body)
        >>> vp.scroll_down(3)
        >>> vp.visible_lines()
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.y_offset = 0
        self._content = ""
        self._lines: list[str] = []

    @property
    def content(self) -> str:
        return self._content

    @property
    def lines(self) -> list[str]:
        """Content wrapped to the current width."""
        return self._lines

    def set_content(self, content: str) -> None:
        self._content = content
        self._rewrap()

    def set_size(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._rewrap()

    def _rewrap(self) -> None:
        lines: list[str] = []
        for raw in self._content.expandtabs(4).splitlines():
            if self.width <= 0 or len(raw) <= self.width:
                lines.append(raw)
            else:
                lines.extend(
                    textwrap.wrap(raw, self.width, drop_whitespace=True) or [""]
                )
        self._lines = lines
        self._clamp()

    # -------------------------------------------------------------------------
    # Scrolling
    # -------------------------------------------------------------------------

    @property
    def max_offset(self) -> int:
        return max(0, len(self._lines) - self.height)

    @property
    def at_top(self) -> bool:
        return self.y_offset <= 0

    @property
    def at_bottom(self) -> bool:
        return self.y_offset >= self.max_offset

    @property
    def scroll_percent(self) -> float:
        """0.0 at the top, 1.0 at the bottom (or when everything fits)."""
        if self.max_offset == 0:
            return 1.0
        return self.y_offset / self.max_offset

    def scroll_up(self, n: int = 1) -> None:
        self.y_offset -= n
        self._clamp()

    def scroll_down(self, n: int = 1) -> None:
        self.y_offset += n
        self._clamp()

    def page_up(self) -> None:
        self.scroll_up(max(1, self.height))

    def page_down(self) -> None:
        self.scroll_down(max(1, self.height))

    def half_page_up(self) -> None:
        self.scroll_up(max(1, self.height // 2))

    def half_page_down(self) -> None:
        self.scroll_down(max(1, self.height // 2))

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self.max_offset

    def _clamp(self) -> None:
        self.y_offset = max(0, min(self.y_offset, self.max_offset))

    def visible_lines(self) -> list[str]:
        return self._lines[self.y_offset:self.y_offset + self.height]

    # -------------------------------------------------------------------------
    # Key Handling
    # -------------------------------------------------------------------------

    _KEYS = {
        "up": "scroll_up",
        "k": "scroll_up",
        "down": "scroll_down",
        "j": "scroll_down",
        "pageup": "page_up",
        "b": "page_up",
        "pagedown": "page_down",
        "f": "page_down",
        "space": "page_down",
        "u": "half_page_up",
        "d": "half_page_down",
        "home": "goto_top",
        "g": "goto_top",
        "end": "goto_bottom",
        "G": "goto_bottom",
    }

    def handle_key(self, key: str) -> bool:
        """Apply a scroll key. Returns True if the key was consumed."""
        method = self._KEYS.get(key)
        if method is None:
            return False
        getattr(self, method)()
        return True

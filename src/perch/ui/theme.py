# =============================================================================
# Theme
# =============================================================================
# Colors and named styles used by the renderer. Purely cosmetic.
# =============================================================================

from rich.style import Style


# Palette
ACCENT = "#2563EB"
SUBTLE = "#6B7280"
SENDER = "#60A5FA"
DATE = "#93C5FD"
TEXT = "#E5E7EB"
DIM = "#4B5563"
SUCCESS = "#34D399"
ERROR = "#FF6B6B"
WHITE = "#FFFFFF"
HELP_KEY_BG = "#3F3F46"
HELP_DESC_FG = "#A1A1AA"
HELP_BAR_BG = "#27272A"

# List
TITLE = Style(bold=True, color=WHITE, bgcolor=ACCENT)
STATUS = Style(color=SUBTLE, italic=True)
SELECTED_BORDER = Style(color=ACCENT, bold=True)
SELECTED_TITLE = Style(color=ACCENT, bold=True)
SELECTED_TIME = Style(color=DATE)
SELECTED_SENDER = Style(color=SENDER)
ITEM_TITLE = Style(color=TEXT)
ITEM_TIME = Style(color=DIM)
ITEM_SENDER = Style(color=SUBTLE)
PAGE_ACTIVE = Style(color=TEXT)
PAGE_INACTIVE = Style(color=DIM)
TIME_INFO = Style(color=DIM, italic=True)

# Detail
HEADER = Style(bold=True, color=ACCENT)
META = Style(color=SUBTLE)
META_SENDER = Style(color=SENDER)
META_DATE = Style(color=DATE)
BODY = Style(color=TEXT)
DIVIDER = Style(color=DIM)
DETAIL_BORDER = Style(color=ACCENT)

# Panels
SPINNER = Style(color=ACCENT)
EMPTY_TITLE = Style(color=SUCCESS, bold=True)
EMPTY_SUBTITLE = Style(color=SUBTLE, italic=True)
ERROR_BORDER = Style(color=ERROR)
ERROR_TITLE = Style(color=ERROR, bold=True)
ERROR_MESSAGE = Style(color=TEXT)
ERROR_HINT = Style(color=SUBTLE, italic=True)

# Help bar
HELP_KEY = Style(bold=True, color=WHITE, bgcolor=HELP_KEY_BG)
HELP_DESC = Style(color=HELP_DESC_FG, bgcolor=HELP_BAR_BG)
HELP_BAR = Style(bgcolor=HELP_BAR_BG)

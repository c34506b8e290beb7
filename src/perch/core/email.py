# =============================================================================
# Email Summary Model
# =============================================================================
# A single row of the unread list, as reported by the mail provider.
#
# IMPORTANT: provider_index is a *position*, not an identifier. It is the
# 1-based slot of the message within the provider's unread set at the moment
# of the list query that produced it. If the unread set changes before the
# body is fetched (another client reads a message, new mail shifts ordering),
# the same index can point at a different message. We do not paper over
# this: body content is best effort if the mailbox changed concurrently.
# =============================================================================

from dataclasses import dataclass
from datetime import datetime


# Date formats Mail.app produces for `date received as string`, depending on
# the user's locale and system settings. Tried in order.
DATE_FORMATS = (
    "%A, %B %d, %Y at %I:%M:%S %p",     # Monday, January 2, 2006 at 3:04:05 PM
    "%A, %d %B %Y at %I:%M:%S %p",      # Monday, 2 January 2006 at 3:04:05 PM
    "%B %d, %Y at %I:%M:%S %p",         # January 2, 2006 at 3:04:05 PM
    "%d %B %Y at %I:%M:%S %p",          # 2 January 2006 at 3:04:05 PM
    "%m/%d/%y, %I:%M %p",               # 1/2/06, 3:04 PM
    "%Y-%m-%d %H:%M:%S",                # 2006-01-02 15:04:05
    "%a %b %d %H:%M:%S %Y",             # Mon Jan 2 15:04:05 2006
)


def parse_received(date_string: str) -> datetime | None:
    """
    Parse a provider-formatted date string.

    Returns:
        A naive datetime, or None if no known format matches.
    """
    # macOS uses a narrow no-break space before AM/PM on recent releases
    cleaned = date_string.replace("\u202f", " ").strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def relative_time(date_string: str, now: datetime) -> str:
    """
    Describe how long before `now` a message was received.

    Unparseable dates are returned unchanged so the user still sees
    whatever the provider reported.

    Example:
        >>> relative_time("2024-01-15 10:00:00", datetime(2024, 1, 15, 10, 5))
        '5m ago'
    """
    received = parse_received(date_string)
    if received is None:
        return date_string

    seconds = (now - received).total_seconds()
    if seconds < 60:
        # Includes clock skew (received "in the future")
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 24 * 3600:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 48 * 3600:
        return "yesterday"
    return f"{int(seconds // (24 * 3600))}d ago"


@dataclass(frozen=True)
class EmailSummary:
    """
    One unread message as listed by the provider.

    Instances are immutable. Every list fetch produces a brand new sequence
    of summaries that replaces the previous one wholesale.

    Attributes:
        sender: Sender as the provider formats it ("Name <addr>").
        subject: Subject line (may be empty).
        received: Received date string, opaque and provider-formatted.
        provider_index: 1-based position in the provider's unread set at the
                        time of the list query. Not stable across refreshes.

    The list widget consumes summaries through three members
    (title, description, filter_value) instead of knowing the class.
    """

    sender: str
    subject: str
    received: str
    provider_index: int

    @property
    def title(self) -> str:
        """Primary line shown in the list."""
        return self.subject or "(no subject)"

    def description(self, now: datetime) -> str:
        """Secondary line: sender and relative received time."""
        return f"{self.sender} • {relative_time(self.received, now)}"

    @property
    def filter_value(self) -> str:
        """Text matched against the list filter."""
        return self.subject

    def __str__(self) -> str:
        return f"#{self.provider_index} {self.title} <{self.sender}>"

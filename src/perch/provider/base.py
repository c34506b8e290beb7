# =============================================================================
# Mail Provider Contract
# =============================================================================
# The provider is whatever actually talks to the mail client. Perch only needs
# three blocking, fallible operations from it:
#
#   list_unread()        -> up to N unread summaries, provider-native order
#   fetch_body(index)    -> plain text body of the message at that 1-based
#                           position in the *current* unread set; marks it read
#   mark_all_read()      -> marks every unread message read
#
# Failures are raised as ProviderError subclasses (see perch.core.errors).
# Providers never retry on their own; retrying is always a user action.
# =============================================================================

from typing import Protocol, Sequence

from perch.core.email import EmailSummary
from perch.core.errors import (
    IndexStale,
    PermissionDenied,
    ProviderError,
    ProviderUnavailable,
    UnknownProviderError,
)

__all__ = [
    "DEFAULT_MAX_UNREAD",
    "MailProvider",
    "ProviderError",
    "ProviderUnavailable",
    "PermissionDenied",
    "IndexStale",
    "UnknownProviderError",
]


# Default cap on the number of summaries a provider returns
DEFAULT_MAX_UNREAD = 20


class MailProvider(Protocol):
    """Structural interface every provider implements."""

    def list_unread(self) -> Sequence[EmailSummary]:
        ...

    def fetch_body(self, provider_index: int) -> str:
        ...

    def mark_all_read(self) -> None:
        ...

# =============================================================================
# In-Memory Provider
# =============================================================================
# A provider that keeps its mailbox in a Python list. Used by `perch --demo`
# (no Mail.app needed) and by the test suite.
#
# It follows the same positional contract as the real provider: indices are
# 1-based positions within the unread set *as it is at call time*, so it
# reproduces the stale-index hazard faithfully.
# =============================================================================

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from perch.core.email import EmailSummary
from perch.provider.base import DEFAULT_MAX_UNREAD, IndexStale, ProviderError

logger = logging.getLogger(__name__)


@dataclass
class StoredMessage:
    """A message held by MemoryProvider."""
    sender: str
    subject: str
    received: str
    body: str = ""
    read: bool = False


class MemoryProvider:
    """
    Mail provider over an in-memory mailbox.

    Attributes:
        messages: All messages, read and unread, in mailbox order.
        max_unread: Cap on the number of summaries returned by list_unread.
        failures: Operation name ("list_unread", "fetch_body",
                  "mark_all_read") -> error raised by the next call to it.
        calls: Names of operations invoked, in order.

    Example:
        >>> provider = MemoryProvider([StoredMessage("a@b", "Hi", "", "Hello")])
        >>> provider.fetch_body(1)
        'Hello'
    """

    def __init__(
        self,
        messages: list[StoredMessage] | None = None,
        max_unread: int = DEFAULT_MAX_UNREAD,
    ) -> None:
        self.messages = list(messages or [])
        self.max_unread = max_unread
        self.failures: dict[str, ProviderError] = {}
        self.calls: list[str] = []
        # Commands run on worker threads
        self._lock = threading.Lock()

    def _unread(self) -> list[StoredMessage]:
        return [m for m in self.messages if not m.read]

    def _check_failure(self, operation: str) -> None:
        self.calls.append(operation)
        error = self.failures.pop(operation, None)
        if error is not None:
            logger.debug(f"Injected failure for {operation}: {error}")
            raise error

    def list_unread(self) -> list[EmailSummary]:
        with self._lock:
            self._check_failure("list_unread")
            unread = self._unread()[: self.max_unread]
            return [
                EmailSummary(
                    sender=m.sender,
                    subject=m.subject,
                    received=m.received,
                    provider_index=i,
                )
                for i, m in enumerate(unread, start=1)
            ]

    def fetch_body(self, provider_index: int) -> str:
        with self._lock:
            self._check_failure("fetch_body")
            unread = self._unread()
            if not 1 <= provider_index <= len(unread):
                raise IndexStale(
                    f"Can't get message {provider_index}: "
                    f"only {len(unread)} unread (index out of range)"
                )
            message = unread[provider_index - 1]
            message.read = True
            return message.body

    def mark_all_read(self) -> None:
        with self._lock:
            self._check_failure("mark_all_read")
            for message in self.messages:
                message.read = True


def demo_provider(now: datetime | None = None) -> MemoryProvider:
    """Build a MemoryProvider with a handful of sample unread messages."""
    now = now or datetime.now()

    def stamp(delta: timedelta) -> str:
        return (now - delta).strftime("%Y-%m-%d %H:%M:%S")

    return MemoryProvider([
        StoredMessage(
            sender="Ada Lovelace <ada@example.com>",
            subject="Notes on the Analytical Engine",
            received=stamp(timedelta(minutes=3)),
            body=(
                "Hi,\n\nI've attached my translation with notes A through G.\n"
                "Note G has the Bernoulli numbers program.\n\nAda"
            ),
        ),
        StoredMessage(
            sender="Build Bot <ci@example.com>",
            subject="[perch] main: all checks passed",
            received=stamp(timedelta(hours=2)),
            body="All 214 tests passed in 12.3s.",
        ),
        StoredMessage(
            sender="Grace Hopper <grace@example.com>",
            subject="Found a bug (literally)",
            received=stamp(timedelta(days=1, hours=1)),
            body="Relay #70, panel F. Taped it into the logbook.\n\nG.",
        ),
        StoredMessage(
            sender="Newsletter <news@example.com>",
            subject="This week in terminals",
            received=stamp(timedelta(days=4)),
            body="\n".join(f"Item {i}: something about terminals." for i in range(1, 60)),
        ),
    ])

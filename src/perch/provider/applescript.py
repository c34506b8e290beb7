# =============================================================================
# Apple Mail Provider
# =============================================================================
# Talks to Mail.app by running AppleScript through `osascript`.
#
# Every call is a blocking subprocess. Callers are expected to run these off
# the UI event loop (see perch.runner).
#
# Error classification uses the AppleScript error number that osascript
# prints to stderr, e.g.:
#
#   execution error: Mail got an error: Application isn't running. (-600)
#
# Known numbers:
#   -600, -609      Application isn't running / connection invalid
#   -1743, -10004   Not authorized to send Apple events / privilege violation
#   -1719, -1728    Invalid index / can't get item (unread set shrank)
#
# There is deliberately no timeout: a hung Mail.app hangs only the command
# waiting on it, not the UI.
# =============================================================================

import logging
import re
import subprocess

from perch.core.email import EmailSummary
from perch.provider.base import (
    DEFAULT_MAX_UNREAD,
    IndexStale,
    PermissionDenied,
    ProviderError,
    ProviderUnavailable,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)


# Field separator in list output. Chosen to be vanishingly unlikely in a
# subject line or sender name.
FIELD_SEPARATOR = "|||"

LIST_UNREAD_SCRIPT = """
tell application "Mail"
	set output to ""
	set unreadMessages to (messages of inbox whose read status is false)
	set msgCount to count of unreadMessages
	if msgCount > {limit} then set msgCount to {limit}
	repeat with i from 1 to msgCount
		set msg to item i of unreadMessages
		set senderAddr to sender of msg
		set subjectLine to subject of msg
		set dateReceived to date received of msg
		set output to output & (i as string) & "|||" & senderAddr & "|||" & subjectLine & "|||" & (dateReceived as string) & "
"
	end repeat
	return output
end tell
"""

FETCH_BODY_SCRIPT = """
tell application "Mail"
	set unreadMessages to (messages of inbox whose read status is false)
	set msg to item {index} of unreadMessages
	set msgContent to content of msg
	set read status of msg to true
	return msgContent
end tell
"""

MARK_ALL_READ_SCRIPT = """
tell application "Mail"
	set unreadMessages to (messages of inbox whose read status is false)
	repeat with msg in unreadMessages
		set read status of msg to true
	end repeat
end tell
"""

_ERROR_NUMBER = re.compile(r"\((-?\d+)\)\s*$")

_UNAVAILABLE_CODES = {-600, -609}
_PERMISSION_CODES = {-1743, -10004}
_STALE_INDEX_CODES = {-1719, -1728}


def classify_error(stderr: str, returncode: int) -> ProviderError:
    """
    Map an osascript failure to the provider error taxonomy.

    Args:
        stderr: osascript's standard error output.
        returncode: osascript's exit status.

    Returns:
        The ProviderError subclass instance describing the failure.
    """
    message = stderr.strip() or f"osascript exited with status {returncode}"

    match = _ERROR_NUMBER.search(message)
    code = int(match.group(1)) if match else None

    if code in _UNAVAILABLE_CODES:
        return ProviderUnavailable(message)
    if code in _PERMISSION_CODES:
        return PermissionDenied(message)
    if code in _STALE_INDEX_CODES:
        return IndexStale(message)
    return UnknownProviderError(message)


def parse_unread_listing(output: str) -> list[EmailSummary]:
    """
    Parse the `|||`-separated lines produced by LIST_UNREAD_SCRIPT.

    Malformed lines are skipped. Order is preserved.
    """
    emails: list[EmailSummary] = []
    for line in output.strip().splitlines():
        if not line.strip():
            continue
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < 4:
            logger.debug(f"Skipping malformed listing line: {line!r}")
            continue
        try:
            index = int(parts[0].strip())
        except ValueError:
            logger.debug(f"Skipping listing line with bad index: {line!r}")
            continue
        emails.append(
            EmailSummary(
                sender=parts[1].strip(),
                # Subjects may legitimately contain the separator
                subject=FIELD_SEPARATOR.join(parts[2:-1]).strip(),
                received=parts[-1].strip(),
                provider_index=index,
            )
        )
    return emails


class AppleMailProvider:
    """
    Mail provider backed by Mail.app automation.

    Usage:
        >>> provider = AppleMailProvider(max_unread=20)
        >>> emails = provider.list_unread()
        >>> body = provider.fetch_body(emails[0].provider_index)
    """

    def __init__(self, max_unread: int = DEFAULT_MAX_UNREAD) -> None:
        self.max_unread = max_unread

    def list_unread(self) -> list[EmailSummary]:
        output = self._run(LIST_UNREAD_SCRIPT.format(limit=self.max_unread))
        emails = parse_unread_listing(output)
        logger.debug(f"Listed {len(emails)} unread messages")
        return emails

    def fetch_body(self, provider_index: int) -> str:
        if provider_index < 1:
            raise IndexStale(f"Invalid message position: {provider_index}")
        return self._run(FETCH_BODY_SCRIPT.format(index=int(provider_index))).strip()

    def mark_all_read(self) -> None:
        self._run(MARK_ALL_READ_SCRIPT)

    def _run(self, script: str) -> str:
        """Run an AppleScript and return its stdout, raising ProviderError."""
        logger.debug("Running osascript")
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ProviderUnavailable(
                "osascript not found. Perch's Mail.app backend requires macOS."
            ) from e
        except OSError as e:
            raise UnknownProviderError(f"Could not run osascript: {e}") from e

        if result.returncode != 0:
            error = classify_error(result.stderr or "", result.returncode)
            logger.warning(f"osascript failed ({type(error).__name__}): {error}")
            raise error

        return result.stdout

# =============================================================================
# Command Runner
# =============================================================================
# Turns provider commands into completion events.
#
# Provider calls block (AppleScript round trips can take seconds), so each
# one is pushed onto a worker thread with asyncio.to_thread() and awaited.
# Whatever happens, the caller gets back exactly one event: the success
# payload, or the failure converted into a ProviderError. Nothing is
# retried here; retrying is always a user action.
# =============================================================================

import asyncio
import logging
from datetime import datetime

from perch.core.errors import ProviderError, UnknownProviderError
from perch.core.events import (
    Command,
    Event,
    FetchBody,
    FetchBodyDone,
    FetchList,
    FetchListDone,
    MarkAllDone,
    MarkAllRead,
)
from perch.provider.base import MailProvider

logger = logging.getLogger(__name__)


def as_provider_error(exc: BaseException) -> ProviderError:
    """Wrap anything that isn't already a ProviderError."""
    if isinstance(exc, ProviderError):
        return exc
    wrapped = UnknownProviderError(f"{type(exc).__name__}: {exc}")
    wrapped.__cause__ = exc
    return wrapped


async def perform(command: Command, provider: MailProvider) -> Event:
    """
    Run one provider command off the event loop.

    Args:
        command: FetchList, FetchBody or MarkAllRead.
        provider: The mail provider to call.

    Returns:
        The matching completion event (FetchListDone, FetchBodyDone or
        MarkAllDone), carrying either the result or the error.

    Raises:
        TypeError: If `command` is not a provider command.
    """
    name = type(command).__name__
    logger.debug(f"Running {name}")

    if isinstance(command, FetchList):
        try:
            emails = await asyncio.to_thread(provider.list_unread)
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            return FetchListDone(
                error=as_provider_error(e), at=datetime.now(), blocking=command.blocking
            )
        logger.debug(f"{name} returned {len(emails)} summaries")
        return FetchListDone(
            emails=tuple(emails), at=datetime.now(), blocking=command.blocking
        )

    if isinstance(command, FetchBody):
        try:
            body = await asyncio.to_thread(
                provider.fetch_body, command.email.provider_index
            )
        except Exception as e:
            logger.warning(f"{name} #{command.email.provider_index} failed: {e}")
            return FetchBodyDone(email=command.email, error=as_provider_error(e))
        return FetchBodyDone(email=command.email, body=body)

    if isinstance(command, MarkAllRead):
        try:
            await asyncio.to_thread(provider.mark_all_read)
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            return MarkAllDone(error=as_provider_error(e))
        return MarkAllDone()

    raise TypeError(f"Not a provider command: {command!r}")

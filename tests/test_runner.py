# =============================================================================
# Command Runner Tests
# =============================================================================
# perform() against the in-memory provider, including injected failures.
# =============================================================================

import pytest

from perch.core.errors import (
    IndexStale,
    PermissionDenied,
    ProviderUnavailable,
    UnknownProviderError,
)
from perch.core.events import (
    FetchBody,
    FetchBodyDone,
    FetchList,
    FetchListDone,
    MarkAllDone,
    MarkAllRead,
    Quit,
    ScheduleTick,
)
from perch.runner import as_provider_error, perform


class ExplodingProvider:
    """A provider whose every call raises a non-provider exception."""

    def list_unread(self):
        raise RuntimeError("boom")

    def fetch_body(self, provider_index):
        raise KeyError(provider_index)

    def mark_all_read(self):
        raise OSError("disk on fire")


class TestFetchList:

    @pytest.mark.asyncio
    async def test_returns_unread_summaries(self, memory_provider):
        event = await perform(FetchList(), memory_provider)

        assert isinstance(event, FetchListDone)
        assert event.error is None
        assert event.at is not None
        assert [e.subject for e in event.emails] == ["First", "Second", "Third"]
        assert [e.provider_index for e in event.emails] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_respects_max_unread(self, memory_provider):
        memory_provider.max_unread = 2
        event = await perform(FetchList(), memory_provider)
        assert len(event.emails) == 2

    @pytest.mark.asyncio
    async def test_failure_becomes_event(self, memory_provider):
        memory_provider.failures["list_unread"] = ProviderUnavailable("Mail isn't running")
        event = await perform(FetchList(), memory_provider)

        assert isinstance(event.error, ProviderUnavailable)
        assert event.emails == ()
        assert event.at is not None

    @pytest.mark.asyncio
    async def test_injected_failure_fires_once(self, memory_provider):
        memory_provider.failures["list_unread"] = PermissionDenied("no")
        await perform(FetchList(), memory_provider)
        event = await perform(FetchList(), memory_provider)
        assert event.error is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blocking", [True, False])
    async def test_completion_carries_blocking_flag(self, memory_provider, blocking):
        event = await perform(FetchList(blocking=blocking), memory_provider)
        assert event.blocking is blocking

        memory_provider.failures["list_unread"] = ProviderUnavailable("gone")
        event = await perform(FetchList(blocking=blocking), memory_provider)
        assert event.error is not None
        assert event.blocking is blocking


class TestFetchBody:

    @pytest.mark.asyncio
    async def test_returns_body_and_marks_read(self, memory_provider):
        emails = (await perform(FetchList(), memory_provider)).emails
        event = await perform(FetchBody(emails[1]), memory_provider)

        assert isinstance(event, FetchBodyDone)
        assert event.email == emails[1]
        assert event.body == "Hello"
        assert memory_provider.messages[2].read is True

    @pytest.mark.asyncio
    async def test_out_of_range_is_index_stale(self, memory_provider):
        emails = (await perform(FetchList(), memory_provider)).emails
        await perform(MarkAllRead(), memory_provider)

        event = await perform(FetchBody(emails[0]), memory_provider)
        assert isinstance(event.error, IndexStale)
        assert "index out of range" in str(event.error)
        assert event.email == emails[0]


class TestMarkAllRead:

    @pytest.mark.asyncio
    async def test_marks_everything(self, memory_provider):
        event = await perform(MarkAllRead(), memory_provider)

        assert event == MarkAllDone()
        assert (await perform(FetchList(), memory_provider)).emails == ()

    @pytest.mark.asyncio
    async def test_failure_becomes_event(self, memory_provider):
        memory_provider.failures["mark_all_read"] = PermissionDenied("-1743")
        event = await perform(MarkAllRead(), memory_provider)
        assert isinstance(event.error, PermissionDenied)


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", [FetchList(), MarkAllRead()])
    async def test_wrapped_as_unknown(self, command):
        event = await perform(command, ExplodingProvider())
        assert isinstance(event.error, UnknownProviderError)

    @pytest.mark.asyncio
    async def test_body_error_is_wrapped(self, sample_emails):
        event = await perform(FetchBody(sample_emails[0]), ExplodingProvider())
        assert isinstance(event.error, UnknownProviderError)
        assert isinstance(event.error.__cause__, KeyError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", [Quit(), ScheduleTick(1.0)])
    async def test_non_provider_command_rejected(self, command, memory_provider):
        with pytest.raises(TypeError):
            await perform(command, memory_provider)


def test_as_provider_error_passes_provider_errors_through():
    error = IndexStale("gone")
    assert as_provider_error(error) is error


def test_as_provider_error_keeps_message():
    wrapped = as_provider_error(ValueError("bad value"))
    assert "ValueError" in str(wrapped)
    assert "bad value" in str(wrapped)

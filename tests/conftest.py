# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the Perch test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

from perch.core import EmailSummary, ViewState
from perch.core.events import FetchListDone, Resize
from perch.core.state import ViewOptions
from perch.provider import MemoryProvider, StoredMessage

from helpers import NOW, apply


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_emails():
    """Three unread summaries as a provider would list them."""
    return (
        EmailSummary(
            sender="Ada Lovelace <ada@example.com>",
            subject="Notes on the Analytical Engine",
            received="2024-01-15 11:55:00",
            provider_index=1,
        ),
        EmailSummary(
            sender="Grace Hopper <grace@example.com>",
            subject="Found a bug",
            received="2024-01-15 09:00:00",
            provider_index=2,
        ),
        EmailSummary(
            sender="Build Bot <ci@example.com>",
            subject="Nightly build passed",
            received="Monday, January 8, 2024 at 3:04:05 PM",
            provider_index=3,
        ),
    )


@pytest.fixture
def state():
    """A fresh view state with an 80x24 terminal."""
    s = ViewState.initial(ViewOptions())
    apply(s, Resize(80, 24))
    return s


@pytest.fixture
def loaded_state(state, sample_emails):
    """A view state showing the three sample emails, idle."""
    apply(state, FetchListDone(emails=sample_emails, at=NOW))
    return state


@pytest.fixture
def memory_provider():
    """An in-memory mailbox with three unread and one read message."""
    return MemoryProvider([
        StoredMessage("ada@example.com", "First", "2024-01-15 11:00:00", "Body one"),
        StoredMessage("old@example.com", "Already read", "2024-01-14 11:00:00", "Old", read=True),
        StoredMessage("grace@example.com", "Second", "2024-01-15 10:00:00", "Hello"),
        StoredMessage("ci@example.com", "Third", "2024-01-15 09:00:00", "Body three"),
    ])

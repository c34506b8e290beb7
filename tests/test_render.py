# =============================================================================
# Renderer Tests
# =============================================================================
# Prints frames on a terminal-sized rich Console and checks the plain
# text. Styling is not asserted.
# =============================================================================

from datetime import timedelta

import pytest

from perch.core import EmailSummary
from perch.core.errors import IndexStale, ProviderUnavailable
from perch.core.events import FetchBodyDone, FetchListDone, KeyPress, Resize
from perch.ui.render import help_bar, render

from helpers import NOW, apply, frame_text


def plain(state) -> str:
    return frame_text(state)


class TestPriority:
    """Which view wins when several conditions hold."""

    def test_loading_before_first_fetch(self, state):
        text = plain(state)
        assert "Loading..." in text
        assert state.spinner.view() in text
        assert "Unread Emails" not in text

    def test_never_loaded_is_not_an_empty_inbox(self, state):
        state.loading = False
        text = plain(state)
        assert "Loading..." in text
        assert "All caught up!" not in text

    def test_error_panel(self, loaded_state):
        apply(loaded_state, FetchListDone(error=ProviderUnavailable("Mail isn't running (-600)"), at=NOW))
        text = plain(loaded_state)

        assert "Error" in text
        assert "Mail isn't running (-600)" in text
        assert "Make sure Mail.app is running." in text
        assert "'r' retry • 'q' quit" in text
        assert "Notes on the Analytical Engine" not in text

    def test_error_panel_is_a_rounded_box(self, loaded_state):
        apply(loaded_state, FetchListDone(error=ProviderUnavailable("down"), at=NOW))
        lines = plain(loaded_state).splitlines()

        assert len(lines) == 24
        top = next(line for line in lines if "╭" in line)
        assert top.strip().startswith("╭") and top.strip().endswith("╮")
        assert any("╰" in line for line in lines)

    def test_error_dominates_loading(self, loaded_state):
        apply(loaded_state, FetchListDone(error=ProviderUnavailable("down"), at=NOW))
        apply(loaded_state, KeyPress("r", "r"))
        assert loaded_state.loading is True
        assert "Error" in plain(loaded_state)
        assert "Loading..." not in plain(loaded_state)

    def test_error_dominates_detail(self, loaded_state, sample_emails):
        apply(loaded_state, KeyPress("enter"), FetchBodyDone(email=sample_emails[0], body="Body"))
        apply(loaded_state, FetchListDone(error=ProviderUnavailable("down"), at=NOW))
        assert "Error" in plain(loaded_state)
        assert "From:" not in plain(loaded_state)

    def test_empty_inbox(self, state):
        apply(state, FetchListDone(emails=(), at=NOW))
        text = plain(state)

        assert "All caught up!" in text
        assert "No unread emails in your inbox." in text
        assert "Last checked: 12:00:00" in text


class TestListView:
    """Tests for the unread list."""

    def test_title_and_count(self, loaded_state):
        text = plain(loaded_state)
        assert "Unread Emails (3)" in text
        assert "3 items" in text

    def test_rows(self, loaded_state):
        text = plain(loaded_state)
        for subject in ("Notes on the Analytical Engine", "Found a bug", "Nightly build passed"):
            assert subject in text
        assert "Grace Hopper <grace@example.com>" in text

    def test_times_are_relative_to_last_refresh(self, loaded_state):
        text = plain(loaded_state)
        assert "5m ago" in text
        assert "3h ago" in text
        assert "6d ago" in text

    def test_refresh_info_and_help(self, loaded_state):
        text = plain(loaded_state)
        assert "Updated 12:00:00 • Auto-refresh: 10s" in text
        assert "mark all read" in text
        assert "filter" in text

    def test_fits_terminal_height(self, loaded_state):
        assert len(plain(loaded_state).splitlines()) <= 24

    def test_narrow_terminal_puts_time_with_sender(self, loaded_state):
        apply(loaded_state, Resize(48, 24))
        assert "Ada Lovelace <ada@example.com> • 5m ago" in plain(loaded_state)

    def test_long_subject_is_truncated(self, state):
        long_subject = "A" * 200
        email = EmailSummary("a@b", long_subject, "2024-01-15 11:00:00", 1)
        apply(state, FetchListDone(emails=(email,), at=NOW))

        text = plain(state)
        assert long_subject not in text
        assert "…" in text

    def test_pagination_dots(self, state):
        emails = tuple(
            EmailSummary(f"s{i}@example.com", f"Message {i}", "2024-01-15 11:00:00", i)
            for i in range(1, 21)
        )
        apply(state, FetchListDone(emails=emails, at=NOW))
        assert "••••" in plain(state)

    def test_filter_status(self, loaded_state):
        apply(loaded_state, KeyPress("slash", "/"), KeyPress("b", "b"), KeyPress("u", "u"))
        text = plain(loaded_state)
        assert "Filter: bu█" in text
        assert "apply filter" in text

    def test_applied_filter_status(self, loaded_state):
        apply(
            loaded_state,
            KeyPress("slash", "/"), KeyPress("b", "b"), KeyPress("u", "u"), KeyPress("g", "g"),
            KeyPress("enter"),
        )
        text = plain(loaded_state)
        assert "1 item" in text
        assert "2 filtered" in text
        assert "Notes on the Analytical Engine" not in text

    def test_moves_with_refresh_time(self, loaded_state, sample_emails):
        apply(loaded_state, FetchListDone(emails=sample_emails, at=NOW + timedelta(hours=1)))
        assert "1h ago" in plain(loaded_state)


class TestDetailView:
    """Tests for the message view."""

    @pytest.fixture
    def detail_state(self, loaded_state, sample_emails):
        apply(
            loaded_state,
            KeyPress("down"), KeyPress("enter"),
            FetchBodyDone(email=sample_emails[1], body="Hello\n\nIt was a moth."),
        )
        return loaded_state

    def test_header_and_body(self, detail_state):
        text = plain(detail_state)
        assert "Found a bug" in text
        assert "From: Grace Hopper <grace@example.com>" in text
        assert "Date: 2024-01-15 09:00:00" in text
        assert "Hello" in text
        assert "It was a moth." in text

    def test_help_shows_scroll_percent(self, detail_state):
        text = plain(detail_state)
        assert "100%" in text
        assert "back" in text

    def test_short_body_offers_no_scrolling(self, detail_state):
        assert "scroll" not in plain(detail_state)

    def test_long_body_offers_scrolling(self, loaded_state, sample_emails):
        body = "\n".join(f"paragraph {i}" for i in range(40))
        apply(loaded_state, KeyPress("enter"), FetchBodyDone(email=sample_emails[0], body=body))
        assert "↑/↓  scroll" in plain(loaded_state)

    def test_scroll_changes_visible_body(self, loaded_state, sample_emails):
        body = "\n".join(f"paragraph {i}" for i in range(40))
        apply(loaded_state, KeyPress("enter"), FetchBodyDone(email=sample_emails[0], body=body))
        assert "paragraph 0" in plain(loaded_state)
        assert "0%" in plain(loaded_state)

        apply(loaded_state, KeyPress("end"))
        text = plain(loaded_state)
        assert "paragraph 0" not in text
        assert "paragraph 39" in text
        assert "100%" in text


class TestPurity:
    """Rendering is a function of state alone."""

    def test_same_state_same_frame(self, loaded_state):
        assert plain(loaded_state) == plain(loaded_state)

    def test_does_not_touch_state(self, loaded_state):
        before = (loaded_state.mode, loaded_state.loading, loaded_state.email_list.cursor)
        render(loaded_state)
        assert (loaded_state.mode, loaded_state.loading, loaded_state.email_list.cursor) == before

    def test_body_error_shows_hint(self, loaded_state, sample_emails):
        apply(
            loaded_state,
            KeyPress("enter"),
            FetchBodyDone(email=sample_emails[0], error=IndexStale("Can't get item 1 (-1719)")),
        )
        assert "The mailbox changed since the list was loaded." in plain(loaded_state)


def test_help_bar_spans_width():
    bar = help_bar(60, [("q", "quit")])
    assert bar.cell_len == 60
    assert "q" in bar.plain and "quit" in bar.plain

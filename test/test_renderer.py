#!/usr/bin/env python3
"""Tests for frame composition."""

import pytest

from claude_session_picker.controller import PickerController
from claude_session_picker.layout import display_width, strip_ansi
from claude_session_picker.renderer import (
    HIGHLIGHT_STYLE,
    KEY_HINT,
    render_frame,
    render_preview,
    render_row,
    render_search_bar,
    render_status_bar,
)

NOW = 1_700_000_000_000


@pytest.fixture
def sessions(make_session):
    return [
        make_session(
            "s1",
            first_prompt="fix the login bug",
            project_name="api",
            modified=NOW - 5 * 60000,
            displays=("add a login form", "fix the login bug"),
            git_branch="feature/login",
        ),
        make_session(
            "s2",
            first_prompt="write release notes",
            project_name="docs",
            modified=NOW - 3 * 3600000,
            worktree_name="notes-wt",
        ),
    ]


def plain_lines(frame: str) -> list[str]:
    return [strip_ansi(line) for line in frame.split("\n")]


class TestRenderFrame:
    """Test the full frame layout."""

    @pytest.mark.parametrize("width,height", [(120, 30), (80, 24), (40, 10), (60, 5)])
    def test_line_count(self, sessions, width, height):
        controller = PickerController(sessions, width=width, height=height)
        lines = render_frame(controller, NOW).split("\n")
        expected = 2 + controller.list_height + 1 + controller.preview_height + 1
        assert len(lines) == expected

    def test_line_count_when_empty(self, sessions):
        controller = PickerController(sessions, initial_query="zzzz")
        lines = render_frame(controller, NOW).split("\n")
        assert len(lines) == 2 + controller.list_height + 1 + 6 + 1

    def test_layout_order(self, sessions):
        controller = PickerController(sessions, width=100, height=20)
        lines = plain_lines(render_frame(controller, NOW))
        assert lines[0].startswith("  > type to search...")
        assert lines[1] == ""
        assert lines[2].startswith("> api")
        assert lines[3].startswith("  docs")
        divider = lines[2 + controller.list_height]
        assert divider.strip() and set(divider.strip()) == {"─"}
        assert "1 of 2 sessions" in lines[-1]

    def test_empty_state(self, sessions):
        controller = PickerController(sessions, initial_query="zzzz")
        lines = plain_lines(render_frame(controller, NOW))
        assert lines[2] == "  No sessions found"
        assert "(no messages)" in lines[2 + controller.list_height + 1]
        assert "no sessions" in lines[-1]

    def test_only_visible_rows_rendered(self, make_session):
        many = [make_session(f"s{i}", first_prompt=f"task {i}") for i in range(20)]
        controller = PickerController(many, height=10)
        controller.move(10)
        lines = plain_lines(render_frame(controller, NOW))
        rows = lines[2 : 2 + controller.list_height]
        assert "task 8" in rows[0]
        assert rows[-1].startswith("> ")
        assert "task 10" in rows[-1]

    @pytest.mark.parametrize("width", [60, 80, 120, 200])
    def test_rows_fit_width(self, sessions, width):
        controller = PickerController(sessions, width=width, height=20)
        lines = render_frame(controller, NOW).split("\n")
        for line in lines[2 : 2 + len(sessions)]:
            assert display_width(line) <= width


class TestSearchBar:
    """Test the search line."""

    def test_placeholder(self, sessions):
        controller = PickerController(sessions)
        line = strip_ansi(render_search_bar(controller))
        assert line.startswith("  > type to search...")
        assert line.endswith("[All]")

    def test_query_and_counts(self, sessions):
        controller = PickerController(sessions, initial_query="login")
        line = strip_ansi(render_search_bar(controller))
        assert line.startswith("  > login_")
        assert line.endswith("[1/2]")


class TestRenderRow:
    """Test a single session row."""

    def test_cursor_pointer(self, sessions):
        assert strip_ansi(render_row(sessions[0], "", True, 100, NOW)).startswith("> ")
        assert strip_ansi(render_row(sessions[0], "", False, 100, NOW)).startswith(
            "  "
        )

    def test_columns(self, sessions):
        row = strip_ansi(render_row(sessions[0], "", False, 120, NOW))
        assert "api" in row
        assert "fix the login bug" in row
        assert "feature/login" in row
        assert "2msg   5m · " in row

    def test_worktree_label(self, sessions):
        row = strip_ansi(render_row(sessions[1], "", False, 120, NOW))
        assert "wt:notes-wt" in row
        assert " 3h · " in row
        assert "msg" in row

    def test_no_messages_omits_count(self, make_session):
        session = make_session("s", first_prompt=None, displays=())
        row = strip_ansi(render_row(session, "", False, 120, NOW))
        assert "msg" not in row

    def test_highlights_matches(self, sessions):
        row = render_row(sessions[0], "login", False, 120, NOW)
        assert HIGHLIGHT_STYLE in row
        assert f"{HIGHLIGHT_STYLE}login" in row

    def test_no_highlight_without_query(self, sessions):
        assert HIGHLIGHT_STYLE not in render_row(sessions[0], "", False, 120, NOW)

    def test_long_description_truncated(self, make_session):
        session = make_session("s", first_prompt="word " * 60)
        row = render_row(session, "", False, 80, NOW)
        assert ".." in strip_ansi(row)
        assert display_width(row) <= 80


class TestRenderPreview:
    """Test the preview pane."""

    def test_most_recent_last(self, sessions):
        lines = [strip_ansi(line) for line in render_preview(sessions[0], 80, 6)]
        assert lines == ["    add a login form", "  > fix the login bug"]

    def test_limited_to_max_lines(self, make_session):
        session = make_session("s", displays=[f"message {i}" for i in range(10)])
        lines = render_preview(session, 80, 3)
        assert len(lines) == 3
        assert strip_ansi(lines[-1]) == "  > message 9"

    def test_whitespace_collapsed_and_truncated(self, make_session):
        session = make_session("s", displays=["line one\n\nline   two " + "x" * 200])
        (line,) = render_preview(session, 40, 6)
        assert "line one line two" in strip_ansi(line)
        assert display_width(line) <= 40

    def test_no_session(self):
        assert strip_ansi(render_preview(None, 80, 6)[0]) == "  (no messages)"


class TestStatusBar:
    """Test the bottom status line."""

    def test_position_and_hint(self, sessions):
        controller = PickerController(sessions, width=100)
        controller.move(1)
        line = strip_ansi(render_status_bar(controller))
        assert line.startswith("  2 of 2 sessions")
        assert line.endswith(KEY_HINT)

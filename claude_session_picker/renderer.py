#!/usr/bin/env python3
"""Compose the picker frame from controller state.

The frame is a list of ANSI-styled lines exactly as tall as the viewport:
search bar, blank line, session rows, divider, preview pane, status bar.
"""

from typing import Optional

from .controller import PickerController
from .layout import (
    BOLD,
    BRIGHT_CYAN,
    CYAN,
    DIM,
    GREEN,
    RESET,
    WHITE,
    YELLOW,
    display_width,
    highlight,
    pad,
    truncate,
)
from .matcher import fuzzy_match
from .models import Session
from .utils import format_relative_time

HIGHLIGHT_STYLE = f"{YELLOW}{BOLD}"
BRANCH_MAX_COLS = 18
PROJECT_MAX_COLS = 20
MIN_DESCRIPTION_COLS = 8
KEY_HINT = "↑↓ nav  enter select  esc quit"


def render_frame(controller: PickerController, now_ms: int) -> str:
    """Render the whole frame for the current state."""
    width = controller.width
    lines = [render_search_bar(controller), ""]

    if not controller.filtered:
        lines.append(f"  {DIM}No sessions found{RESET}")
        lines.extend([""] * (controller.list_height - 1))
    else:
        start = controller.scroll
        visible = controller.filtered[start : start + controller.list_height]
        for offset, entry in enumerate(visible):
            is_cursor = start + offset == controller.cursor
            lines.append(
                render_row(entry.session, controller.query, is_cursor, width, now_ms)
            )
        lines.extend([""] * (controller.list_height - len(visible)))

    lines.append(f"  {DIM}{'─' * max(1, width - 3)}{RESET}")
    preview = render_preview(controller.selected, width, controller.preview_height)
    lines.extend(preview)
    lines.extend([""] * (controller.preview_height - len(preview)))
    lines.append(render_status_bar(controller))
    return "\n".join(lines)


def render_search_bar(controller: PickerController) -> str:
    width = controller.width
    query = controller.query
    if query:
        label_text = f"{len(controller.filtered)}/{len(controller.all_sessions)}"
    else:
        label_text = "All"
    label = f"{DIM}[{label_text}]{RESET}"
    label_width = display_width(label_text) + 2

    if query:
        search_width = 4 + display_width(query) + 1  # "  > " + query + "_"
        gap = max(1, width - search_width - label_width - 1)
        return f"  {CYAN}>{RESET} {query}{DIM}_{RESET}{' ' * gap}{label}"
    gap = max(1, width - 22 - label_width - 1)
    return f"  {DIM}> type to search...{RESET}{' ' * gap}{label}"


def _styled(
    text: str,
    max_cols: int,
    positions: list[int],
    base_style: str,
) -> str:
    if positions:
        return highlight(text, max_cols, positions, base_style, HIGHLIGHT_STYLE)
    return f"{base_style}{truncate(text, max_cols)}{RESET}"


def render_row(
    session: Session, query: str, is_cursor: bool, width: int, now_ms: int
) -> str:
    """Render one session row: pointer, project, description, branch, age."""
    usable = width - 1
    pointer = f"{BRIGHT_CYAN}> {RESET}" if is_cursor else "  "

    relative, date = format_relative_time(session.modified, now_ms)
    time_text = f"{relative:>3} · {date}"
    if session.message_count > 0:
        time_text = f"{session.message_count}msg  {time_text}"

    branch_label = ""
    branch_style = GREEN
    if session.worktree_name:
        branch_label = "wt:" + truncate(session.worktree_name, BRANCH_MAX_COLS - 3)
        branch_style = CYAN
    elif session.git_branch:
        branch_label = truncate(session.git_branch, BRANCH_MAX_COLS)
    branch_width = display_width(branch_label) + 2 if branch_label else 0

    project_cols = min(PROJECT_MAX_COLS, int(usable * 0.16))
    project_text = session.project_name or "~"
    fixed = 2 + project_cols + 1 + 2 + branch_width + display_width(time_text)
    description_cols = max(MIN_DESCRIPTION_COLS, usable - fixed)
    description = session.description or ""

    def positions(text: str) -> list[int]:
        if not query or not text:
            return []
        return fuzzy_match(query, text).positions

    project = pad(
        _styled(
            project_text,
            project_cols,
            positions(project_text),
            WHITE + BOLD if is_cursor else YELLOW,
        ),
        project_cols,
    )
    description_cell = pad(
        _styled(
            description,
            description_cols,
            positions(description),
            WHITE if is_cursor else DIM,
        ),
        description_cols,
    )
    branch = ""
    if branch_label:
        branch = (
            _styled(
                branch_label, BRANCH_MAX_COLS, positions(branch_label), branch_style
            )
            + "  "
        )

    return f"{pointer}{project} {description_cell}  {branch}{DIM}{time_text}{RESET}"


def render_preview(
    session: Optional[Session], width: int, max_lines: int
) -> list[str]:
    """Most recent messages of the highlighted session, newest last."""
    empty = [f"  {DIM}(no messages){RESET}"]
    if session is None or not session.displays:
        return empty

    usable = width - 5
    messages = session.displays[-max_lines:]
    lines: list[str] = []
    for index, message in enumerate(messages):
        text = " ".join(message.split())
        if not text:
            continue
        text = truncate(text, usable)
        if index == len(messages) - 1:
            lines.append(f"  {CYAN}>{RESET} {WHITE}{text}{RESET}")
        else:
            lines.append(f"    {DIM}{text}{RESET}")
    return lines or empty


def render_status_bar(controller: PickerController) -> str:
    if controller.filtered:
        position = f"{controller.cursor + 1} of {len(controller.filtered)} sessions"
    else:
        position = "no sessions"
    left_width = 2 + display_width(position)
    gap = max(1, controller.width - left_width - display_width(KEY_HINT) - 2)
    return f"  {DIM}{position}{RESET}{' ' * gap}{DIM}{KEY_HINT}{RESET}"

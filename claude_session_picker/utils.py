"""Utility functions for session descriptions, project names and timestamps."""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

# Generic subdirectories that say nothing about the project they belong to
GENERIC_SUBDIRS = {
    "src",
    "app",
    "lib",
    "cmd",
    "internal",
    "pkg",
    "server",
    "worker",
    "client",
    "web",
}

WORKTREE_MARKER = "/.claude/worktrees/"

DESCRIPTION_MAX_LENGTH = 120

# Wrapper spans injected by the agent runtime; an unterminated opening tag
# swallows the rest of the text.
_WRAPPER_SPAN_PATTERNS = [
    re.compile(r"<local-command-caveat>.*?(?:</local-command-caveat>|\Z)", re.DOTALL),
    re.compile(r"<system-reminder>.*?(?:</system-reminder>|\Z)", re.DOTALL),
    re.compile(r"<teammate-message.*?(?:</teammate-message>|\Z)", re.DOTALL),
]
_TRAILING_OPEN_TAG_PATTERN = re.compile(r"<[a-z][a-z0-9-]*>[^<]*\Z")
_TAG_PATTERN = re.compile(r"<[^>]+>")
_LEADING_NOISE_PATTERN = re.compile(r"^[)\s,.:;⏺`]+")
_HEX_ID_PATTERN = re.compile(r"[0-9a-f-]{8,}", re.IGNORECASE)
_PLAN_PREFIX_PATTERN = re.compile(
    r"^Implement the following plan:\s*#?\s*", re.IGNORECASE
)
_CONTINUATION_PREFIX_PATTERN = re.compile(
    r"^This session is being continued from a previous.*?(?:\n\n|\. )", re.DOTALL
)
_HEADING_PATTERN = re.compile(r"^#\s+")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def pick_description(displays: Sequence[str]) -> Optional[str]:
    """Pick the most recent meaningful display text for a session.

    Walks backwards from the newest entry, skipping very short entries and
    bare slash commands (``/clear``, ``/compact``). Falls back to the newest
    entry when nothing qualifies.
    """
    if not displays:
        return None
    for display in reversed(displays):
        if not display or len(display) < 4:
            continue
        if display.startswith("/") and " " not in display:
            continue
        return display
    return displays[-1] or None


def clean_description(text: Optional[str]) -> Optional[str]:
    """Turn a raw display snippet into a one-line description.

    Returns None when the snippet carries no useful information (caveats,
    bare identifiers, interruption markers, etc.).
    """
    if not text:
        return None

    cleaned = text
    for pattern in _WRAPPER_SPAN_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _TRAILING_OPEN_TAG_PATTERN.sub("", cleaned)
    cleaned = _TAG_PATTERN.sub("", cleaned).strip()
    # Checked before leading backticks are stripped
    if cleaned.startswith("```"):
        return None
    cleaned = _LEADING_NOISE_PATTERN.sub("", cleaned).strip()

    if cleaned.startswith("Caveat:"):
        return None
    if _HEX_ID_PATTERN.fullmatch(cleaned):
        return None
    if cleaned.startswith("[Request interrupted"):
        return None

    cleaned = _PLAN_PREFIX_PATTERN.sub("", cleaned)
    cleaned = _CONTINUATION_PREFIX_PATTERN.sub("", cleaned)
    cleaned = _HEADING_PATTERN.sub("", cleaned)
    if len(cleaned) < 3:
        return None

    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned[:DESCRIPTION_MAX_LENGTH]


def project_name_from_path(project_path: str, home: Optional[Path] = None) -> str:
    """Derive a short project name from a working directory.

    Args:
        project_path: Absolute working directory recorded for the session
        home: Home directory (defaults to the current user's)

    Returns:
        ``?`` for an unknown path, ``~`` for the home directory itself, the
        parent directory name for generic subdirectories like ``src``, and the
        last path component otherwise.
    """
    if not project_path:
        return "?"
    home_str = str(home if home is not None else Path.home())
    if project_path in (home_str, home_str + "/"):
        return "~"

    relative = project_path
    if project_path.startswith(home_str + "/"):
        relative = project_path[len(home_str) + 1 :]

    parts = [part for part in relative.split("/") if part]
    if not parts:
        return "~"

    last = parts[-1]
    if last.lower() in GENERIC_SUBDIRS and len(parts) >= 2:
        return parts[-2]
    return last


def detect_worktree(project_path: str) -> Optional[str]:
    """Return the worktree name when the path lives under ``.claude/worktrees``."""
    if not project_path:
        return None
    index = project_path.find(WORKTREE_MARKER)
    if index < 0:
        return None
    rest = project_path[index + len(WORKTREE_MARKER) :]
    return rest.split("/")[0] or None


def format_relative_time(modified_ms: int, now_ms: int) -> tuple[str, str]:
    """Format a modification time as a compact age plus a month/day date.

    Returns:
        Tuple like ``("2m", "02/17")``.
    """
    minutes = (now_ms - modified_ms) // 60000
    if minutes < 1:
        relative = "now"
    elif minutes < 60:
        relative = f"{minutes}m"
    elif minutes < 1440:
        relative = f"{minutes // 60}h"
    elif minutes < 10080:
        relative = f"{minutes // 1440}d"
    elif minutes < 43800:
        relative = f"{minutes // 10080}w"
    else:
        relative = f"{minutes // 43800}mo"

    try:
        date = datetime.fromtimestamp(modified_ms / 1000).strftime("%m/%d")
    except (ValueError, OverflowError, OSError):
        date = "--/--"
    return relative, date

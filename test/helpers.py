"""Shared helpers for building interaction logs and transcripts in tests."""

import json
from pathlib import Path
from typing import Any


def write_jsonl(path: Path, entries: list[Any]) -> Path:
    """Write entries as JSON lines (strings are written verbatim)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for entry in entries:
            line = entry if isinstance(entry, str) else json.dumps(entry)
            f.write(line + "\n")
    return path


def history_entry(
    session_id: str,
    display: str = "",
    project: str = "/home/u/proj",
    timestamp: int = 1_700_000_000_000,
) -> dict[str, Any]:
    """One interaction log record as Claude Code writes it."""
    return {
        "display": display,
        "pastedContents": {},
        "timestamp": timestamp,
        "project": project,
        "sessionId": session_id,
    }

#!/usr/bin/env python3
"""Parse the interaction log and peek into session transcripts.

This module provides the low-level readers used by the indexer:
- parse_history_line / iter_history_records: tolerant JSONL record parsing
- build_session_file_map: locate transcript files by session id
- read_git_branch: bounded read of a transcript header
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError

from .models import HistoryRecord

logger = logging.getLogger(__name__)

# Only the head of a transcript is read; the branch is recorded on early lines
TRANSCRIPT_PEEK_BYTES = 4096


def parse_history_line(line: str) -> Optional[HistoryRecord]:
    """Parse one log line, returning None for blank or malformed lines."""
    if not line.strip():
        return None
    try:
        return HistoryRecord.model_validate_json(line)
    except ValidationError:
        return None


def iter_history_records(lines: Iterable[str]) -> Iterator[HistoryRecord]:
    """Yield the valid records from the log, skipping everything else."""
    skipped = 0
    for line in lines:
        record = parse_history_line(line)
        if record is None:
            if line.strip():
                skipped += 1
            continue
        yield record
    if skipped:
        logger.debug(f"Skipped {skipped} malformed history lines")


def build_session_file_map(projects_dir: Path) -> dict[str, Path]:
    """Map session id -> transcript path by scanning project directories once.

    Each immediate subdirectory of ``projects_dir`` is a project; every
    ``*.jsonl`` file in it is a transcript named after its session id.
    """
    file_map: dict[str, Path] = {}
    try:
        project_dirs = [d for d in projects_dir.iterdir() if d.is_dir()]
    except OSError:
        return file_map

    for project_dir in project_dirs:
        try:
            for transcript in project_dir.glob("*.jsonl"):
                file_map[transcript.stem] = transcript
        except OSError as e:
            logger.debug(f"Skipping unreadable project directory {project_dir}: {e}")
    return file_map


def read_git_branch(transcript_path: Path) -> Optional[str]:
    """Read the git branch recorded at the top of a transcript.

    Only the first ``TRANSCRIPT_PEEK_BYTES`` bytes are read, so the cost does
    not depend on the transcript size. The first line that is not valid JSON
    (usually the one cut off by the byte limit) ends the search.
    """
    try:
        with open(transcript_path, "rb") as f:
            head = f.read(TRANSCRIPT_PEEK_BYTES)
    except OSError as e:
        logger.debug(f"Cannot read transcript {transcript_path}: {e}")
        return None

    for line in head.decode("utf-8", errors="ignore").split("\n"):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            break
        if not isinstance(data, dict):
            continue
        branch = data.get("gitBranch")
        if isinstance(branch, str) and branch and branch != "HEAD":
            return branch
    return None

#!/usr/bin/env python3
"""Build the session index from the interaction log."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .cache import CacheSnapshot, SessionCache, now_ms
from .models import HistoryRecord, Session
from .parser import build_session_file_map, iter_history_records, read_git_branch
from .utils import (
    clean_description,
    detect_worktree,
    pick_description,
    project_name_from_path,
)

logger = logging.getLogger(__name__)


def get_claude_dir() -> Path:
    """Get the Claude configuration directory (~/.claude)."""
    return Path.home() / ".claude"


def get_default_history_path() -> Path:
    """Get the default interaction log path."""
    return get_claude_dir() / "history.jsonl"


def get_default_projects_dir() -> Path:
    """Get the default Claude projects directory path."""
    return get_claude_dir() / "projects"


@dataclass
class SessionAggregate:
    """Running totals for one session while the log is folded."""

    session_id: str
    project_path: str = ""
    displays: list[str] = field(default_factory=list)
    modified: float = 0

    def add(self, record: HistoryRecord) -> None:
        if not self.project_path and record.project:
            self.project_path = record.project
        if record.timestamp and record.timestamp > self.modified:
            self.modified = record.timestamp
        if record.display:
            self.displays.append(record.display)


def aggregate_records(records: Iterable[HistoryRecord]) -> list[SessionAggregate]:
    """Group log records by session id, in order of first appearance."""
    aggregates: dict[str, SessionAggregate] = {}
    for record in records:
        aggregate = aggregates.get(record.sessionId)
        if aggregate is None:
            aggregate = SessionAggregate(session_id=record.sessionId)
            aggregates[record.sessionId] = aggregate
        aggregate.add(record)
    return list(aggregates.values())


class SessionIndexer:
    """Produces the recency-ordered session list shown by the picker."""

    def __init__(
        self,
        history_path: Path,
        projects_dir: Path,
        cache: Optional[SessionCache] = None,
        home: Optional[Path] = None,
    ):
        self.history_path = history_path
        self.projects_dir = projects_dir
        self.cache = cache
        self.home = home or Path.home()

    def index(self) -> list[Session]:
        """Return sessions sorted by last modification, newest first.

        A fresh cached snapshot is returned as-is; otherwise the log is
        rescanned and the cache overwritten.
        """
        if self.cache is not None:
            snapshot = self.cache.read()
            if snapshot is not None:
                logger.debug(f"Using cached index ({len(snapshot.sessions)} sessions)")
                return list(snapshot.sessions)

        sessions = self.scan()
        if self.cache is not None:
            self.cache.write(CacheSnapshot(sessions=sessions, timestamp=now_ms()))
        return sessions

    def scan(self) -> list[Session]:
        """Rescan the interaction log, ignoring any cache."""
        try:
            with open(self.history_path, "r", encoding="utf-8", errors="replace") as f:
                aggregates = aggregate_records(iter_history_records(f))
        except OSError as e:
            logger.debug(f"Cannot read interaction log {self.history_path}: {e}")
            return []

        file_map = build_session_file_map(self.projects_dir)
        sessions = [self._build_session(a, file_map) for a in aggregates]
        # sorted() is stable: sessions with equal timestamps keep log order
        return sorted(sessions, key=lambda s: s.modified, reverse=True)

    def _build_session(
        self, aggregate: SessionAggregate, file_map: dict[str, Path]
    ) -> Session:
        transcript = file_map.get(aggregate.session_id)
        git_branch = read_git_branch(transcript) if transcript else None
        return Session(
            session_id=aggregate.session_id,
            project_path=aggregate.project_path,
            displays=tuple(aggregate.displays),
            message_count=len(aggregate.displays),
            modified=int(aggregate.modified),
            git_branch=git_branch,
            project_name=project_name_from_path(aggregate.project_path, self.home),
            worktree_name=detect_worktree(aggregate.project_path),
            first_prompt=clean_description(pick_description(aggregate.displays)),
        )

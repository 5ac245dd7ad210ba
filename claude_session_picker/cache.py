#!/usr/bin/env python3
"""Time-to-live cache for the session index.

The index is cheap to rebuild but not free: the picker may be launched on
every keystroke of a shell binding, so a recent snapshot is reused for a short
window. Snapshots are invalidated by age only; a session logged within the
window shows up once the snapshot expires.
"""

import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ValidationError

from .models import Session

logger = logging.getLogger(__name__)

SESSION_CACHE_TTL_MS = 30_000


# ========== Data Models ==========


class CacheSnapshot(BaseModel):
    """A full index as written to the cache."""

    sessions: list[Session]
    timestamp: int  # epoch milliseconds when the snapshot was taken

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp


# ========== Helper Functions ==========


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def get_cache_path(sources: Sequence[Path] = ()) -> Path:
    """Get cache file path, respecting CLAUDE_SESSION_PICKER_CACHE_PATH env var.

    Priority: CLAUDE_SESSION_PICKER_CACHE_PATH env var > default location.

    Args:
        sources: Interaction log and transcript root the index is built from.
            When given, the file name carries a digest of their resolved paths
            so indexes of different logs never share a cache file. Leave empty
            for the default log, whose cache file is shared with other tools.
    """
    env_path = os.getenv("CLAUDE_SESSION_PICKER_CACHE_PATH")
    if env_path:
        base = Path(env_path)
    else:
        base = Path.home() / ".claude" / ".tmux-hud-cache" / "session-index-cache.json"
    if not sources:
        return base

    key = "\0".join(str(p.expanduser().resolve()) for p in sources)
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
    return base.with_name(f"{base.stem}-{digest}{base.suffix}")


# ========== Cache Implementations ==========


class SessionCache:
    """Base cache: freshness check shared by every storage backend.

    Subclasses implement ``_load``/``_store``/``clear``. ``read`` only returns
    a snapshot younger than ``ttl_ms``; every failure reads as "no snapshot".
    """

    def __init__(
        self,
        ttl_ms: int = SESSION_CACHE_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.ttl_ms = ttl_ms
        self.clock = clock or now_ms

    def read(self) -> Optional[CacheSnapshot]:
        """Return the stored snapshot if it is still fresh."""
        snapshot = self._load()
        if snapshot is None:
            return None
        if snapshot.age_ms(self.clock()) < self.ttl_ms:
            return snapshot
        logger.debug("Session cache expired")
        return None

    def write(self, snapshot: CacheSnapshot) -> None:
        """Replace the stored snapshot. Failures are logged and ignored."""
        try:
            self._store(snapshot)
        except OSError as e:
            logger.debug(f"Failed to write session cache: {e}")

    def clear(self) -> None:
        raise NotImplementedError

    def _load(self) -> Optional[CacheSnapshot]:
        raise NotImplementedError

    def _store(self, snapshot: CacheSnapshot) -> None:
        raise NotImplementedError


class JsonFileSessionCache(SessionCache):
    """Snapshot stored as a single JSON document on disk."""

    def __init__(
        self,
        path: Optional[Path] = None,
        ttl_ms: int = SESSION_CACHE_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        super().__init__(ttl_ms=ttl_ms, clock=clock)
        self.path = path or get_cache_path()

    def _load(self) -> Optional[CacheSnapshot]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read session cache {self.path}: {e}")
            return None
        try:
            return CacheSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.debug(f"Ignoring unreadable session cache {self.path}: {e}")
            return None

    def _store(self, snapshot: CacheSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            snapshot.model_dump_json(by_alias=True), encoding="utf-8"
        )

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Failed to delete session cache {self.path}: {e}")


class MemorySessionCache(SessionCache):
    """Snapshot kept in process memory."""

    def __init__(
        self,
        ttl_ms: int = SESSION_CACHE_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        super().__init__(ttl_ms=ttl_ms, clock=clock)
        self.snapshot: Optional[CacheSnapshot] = None

    def _load(self) -> Optional[CacheSnapshot]:
        return self.snapshot

    def _store(self, snapshot: CacheSnapshot) -> None:
        self.snapshot = snapshot

    def clear(self) -> None:
        self.snapshot = None


class DisabledSessionCache(SessionCache):
    """Cache that never holds anything (``--no-cache``)."""

    def _load(self) -> Optional[CacheSnapshot]:
        return None

    def _store(self, snapshot: CacheSnapshot) -> None:
        pass

    def clear(self) -> None:
        pass

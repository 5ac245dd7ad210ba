"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from claude_session_picker.models import Session


@pytest.fixture
def make_session() -> Callable[..., Session]:
    """Factory for Session objects with sensible defaults."""

    def _make(
        session_id: str,
        first_prompt: Optional[str] = None,
        project_name: str = "proj",
        modified: int = 0,
        **kwargs: Any,
    ) -> Session:
        displays = kwargs.pop("displays", (first_prompt,) if first_prompt else ())
        return Session(
            session_id=session_id,
            first_prompt=first_prompt,
            project_name=project_name,
            modified=modified,
            displays=tuple(displays),
            message_count=len(displays),
            **kwargs,
        )

    return _make


@pytest.fixture
def claude_dir(tmp_path: Path) -> Path:
    """An empty ~/.claude lookalike with a projects directory."""
    root = tmp_path / ".claude"
    (root / "projects").mkdir(parents=True)
    return root


@pytest.fixture
def isolated_cache(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the session cache at a temporary file."""
    cache_path = tmp_path / "cache" / "session-index-cache.json"
    monkeypatch.setenv("CLAUDE_SESSION_PICKER_CACHE_PATH", str(cache_path))
    return cache_path

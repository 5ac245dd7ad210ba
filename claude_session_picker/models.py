"""Pydantic models for the interaction log and the indexed sessions.

The interaction log (``~/.claude/history.jsonl``) holds one JSON object per
line. Only a handful of its fields matter for session browsing, so the record
model is deliberately loose: everything except ``sessionId`` is optional and
unknown keys are ignored.
"""

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel


class HistoryRecord(BaseModel):
    """One line of the interaction log."""

    model_config = ConfigDict(extra="ignore")

    sessionId: str
    project: Optional[str] = None
    timestamp: Optional[float] = None  # epoch milliseconds
    display: Optional[str] = None

    @field_validator("sessionId")
    @classmethod
    def _require_session_id(cls, value: str) -> str:
        if not value:
            raise ValueError("sessionId must not be empty")
        return value

    @field_validator("project", "timestamp", "display", mode="wrap")
    @classmethod
    def _drop_invalid_optional(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        # A malformed optional field is dropped, not the whole record
        try:
            return handler(value)
        except ValidationError:
            return None


class Session(BaseModel):
    """An indexed work session.

    Serialized with camelCase keys so the cache file keeps the layout other
    tools reading the same cache expect.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    session_id: str
    project_path: str = ""
    displays: tuple[str, ...] = ()
    message_count: int = 0
    modified: int = 0  # epoch milliseconds
    git_branch: Optional[str] = None
    project_name: str = "?"
    worktree_name: Optional[str] = None
    summary: Optional[str] = None
    first_prompt: Optional[str] = None

    @property
    def description(self) -> Optional[str]:
        """Text shown in the description column."""
        return self.summary or self.first_prompt

    def search_fields(self) -> list[Optional[str]]:
        """Candidate fields for fuzzy matching, in priority order."""
        return [
            self.description,
            self.project_name,
            self.git_branch,
            self.worktree_name,
        ]

"""Subsequence fuzzy matching used to filter and rank sessions.

Scoring per matched character:
- +3 when it directly follows the previous match (consecutive run)
- +5 when it starts the text or follows a separator (word start)
- +1 when its case matches the query character exactly

After a successful scan ``max(0, 50 - len(text))`` is added once, so shorter,
more specific targets rank higher.
"""

from dataclasses import dataclass, field
from typing import Optional

from .models import Session

SEPARATORS = frozenset(" \t\n\r\f\v-_/.")

CONSECUTIVE_BONUS = 3
WORD_START_BONUS = 5
CASE_BONUS = 1
LENGTH_BONUS_BASE = 50


@dataclass(frozen=True)
class MatchResult:
    is_match: bool
    score: int = 0
    positions: list[int] = field(default_factory=list)


NO_MATCH = MatchResult(is_match=False)


def _lower(value: str) -> str:
    # Per-character so indices stay aligned when lowering changes length ("İ")
    return "".join(c.lower()[0] for c in value)


def _is_separator(char: str) -> bool:
    return char in SEPARATORS or char.isspace()


def fuzzy_match(query: str, text: Optional[str]) -> MatchResult:
    """Match ``query`` as a case-insensitive subsequence of ``text``.

    Characters are consumed greedily left to right. ``positions`` holds the
    matched indices in ``text`` for highlighting.
    """
    if not query:
        return MatchResult(is_match=True)
    if not text:
        return NO_MATCH

    lowered_query = _lower(query)
    lowered_text = _lower(text)

    qi = 0
    score = 0
    last_index = -2
    positions: list[int] = []
    for ti, char in enumerate(lowered_text):
        if qi >= len(lowered_query):
            break
        if char != lowered_query[qi]:
            continue
        if ti == last_index + 1:
            score += CONSECUTIVE_BONUS
        if ti == 0 or _is_separator(lowered_text[ti - 1]):
            score += WORD_START_BONUS
        if text[ti] == query[qi]:
            score += CASE_BONUS
        positions.append(ti)
        last_index = ti
        qi += 1

    if qi < len(lowered_query):
        return NO_MATCH
    score += max(0, LENGTH_BONUS_BASE - len(text))
    return MatchResult(is_match=True, score=score, positions=positions)


def match_entry(query: str, session: Session) -> MatchResult:
    """Best match of ``query`` across a session's searchable fields.

    Absent fields are skipped. The result carries the highest score among
    matching fields (earlier fields win ties); ``is_match`` is False when no
    field matches.
    """
    if not query:
        return MatchResult(is_match=True)
    best: Optional[MatchResult] = None
    for value in session.search_fields():
        if not value:
            continue
        result = fuzzy_match(query, value)
        if result.is_match and (best is None or result.score > best.score):
            best = result
    return best or NO_MATCH

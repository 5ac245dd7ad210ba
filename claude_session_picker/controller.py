"""Picker state machine: query, filtered list, cursor and scroll.

Input arrives as explicit events (``KeyPress``, ``Resize``, ``Interrupt``)
fed one at a time to :meth:`PickerController.handle`, which returns a
terminal outcome (``Confirmed`` / ``Cancelled``) or None to keep running.
Nothing here touches the terminal, so the whole state machine can be driven
by synthetic event sequences.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from .matcher import match_entry
from .models import Session

DEFAULT_WIDTH = 120
DEFAULT_HEIGHT = 30


# ========== Events ==========


@dataclass(frozen=True)
class KeyPress:
    """A key as named by the terminal layer (``"up"``, ``"ctrl+u"``, ``"a"``).

    ``character`` is set only for printable keys.
    """

    key: str
    character: Optional[str] = None


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Interrupt:
    pass


Event = Union[KeyPress, Resize, Interrupt]


# ========== Outcomes ==========


@dataclass(frozen=True)
class Confirmed:
    session: Session


@dataclass(frozen=True)
class Cancelled:
    pass


Outcome = Union[Confirmed, Cancelled]


@dataclass(frozen=True)
class FilteredEntry:
    """A session that passed the filter; ``score`` is 0 without a query."""

    session: Session
    score: int = 0


class PickerController:
    """Holds picker state and applies transitions."""

    def __init__(
        self,
        sessions: Sequence[Session],
        initial_query: str = "",
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ):
        self.all_sessions = list(sessions)
        self.query = initial_query or ""
        self.width = width
        self.height = height
        self.cursor = 0
        self.scroll = 0
        self.filtered: list[FilteredEntry] = []
        self.apply_filter()

    # ---- geometry ----

    @property
    def preview_height(self) -> int:
        return min(6, max(3, self.height // 5))

    @property
    def list_height(self) -> int:
        # search bar + blank + divider + status bar = 4, plus 2 rows of slack
        return max(3, self.height - 6 - self.preview_height)

    @property
    def selected(self) -> Optional[Session]:
        if not self.filtered:
            return None
        return self.filtered[self.cursor].session

    # ---- filtering ----

    def apply_filter(self) -> None:
        """Recompute the filtered list for the current query and clamp the cursor."""
        if not self.query:
            self.filtered = [FilteredEntry(s) for s in self.all_sessions]
        else:
            entries: list[FilteredEntry] = []
            for session in self.all_sessions:
                result = match_entry(self.query, session)
                if result.is_match:
                    entries.append(FilteredEntry(session, result.score))
            # Stable sort: equal scores keep recency order
            self.filtered = sorted(entries, key=lambda e: e.score, reverse=True)
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        if not self.filtered:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, len(self.filtered) - 1))
        self.fix_scroll()

    def fix_scroll(self) -> None:
        """Scroll the least amount needed to keep the cursor visible."""
        if self.cursor < self.scroll:
            self.scroll = self.cursor
        if self.cursor >= self.scroll + self.list_height:
            self.scroll = self.cursor - self.list_height + 1
        self.scroll = max(0, self.scroll)

    # ---- transitions ----

    def append_char(self, char: str) -> None:
        self.query += char
        self.apply_filter()

    def delete_last_char(self) -> None:
        if self.query:
            self.query = self.query[:-1]
            self.apply_filter()

    def clear_query(self) -> None:
        self.query = ""
        self.apply_filter()

    def move(self, delta: int) -> None:
        self.cursor += delta
        self._clamp_cursor()

    def page_up(self) -> None:
        self.move(-self.list_height)

    def page_down(self) -> None:
        self.move(self.list_height)

    def move_first(self) -> None:
        self.cursor = 0
        self._clamp_cursor()

    def move_last(self) -> None:
        self.cursor = max(0, len(self.filtered) - 1)
        self._clamp_cursor()

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.fix_scroll()

    def confirm(self) -> Optional[Confirmed]:
        session = self.selected
        if session is None:
            return None
        return Confirmed(session)

    def cancel(self) -> Cancelled:
        return Cancelled()

    # ---- dispatch ----

    def handle(self, event: Event) -> Optional[Outcome]:
        """Apply one input event. Returns an outcome when the picker is done."""
        if isinstance(event, Interrupt):
            return self.cancel()
        if isinstance(event, Resize):
            self.resize(event.width, event.height)
            return None

        action = KEY_ACTIONS.get(event.key)
        if action is not None:
            return action(self)
        if event.character and event.character.isprintable():
            self.append_char(event.character)
        return None


def _then_continue(
    transition: Callable[[PickerController], None],
) -> Callable[[PickerController], Optional[Outcome]]:
    def run(controller: PickerController) -> Optional[Outcome]:
        transition(controller)
        return None

    return run


# Input dispatcher: terminal key name -> transition. Unlisted keys without a
# printable character (tab, function keys, ...) are ignored.
KEY_ACTIONS: dict[str, Callable[[PickerController], Optional[Outcome]]] = {
    "up": _then_continue(lambda c: c.move(-1)),
    "down": _then_continue(lambda c: c.move(1)),
    "pageup": _then_continue(PickerController.page_up),
    "pagedown": _then_continue(PickerController.page_down),
    "home": _then_continue(PickerController.move_first),
    "end": _then_continue(PickerController.move_last),
    "enter": PickerController.confirm,
    "escape": PickerController.cancel,
    "ctrl+c": PickerController.cancel,
    "backspace": _then_continue(PickerController.delete_last_char),
    "ctrl+h": _then_continue(PickerController.delete_last_char),
    "ctrl+u": _then_continue(PickerController.clear_query),
}

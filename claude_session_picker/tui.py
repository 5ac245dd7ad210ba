#!/usr/bin/env python3
"""Interactive session picker built on Textual.

Textual owns the terminal: raw input, the alternate screen, the hidden
cursor, resize notifications and restoring all of it on every exit path.
It draws on stderr, so stdout stays free for the selected session. Each key
or resize is turned into a controller event, applied, and answered with one
full redraw before the next event is processed.
"""

from typing import Callable, ClassVar, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Static

from .cache import now_ms
from .controller import (
    Confirmed,
    Event,
    Interrupt,
    KeyPress,
    Outcome,
    PickerController,
    Resize,
)
from .models import Session
from .renderer import render_frame
from .timings import timing_stat


class SessionPicker(App[Optional[Session]]):
    """TUI for fuzzy-searching sessions and picking one to resume."""

    CSS = """
    Screen {
        overflow: hidden;
    }

    #frame {
        width: 100%;
        height: 100%;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    # ctrl+c arrives as a key in raw mode; claim it before Textual's own binding
    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+c", "interrupt", "Cancel", show=False, priority=True),
    ]

    controller: PickerController
    outcome: Optional[Outcome]

    def __init__(
        self,
        sessions: Sequence[Session],
        initial_query: str = "",
        clock: Optional[Callable[[], int]] = None,
    ):
        """Initialize the picker with the indexed sessions."""
        super().__init__()
        self.controller = PickerController(sessions, initial_query)
        self.clock = clock or now_ms
        self.outcome = None

    def compose(self) -> ComposeResult:
        """Create the UI layout: a single pre-rendered frame."""
        yield Static(id="frame")

    def on_mount(self) -> None:
        """Size the controller to the terminal and draw the first frame."""
        self.controller.resize(self.size.width, self.size.height)
        self.redraw()

    def on_resize(self, event: events.Resize) -> None:
        """Handle terminal resize events."""
        self.handle_input(Resize(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        """Route every key to the controller."""
        event.stop()
        event.prevent_default()
        character = event.character if event.is_printable else None
        self.handle_input(KeyPress(event.key, character))

    def action_interrupt(self) -> None:
        """Cancel on interrupt (ctrl+c)."""
        self.handle_input(Interrupt())

    def handle_input(self, event: Event) -> None:
        """Apply one event; redraw, or exit once the controller is done."""
        outcome = self.controller.handle(event)
        if outcome is None:
            self.redraw()
            return
        self.outcome = outcome
        if isinstance(outcome, Confirmed):
            self.exit(outcome.session)
        else:
            self.exit(None)

    def redraw(self) -> None:
        """Render the current state into the frame widget."""
        with timing_stat("_frame_timings", label=repr(self.controller.query)):
            frame = render_frame(self.controller, self.clock())
            text = Text.from_ansi(frame, no_wrap=True, overflow="crop")
            # A resize can arrive before the frame widget is mounted
            for widget in self.query("#frame").results(Static):
                widget.update(text)


def run_session_picker(
    sessions: Sequence[Session], initial_query: str = ""
) -> Optional[Session]:
    """Run the picker and return the chosen session, or None if cancelled."""
    app = SessionPicker(sessions, initial_query)
    try:
        return app.run()
    except KeyboardInterrupt:
        # Textual handles terminal cleanup automatically
        return None

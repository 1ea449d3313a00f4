"""Input-line editor: history navigation, tab completion, submit."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from termfolio.kernel.dispatcher import Dispatcher
from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.session import HISTORY_LIVE, Session

SUBMIT = "submit"
HISTORY_UP = "history_up"
HISTORY_DOWN = "history_down"
TAB_COMPLETE = "tab_complete"
CLEAR_SCREEN = "clear_screen"


class InputEditor:
    """Keystroke state machine over ``input_buffer`` and ``history_cursor``."""

    def __init__(self, session: Session, registry: CommandRegistry, dispatcher: Dispatcher) -> None:
        self._session = session
        self._registry = registry
        self._dispatcher = dispatcher
        self._transitions: Dict[str, Callable[[], None]] = {
            SUBMIT: self.submit,
            HISTORY_UP: self.history_up,
            HISTORY_DOWN: self.history_down,
            TAB_COMPLETE: self.tab_complete,
            CLEAR_SCREEN: self.clear_screen,
        }

    @property
    def buffer(self) -> str:
        return self._session.input_buffer

    @property
    def cursor(self) -> int:
        return self._session.history_cursor

    def handle(self, event: str) -> None:
        self._transitions[event]()

    def edit(self, text: Optional[str]) -> None:
        self._session.input_buffer = str(text or "")

    def submit(self) -> None:
        self._dispatcher.submit(self._session.input_buffer)
        self._session.input_buffer = ""

    def history_up(self) -> None:
        history = self._session.history
        if not history:
            return
        cursor = min(self._session.history_cursor + 1, len(history) - 1)
        self._session.history_cursor = cursor
        self._session.input_buffer = self._session.history_entry(cursor)

    def history_down(self) -> None:
        cursor = self._session.history_cursor
        if cursor == HISTORY_LIVE:
            return
        if cursor == 0:
            self._session.history_cursor = HISTORY_LIVE
            self._session.input_buffer = ""
            return
        self._session.history_cursor = cursor - 1
        self._session.input_buffer = self._session.history_entry(cursor - 1)

    def tab_complete(self) -> None:
        matches = self._registry.complete(self._session.input_buffer)
        # Ambiguous completions are not partially applied.
        if len(matches) == 1:
            self._session.input_buffer = matches[0]

    def clear_screen(self) -> None:
        self._dispatcher.clear_screen()

"""Textual widgets for the termfolio desktop."""

from __future__ import annotations

from textual import events
from textual.message import Message
from textual.widgets import Button, Input, Static

from termfolio.kernel.editor import CLEAR_SCREEN, HISTORY_DOWN, HISTORY_UP, SUBMIT, TAB_COMPLETE

_KEY_ACTIONS = {
    "enter": SUBMIT,
    "return": SUBMIT,
    "ctrl+m": SUBMIT,
    "up": HISTORY_UP,
    "down": HISTORY_DOWN,
    "tab": TAB_COMPLETE,
    "ctrl+i": TAB_COMPLETE,
    "ctrl+l": CLEAR_SCREEN,
}


def classify_terminal_key(key: str) -> str:
    """Map terminal input keystrokes to editor actions ('' means plain editing)."""

    normalized = (key or "").lower()
    return _KEY_ACTIONS.get(normalized, "")


class TerminalInput(Input):
    """Single-line prompt that routes editor keys instead of handling them."""

    class Action(Message):
        """Posted when a keystroke maps to an editor action."""

        def __init__(self, action: str) -> None:
            super().__init__()
            self.action = action

    async def _on_key(self, event: events.Key) -> None:
        action = classify_terminal_key(event.key)
        if action:
            event.prevent_default()
            event.stop()
            self.post_message(self.Action(action))
            return

        await super()._on_key(event)


class DragHandle(Static):
    """Captures the mouse and reports pointer gestures in screen cells."""

    class Gesture(Message):
        def __init__(self, role: str, phase: str, x: int, y: int) -> None:
            super().__init__()
            self.role = role
            self.phase = phase
            self.x = x
            self.y = y

    def __init__(self, label: str, role: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.role = role

    def on_mouse_down(self, event: events.MouseDown) -> None:
        event.stop()
        self.capture_mouse()
        self.post_message(self.Gesture(self.role, "start", event.screen_x, event.screen_y))

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.app.mouse_captured is not self:
            return
        event.stop()
        self.post_message(self.Gesture(self.role, "move", event.screen_x, event.screen_y))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self.app.mouse_captured is not self:
            return
        event.stop()
        self.release_mouse()
        self.post_message(self.Gesture(self.role, "end", event.screen_x, event.screen_y))


class DesktopIcon(Button):
    """Desktop shortcut that submits one command to the terminal."""

    def __init__(self, command: str, label: str) -> None:
        super().__init__(label, id="icon-{0}".format(command), classes="desktop-icon")
        self.command = command

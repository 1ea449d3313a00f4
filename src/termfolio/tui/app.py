"""Textual application hosting the termfolio desktop and terminal window."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Input, RichLog, Static

from termfolio.kernel.cells import CellInvocation
from termfolio.kernel.editor import CLEAR_SCREEN
from termfolio.kernel.eventbus import (
    CELL_MOUNTED,
    CELL_UPDATED,
    INPUT_FOCUS,
    SCROLLBACK_CHANGED,
    THEME_CHANGED,
    WINDOW_CHANGED,
)
from termfolio.kernel.types import EventEnvelope
from termfolio.tui.controller import DESKTOP_COMMANDS, TerminalController
from termfolio.tui.widgets import DesktopIcon, DragHandle, TerminalInput
from termfolio.ui.render import line_renderable

_INPUT_HINT = "Enter: run  |  Up/Down: history  |  Tab: complete  |  Ctrl+L: clear  |  Ctrl+T: theme"


class TermfolioApp(App[None]):
    """Desktop with icon shortcuts and one floating terminal window."""

    CSS = """
    Screen {
        layers: desktop windows;
        background: #1b1f2a;
        color: #f1f1f1;
    }

    #desktop {
        layer: desktop;
        height: 1fr;
        padding: 1 2;
    }

    .desktop-icon {
        margin: 0 1 0 0;
        min-width: 10;
    }

    #terminal-window {
        layer: windows;
        border: round #3a3a3a;
    }

    #title-bar {
        height: 1;
        background: #2d2d2d;
    }

    #title {
        width: 1fr;
        padding: 0 1;
    }

    #title-bar Button {
        min-width: 5;
        height: 1;
        border: none;
    }

    #scrollback {
        height: 1fr;
        padding: 0 1;
        scrollbar-size: 1 1;
    }

    #prompt-row {
        height: 3;
    }

    #prompt {
        width: auto;
        padding: 1 0 0 1;
    }

    #terminal-input {
        width: 1fr;
        border: none;
        background: transparent;
    }

    #resize-handle {
        height: 1;
        width: 100%;
        content-align: right middle;
    }

    #taskbar {
        dock: bottom;
        height: 3;
        background: #111111;
    }

    #minimized-tab {
        display: none;
    }

    #status {
        width: auto;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+l", "clear_screen", "Clear"),
        Binding("ctrl+t", "cycle_theme", "Theme"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, controller: TerminalController) -> None:
        super().__init__()
        self._controller = controller
        self._subscriptions = (
            (SCROLLBACK_CHANGED, self._on_scrollback_event),
            (CELL_MOUNTED, self._on_scrollback_event),
            (CELL_UPDATED, self._on_scrollback_event),
            (WINDOW_CHANGED, self._on_window_event),
            (THEME_CHANGED, self._on_theme_event),
            (INPUT_FOCUS, self._on_focus_event),
        )

    def compose(self) -> ComposeResult:
        yield Vertical(
            Horizontal(
                *[DesktopIcon(command, label) for command, label in DESKTOP_COMMANDS],
                id="icons",
            ),
            id="desktop",
        )
        yield Vertical(
            Horizontal(
                DragHandle("", role="drag", id="title"),
                Button("_", id="minimize"),
                Button("[ ]", id="maximize"),
                id="title-bar",
            ),
            RichLog(id="scrollback", highlight=False, markup=False, wrap=True),
            Horizontal(
                Static("", id="prompt"),
                TerminalInput(placeholder="", id="terminal-input"),
                id="prompt-row",
            ),
            DragHandle("◢", role="resize", id="resize-handle"),
            id="terminal-window",
        )
        yield Horizontal(
            Button("", id="minimized-tab"),
            Static("", id="status"),
            Static(_INPUT_HINT, id="input-hint"),
            id="taskbar",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.title = "termfolio"
        bus = self._controller.terminal.bus
        for event_type, handler in self._subscriptions:
            bus.subscribe(event_type, handler)
        self._controller.set_scheduler(self._schedule_cell)
        self._apply_theme()
        self._apply_geometry()
        self._render_scrollback()
        self._focus_input()

    def on_unmount(self) -> None:
        bus = self._controller.terminal.bus
        for event_type, handler in self._subscriptions:
            bus.unsubscribe(event_type, handler)
        self._controller.set_scheduler(None)

    def _schedule_cell(self, invocation: CellInvocation) -> None:
        runner = self._controller.terminal.runner
        self.run_worker(
            runner.run(invocation),
            name="cell-{0}".format(invocation.cell_id),
            group="cells",
            exit_on_error=False,
        )

    def on_terminal_input_action(self, message: TerminalInput.Action) -> None:
        message.stop()
        widget = self.query_one("#terminal-input", TerminalInput)
        updated = self._controller.editor_action(message.action, widget.value)
        self._set_input_text(updated)

    def on_input_changed(self, message: Input.Changed) -> None:
        self._controller.terminal.editor.edit(message.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        window = self._controller.terminal.window
        button = event.button
        if isinstance(button, DesktopIcon):
            self._controller.terminal.submit_command(button.command)
            return
        button_id = button.id or ""
        if button_id == "minimize":
            window.minimize()
        elif button_id == "maximize":
            window.toggle_maximize()
        elif button_id == "minimized-tab":
            window.restore()
            self._focus_input()

    def on_drag_handle_gesture(self, message: DragHandle.Gesture) -> None:
        message.stop()
        self._controller.pointer_gesture(message.role, message.phase, message.x, message.y)

    def action_clear_screen(self) -> None:
        self._controller.terminal.editor.handle(CLEAR_SCREEN)

    def action_cycle_theme(self) -> None:
        self._controller.cycle_theme()

    def _on_scrollback_event(self, event: EventEnvelope) -> None:
        self._render_scrollback()

    def _on_window_event(self, event: EventEnvelope) -> None:
        self._apply_geometry()

    def _on_theme_event(self, event: EventEnvelope) -> None:
        self._apply_theme()

    def _on_focus_event(self, event: EventEnvelope) -> None:
        self._focus_input()

    def _render_scrollback(self) -> None:
        terminal = self._controller.terminal
        log = self.query_one("#scrollback", RichLog)
        log.clear()
        for line in terminal.session.scrollback:
            log.write(line_renderable(line, terminal.cells, terminal.theme), scroll_end=True)
        self._render_status()

    def _apply_geometry(self) -> None:
        box = self._controller.window_box()
        window = self.query_one("#terminal-window", Vertical)
        tab = self.query_one("#minimized-tab", Button)
        window.display = box.visible
        tab.display = not box.visible
        if box.maximized:
            window.styles.offset = (0, 0)
            window.styles.width = "100%"
            window.styles.height = "100%"
        else:
            window.styles.offset = (box.left, box.top)
            window.styles.width = box.width
            window.styles.height = box.height
        self._render_status()

    def _apply_theme(self) -> None:
        theme = self._controller.terminal.theme
        window = self.query_one("#terminal-window", Vertical)
        window.styles.background = theme.palette.background
        window.styles.color = theme.palette.foreground
        self.query_one("#title", DragHandle).update(theme.header)
        self.query_one("#minimized-tab", Button).label = theme.header
        self.query_one("#prompt", Static).update(theme.prompt)
        self.sub_title = theme.header
        self._render_status()

    def _render_status(self) -> None:
        status = self._controller.status()
        text = "{0} | {1} | {2} commands".format(status.header, status.mode, status.commands)
        if status.pending_cells:
            text += " | {0} loading".format(status.pending_cells)
        self.query_one("#status", Static).update(text)

    def _focus_input(self) -> None:
        self._controller.terminal.consume_focus_request()
        self.query_one("#terminal-input", TerminalInput).focus()

    def _set_input_text(self, value: str) -> None:
        widget = self.query_one("#terminal-input", TerminalInput)
        widget.value = value
        widget.cursor_position = len(value)

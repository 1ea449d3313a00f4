"""Controller layer for the termfolio Textual desktop."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from termfolio.config import Settings, project_config_exists
from termfolio.kernel.cells import CellScheduler, Fetcher, HttpxFetcher
from termfolio.kernel.content import build_default_registry
from termfolio.kernel.debug_log import DebugLogWriter
from termfolio.kernel.eventbus import EventBus
from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.terminal import Terminal
from termfolio.kernel.theme import ThemeDescriptor, theme_ids
from termfolio.kernel.window import (
    DragEnd,
    DragMove,
    DragStart,
    ResizeEnd,
    ResizeMove,
    ResizeStart,
    WindowMode,
    initial_geometry,
)
from termfolio.tui.types import TerminalStatus, WindowBox

# Commands reachable from desktop icons, in icon order.
DESKTOP_COMMANDS = (
    ("about", "About"),
    ("skills", "Skills"),
    ("projects", "Projects"),
    ("experience", "Experience"),
    ("education", "Education"),
    ("achievements", "Achievements"),
    ("contact", "Contact"),
    ("joke", "Joke"),
    ("waifu", "Waifu"),
)

_GESTURES = {
    ("drag", "start"): DragStart,
    ("drag", "move"): DragMove,
    ("resize", "start"): ResizeStart,
    ("resize", "move"): ResizeMove,
}


class TerminalController:
    """Owns the terminal and its debug log for one TUI process."""

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[Fetcher] = None,
        registry: Optional[CommandRegistry] = None,
    ) -> None:
        self._settings = settings
        self._bus = EventBus()
        self._debug_log = DebugLogWriter(
            logs_dir=settings.logs_dir,
            enabled=settings.logs_enabled,
            max_file_bytes=settings.logs_max_file_bytes,
            max_files=settings.logs_max_files,
        )
        self._bus.subscribe("*", self._debug_log.write_event)
        self._terminal = Terminal(
            registry=registry or build_default_registry(settings.joke_url, settings.waifu_url),
            fetcher=fetcher
            or HttpxFetcher(timeout_sec=settings.fetch_timeout_sec, user_agent=settings.user_agent),
            theme=settings.theme,
            geometry=initial_geometry(settings.window_width, settings.window_height),
            bus=self._bus,
        )

    @property
    def terminal(self) -> Terminal:
        return self._terminal

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def debug_log(self) -> DebugLogWriter:
        return self._debug_log

    def close(self) -> None:
        self._terminal.set_scheduler(None)
        self._bus.unsubscribe("*", self._debug_log.write_event)

    def set_scheduler(self, scheduler: Optional[CellScheduler]) -> None:
        self._terminal.set_scheduler(scheduler)

    def status(self) -> TerminalStatus:
        theme = self._terminal.theme
        return TerminalStatus(
            theme=theme.preset_id,
            header=theme.header,
            mode=self._terminal.window.mode.value,
            commands=len(self._terminal.registry),
            pending_cells=len(self._terminal.cells.pending()),
        )

    def doctor(self) -> Dict[str, Any]:
        status = self.status()
        report: Dict[str, Any] = {
            "project_root": str(self._settings.project_root),
            "config_root": str(self._settings.config_root),
            "config_initialized": project_config_exists(self._settings.project_root),
            "theme": status.theme,
            "window_mode": status.mode,
            "commands": status.commands,
            "fetch_timeout_sec": self._settings.fetch_timeout_sec,
            "joke_url": self._settings.joke_url,
            "waifu_url": self._settings.waifu_url,
            "bus_handler_errors": self._bus.handler_errors,
        }
        report.update(self._debug_log.status())
        return report

    def window_box(self) -> WindowBox:
        geometry = self._terminal.window.geometry
        cell_w = self._settings.cell_width_px
        cell_h = self._settings.cell_height_px
        return WindowBox(
            left=geometry.x // cell_w,
            top=geometry.y // cell_h,
            width=max(1, geometry.width // cell_w),
            height=max(1, geometry.height // cell_h),
            maximized=geometry.mode == WindowMode.MAXIMIZED,
            visible=geometry.mode != WindowMode.MINIMIZED,
        )

    def pointer_gesture(self, role: str, phase: str, x: int, y: int) -> None:
        """Translate a pointer gesture in screen cells into a window event."""

        if phase == "end":
            self._terminal.window.dispatch(DragEnd() if role == "drag" else ResizeEnd())
            return
        event_type = _GESTURES.get((role, phase))
        if event_type is None:
            return
        px = int(x) * self._settings.cell_width_px
        py = int(y) * self._settings.cell_height_px
        self._terminal.window.dispatch(event_type(px=px, py=py))

    def editor_action(self, action: str, buffer: str) -> str:
        """Apply one editor action to ``buffer`` and return the new input text."""

        editor = self._terminal.editor
        editor.edit(buffer)
        editor.handle(action)
        return editor.buffer

    def cycle_theme(self) -> ThemeDescriptor:
        ids: List[str] = theme_ids()
        current = ids.index(self._terminal.theme.preset_id)
        return self._terminal.select_theme(ids[(current + 1) % len(ids)])


def start_tui(settings: Settings) -> int:
    """Start the Textual desktop and block until it exits."""

    from termfolio.tui.app import TermfolioApp

    controller = TerminalController(settings)
    try:
        app = TermfolioApp(controller=controller)
        app.run()
        return 0
    finally:
        controller.close()

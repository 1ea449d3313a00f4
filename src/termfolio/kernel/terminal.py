"""Terminal facade: one owned instance of every kernel component."""

from __future__ import annotations

from typing import List, Optional

from termfolio.kernel.cells import CellRunner, CellScheduler, CellStore, Fetcher
from termfolio.kernel.dispatcher import Dispatcher
from termfolio.kernel.editor import InputEditor
from termfolio.kernel.eventbus import INPUT_FOCUS, EventBus
from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.session import Session
from termfolio.kernel.theme import DEFAULT_THEME, ThemeBinding, ThemeDescriptor
from termfolio.kernel.types import CommandSummary, ScrollbackLine
from termfolio.kernel.window import WindowGeometry, WindowManager, initial_geometry


class Terminal:
    """Session, dispatcher, editor, cells, window and theme for one window."""

    def __init__(
        self,
        registry: CommandRegistry,
        fetcher: Fetcher,
        theme: object = DEFAULT_THEME,
        scheduler: Optional[CellScheduler] = None,
        geometry: Optional[WindowGeometry] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.bus = bus or EventBus()
        self.registry = registry
        self.session = Session()
        self.cells = CellStore(bus=self.bus)
        self.runner = CellRunner(self.cells, fetcher)
        self.dispatcher = Dispatcher(
            registry=registry,
            session=self.session,
            cells=self.cells,
            scheduler=scheduler,
            bus=self.bus,
        )
        self.editor = InputEditor(self.session, registry, self.dispatcher)
        self.window = WindowManager(geometry or initial_geometry(), bus=self.bus)
        self.theme_binding = ThemeBinding(self.dispatcher.reset_scrollback, bus=self.bus)
        self.focus_requested = False
        self.theme_binding.select(theme)

    @property
    def theme(self) -> ThemeDescriptor:
        return self.theme_binding.theme

    @property
    def scrollback(self) -> List[ScrollbackLine]:
        return list(self.session.scrollback)

    def set_scheduler(self, scheduler: Optional[CellScheduler]) -> None:
        self.dispatcher.set_scheduler(scheduler)

    def submit_command(self, raw: str) -> None:
        """External entry point (desktop icons): restore, dispatch, refocus."""

        self.window.restore()
        self.dispatcher.submit(raw)
        self.request_focus()

    def request_focus(self) -> None:
        self.focus_requested = True
        self.bus.emit(INPUT_FOCUS, {}, source="terminal")

    def consume_focus_request(self) -> bool:
        requested = self.focus_requested
        self.focus_requested = False
        return requested

    def list_commands(self) -> List[CommandSummary]:
        return self.registry.list_commands()

    def select_theme(self, preset_id: object) -> ThemeDescriptor:
        return self.theme_binding.select(preset_id)

"""Command dispatcher: turns submitted text into scrollback lines."""

from __future__ import annotations

from typing import FrozenSet, List, Optional

from termfolio.kernel.cells import CellScheduler, CellStore
from termfolio.kernel.eventbus import (
    COMMAND_DISPATCHED,
    COMMAND_FAILED,
    COMMAND_UNKNOWN,
    SCROLLBACK_CHANGED,
    EventBus,
)
from termfolio.kernel.registry import CommandRegistry, normalize_command_name
from termfolio.kernel.session import Session
from termfolio.kernel.types import (
    AsyncCellResult,
    CommandResult,
    LineKind,
    RichResult,
    ScrollbackLine,
    TextResult,
)

CLEAR_COMMANDS: FrozenSet[str] = frozenset({"clear", "cls"})


def unknown_command_message(name: str) -> str:
    return "Command not found: {0}. Type 'help' for available commands.".format(name)


class Dispatcher:
    """Owns every scrollback/history mutation caused by a submission."""

    def __init__(
        self,
        registry: CommandRegistry,
        session: Session,
        cells: CellStore,
        scheduler: Optional[CellScheduler] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._registry = registry
        self._session = session
        self._cells = cells
        self._scheduler = scheduler
        self._bus = bus

    @property
    def session(self) -> Session:
        return self._session

    def set_scheduler(self, scheduler: Optional[CellScheduler]) -> None:
        self._scheduler = scheduler

    def submit(self, raw: str) -> None:
        self._session.append(LineKind.INPUT, raw)
        normalized = normalize_command_name(raw)
        if not normalized:
            self._changed()
            return

        self._session.record_history(normalized)

        if normalized in CLEAR_COMMANDS:
            self.clear_screen()
            return

        descriptor = self._registry.lookup(normalized)
        if descriptor is None:
            self._session.append(LineKind.ERROR, unknown_command_message(normalized))
            self._emit(COMMAND_UNKNOWN, {"command": normalized})
            self._changed()
            return

        try:
            result = descriptor.handler()
        except Exception as exc:
            self._session.append(
                LineKind.ERROR,
                "Command '{0}' failed: {1}".format(descriptor.name, exc),
            )
            self._emit(COMMAND_FAILED, {"command": descriptor.name, "error": str(exc)})
            self._changed()
            return

        self._render_result(descriptor.name, result)
        self._changed()

    def clear_screen(self) -> None:
        """Wipe the scrollback without echo or history, unmounting live cells."""

        self.reset_scrollback(None)

    def reset_scrollback(self, welcome_text: Optional[str]) -> List[ScrollbackLine]:
        removed = self._session.reset_scrollback(welcome_text)
        self._cells.unmount_lines(removed)
        self._changed()
        return removed

    def _render_result(self, name: str, result: CommandResult) -> None:
        if isinstance(result, TextResult):
            self._session.append(LineKind.OUTPUT, result.text)
        elif isinstance(result, RichResult):
            self._session.append(LineKind.OUTPUT, result.block)
        elif isinstance(result, AsyncCellResult):
            invocation = self._cells.mount(result.spec)
            self._session.append(LineKind.OUTPUT, invocation.ref)
            if self._scheduler is not None:
                self._scheduler(invocation)
        else:
            raise TypeError("unsupported command result: {0!r}".format(result))
        self._emit(COMMAND_DISPATCHED, {"command": name, "result": result.tag})

    def _emit(self, event_type: str, payload: dict) -> None:
        if self._bus is not None:
            self._bus.emit(event_type, payload, source="dispatcher")

    def _changed(self) -> None:
        if self._bus is not None:
            self._bus.emit(
                SCROLLBACK_CHANGED,
                {"lines": len(self._session.scrollback)},
                source="dispatcher",
            )

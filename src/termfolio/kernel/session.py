"""Session state: scrollback, input buffer, command history and cursor."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from termfolio.kernel.types import CellRef, LineContent, LineKind, ScrollbackLine

HISTORY_LIVE = -1


@dataclass
class Session:
    """Mutable terminal session owned by exactly one terminal instance.

    Scrollback is append-only except for a full clear. Line ids come from a
    counter that survives clears, so ids never repeat within a session.
    """

    scrollback: List[ScrollbackLine] = field(default_factory=list)
    input_buffer: str = ""
    history: List[str] = field(default_factory=list)
    history_cursor: int = HISTORY_LIVE
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def append(self, kind: LineKind, content: LineContent) -> ScrollbackLine:
        line = ScrollbackLine(id=next(self._ids), kind=kind, content=content)
        self.scrollback.append(line)
        return line

    def clear_scrollback(self) -> List[ScrollbackLine]:
        removed = self.scrollback
        self.scrollback = []
        return removed

    def reset_scrollback(self, welcome_text: Optional[str] = None) -> List[ScrollbackLine]:
        removed = self.clear_scrollback()
        if welcome_text is not None:
            self.append(LineKind.OUTPUT, welcome_text)
        return removed

    def record_history(self, normalized: str) -> None:
        self.history.append(normalized)
        self.history_cursor = HISTORY_LIVE

    def history_entry(self, cursor: int) -> str:
        return self.history[len(self.history) - 1 - cursor]

    def cell_refs(self) -> List[CellRef]:
        return [line.content for line in self.scrollback if isinstance(line.content, CellRef)]

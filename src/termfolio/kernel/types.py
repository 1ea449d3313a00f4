"""Core typed contracts shared by the terminal kernel and its frontends."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, Union


def now_ms() -> int:
    return int(time.time() * 1000)


class LineKind(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    ERROR = "error"
    SUCCESS = "success"
    INFO = "info"


@dataclass(frozen=True)
class RichBlock:
    """Structured content rendered as a titled card instead of plain text."""

    title: str
    paragraphs: Tuple[str, ...] = field(default_factory=tuple)
    footer: str = ""

    def plain_text(self) -> str:
        parts = [self.title]
        parts.extend(self.paragraphs)
        if self.footer:
            parts.append(self.footer)
        return "\n\n".join(parts)


@dataclass(frozen=True)
class CellRef:
    """Scrollback placeholder whose rendered payload lives in the cell store."""

    cell_id: int


LineContent = Union[str, RichBlock, CellRef]
CellContent = Union[str, RichBlock]


@dataclass(frozen=True)
class ScrollbackLine:
    id: int
    kind: LineKind
    content: LineContent


@dataclass(frozen=True)
class CellSpec:
    """Describes one network-backed command cell."""

    name: str
    url: str
    loading_text: str
    failure_text: str
    parse: Callable[[Dict[str, Any]], CellContent]


@dataclass(frozen=True)
class TextResult:
    tag: ClassVar[str] = "text"

    text: str


@dataclass(frozen=True)
class RichResult:
    tag: ClassVar[str] = "rich"

    block: RichBlock


@dataclass(frozen=True)
class AsyncCellResult:
    tag: ClassVar[str] = "async_cell"

    spec: CellSpec


CommandResult = Union[TextResult, RichResult, AsyncCellResult]
CommandHandler = Callable[[], CommandResult]


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    description: str
    handler: CommandHandler


@dataclass(frozen=True)
class CommandSummary:
    name: str
    description: str


@dataclass
class EventEnvelope:
    event_type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    ts_ms: int = field(default_factory=now_ms)
    source: Optional[str] = None


EventHandler = Callable[[EventEnvelope], None]

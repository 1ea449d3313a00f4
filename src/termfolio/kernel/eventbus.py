"""In-process event bus for decoupled listeners."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Dict, List, Optional

from termfolio.kernel.types import EventEnvelope, EventHandler

SCROLLBACK_CHANGED = "scrollback.changed"
CELL_MOUNTED = "cell.mounted"
CELL_UPDATED = "cell.updated"
CELL_DISCARDED = "cell.discarded"
COMMAND_DISPATCHED = "command.dispatched"
COMMAND_UNKNOWN = "command.unknown"
COMMAND_FAILED = "command.failed"
WINDOW_CHANGED = "window.changed"
THEME_CHANGED = "theme.changed"
INPUT_FOCUS = "input.focus"


class EventBus:
    """Simple pub-sub implementation scoped to one terminal instance."""

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, List[EventHandler]] = defaultdict(list)
        self._handler_errors = 0

    @property
    def handler_errors(self) -> int:
        return self._handler_errors

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: str, payload: Optional[Dict[str, Any]] = None, source: Optional[str] = None) -> None:
        self.publish(EventEnvelope(event_type=event_type, payload=dict(payload or {}), source=source))

    def publish(self, event: EventEnvelope) -> None:
        handlers = list(self._subscribers.get(event.event_type, []))
        handlers += list(self._subscribers.get("*", []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # Listeners never break the publishing transition.
                self._handler_errors += 1
                continue

"""Async command cells: network-backed scrollback slots with their own lifecycle."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

import httpx

from termfolio.errors import CellFetchError
from termfolio.kernel.eventbus import CELL_DISCARDED, CELL_MOUNTED, CELL_UPDATED, EventBus
from termfolio.kernel.types import CellContent, CellRef, CellSpec, ScrollbackLine

Fetcher = Callable[[str], Awaitable[Dict[str, Any]]]

DEFAULT_USER_AGENT = "termfolio/0.1"


class CellStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass
class CellInvocation:
    cell_id: int
    spec: CellSpec
    status: CellStatus = CellStatus.PENDING
    content: Optional[CellContent] = None
    error: Optional[str] = None

    @property
    def ref(self) -> CellRef:
        return CellRef(self.cell_id)


CellScheduler = Callable[[CellInvocation], None]


class CellStore:
    """Live async cells keyed by id.

    A cell is live from mount until its scrollback slot goes away. Results
    for cells that are no longer live are discarded.
    """

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self._bus = bus
        self._live: Dict[int, CellInvocation] = {}
        self._next_id = 1

    def mount(self, spec: CellSpec) -> CellInvocation:
        invocation = CellInvocation(cell_id=self._next_id, spec=spec)
        self._next_id += 1
        self._live[invocation.cell_id] = invocation
        self._emit(CELL_MOUNTED, invocation)
        return invocation

    def get(self, cell_id: int) -> Optional[CellInvocation]:
        return self._live.get(cell_id)

    def is_live(self, cell_id: int) -> bool:
        return cell_id in self._live

    def pending(self) -> List[CellInvocation]:
        return [item for item in self._live.values() if item.status == CellStatus.PENDING]

    def __len__(self) -> int:
        return len(self._live)

    def resolve(self, cell_id: int, content: CellContent) -> bool:
        invocation = self._settle_target(cell_id)
        if invocation is None:
            return False
        invocation.status = CellStatus.RESOLVED
        invocation.content = content
        self._emit(CELL_UPDATED, invocation)
        return True

    def fail(self, cell_id: int, message: str) -> bool:
        invocation = self._settle_target(cell_id)
        if invocation is None:
            return False
        invocation.status = CellStatus.FAILED
        invocation.error = message
        self._emit(CELL_UPDATED, invocation)
        return True

    def unmount(self, cell_id: int) -> None:
        self._live.pop(cell_id, None)

    def unmount_lines(self, lines: Iterable[ScrollbackLine]) -> None:
        for line in lines:
            if isinstance(line.content, CellRef):
                self.unmount(line.content.cell_id)

    def _settle_target(self, cell_id: int) -> Optional[CellInvocation]:
        invocation = self._live.get(cell_id)
        if invocation is None:
            if self._bus is not None:
                self._bus.emit(CELL_DISCARDED, {"cell_id": cell_id}, source="cells")
            return None
        if invocation.status != CellStatus.PENDING:
            return None
        return invocation

    def _emit(self, event_type: str, invocation: CellInvocation) -> None:
        if self._bus is None:
            return
        self._bus.emit(
            event_type,
            {
                "cell_id": invocation.cell_id,
                "name": invocation.spec.name,
                "status": invocation.status.value,
                "error": invocation.error or "",
            },
            source="cells",
        )


class HttpxFetcher:
    """Single best-effort JSON GET per call."""

    def __init__(
        self,
        timeout_sec: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = float(timeout_sec)
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._transport = transport

    async def __call__(self, url: str) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise CellFetchError(
                "request failed with status {0}".format(exc.response.status_code),
                url=url,
            ) from exc
        except httpx.HTTPError as exc:
            raise CellFetchError("request failed: {0}".format(exc), url=url) from exc
        except ValueError as exc:
            raise CellFetchError("response is not valid JSON", url=url) from exc

        if not isinstance(data, dict):
            raise CellFetchError("unexpected payload shape", url=url, shape=type(data).__name__)
        return data


class CellRunner:
    """Runs one cell's fetch and applies the outcome to the store."""

    def __init__(self, store: CellStore, fetcher: Fetcher) -> None:
        self._store = store
        self._fetcher = fetcher

    async def run(self, invocation: CellInvocation) -> bool:
        spec = invocation.spec
        try:
            payload = await self._fetcher(spec.url)
            content = spec.parse(payload)
        except Exception:
            # Every failure collapses into the cell's own error state.
            return self._store.fail(invocation.cell_id, spec.failure_text)
        return self._store.resolve(invocation.cell_id, content)


class DeferredScheduler:
    """Collects spawned cells so a caller can run them after dispatch."""

    def __init__(self) -> None:
        self._queued: List[CellInvocation] = []

    def __call__(self, invocation: CellInvocation) -> None:
        self._queued.append(invocation)

    async def run_all(self, runner: CellRunner) -> List[bool]:
        queued, self._queued = self._queued, []
        if not queued:
            return []
        return list(await asyncio.gather(*(runner.run(item) for item in queued)))

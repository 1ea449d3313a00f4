from __future__ import annotations

import asyncio

import httpx
import pytest

from termfolio.errors import CellFetchError
from termfolio.kernel.cells import CellRunner, CellStatus, CellStore, DeferredScheduler, HttpxFetcher
from termfolio.kernel.content import build_default_registry, joke_cell
from termfolio.kernel.eventbus import EventBus
from termfolio.kernel.terminal import Terminal
from termfolio.kernel.types import CellRef, RichBlock


class _GatedFetcher:
    """Fetcher whose responses are released explicitly by the test."""

    def __init__(self) -> None:
        self.gates = {}
        self.payloads = {}

    def prepare(self, url: str, payload: dict) -> None:
        self.gates[url] = asyncio.Event()
        self.payloads[url] = payload

    async def __call__(self, url: str) -> dict:
        await self.gates[url].wait()
        payload = self.payloads[url]
        if isinstance(payload, Exception):
            raise payload
        return payload


def _single_joke(text: str) -> dict:
    return {"type": "single", "joke": text}


def test_cells_resolve_out_of_order_without_reordering_scrollback():
    async def _run() -> None:
        fetcher = _GatedFetcher()
        registry = build_default_registry(joke_url="http://jokes.test/1", waifu_url="http://waifu.test/1")
        scheduler = DeferredScheduler()
        terminal = Terminal(registry, fetcher, scheduler=scheduler)
        fetcher.prepare("http://jokes.test/1", _single_joke("first"))
        fetcher.prepare("http://waifu.test/1", {"url": "https://img.test/w.png"})

        terminal.submit_command("joke")
        terminal.submit_command("waifu")
        refs = terminal.session.cell_refs()
        order = [line.id for line in terminal.session.scrollback]

        task = asyncio.ensure_future(scheduler.run_all(terminal.runner))
        fetcher.gates["http://waifu.test/1"].set()
        for _ in range(5):
            await asyncio.sleep(0)
        assert terminal.cells.get(refs[1].cell_id).status == CellStatus.RESOLVED
        assert terminal.cells.get(refs[0].cell_id).status == CellStatus.PENDING

        fetcher.gates["http://jokes.test/1"].set()
        assert await task == [True, True]

        assert [line.id for line in terminal.session.scrollback] == order
        assert terminal.session.cell_refs() == refs
        assert terminal.cells.get(refs[0].cell_id).content == RichBlock("JOKE", ("first",))

    asyncio.run(_run())


class _PerCallGatedFetcher:
    """Fetcher that parks every call on its own gate, in call order."""

    def __init__(self, payloads) -> None:
        self.gates = []
        self._payloads = list(payloads)

    async def __call__(self, url: str) -> dict:
        gate = asyncio.Event()
        payload = self._payloads[len(self.gates)]
        self.gates.append(gate)
        await gate.wait()
        return payload


def test_same_command_twice_resolves_into_its_own_slot():
    async def _run() -> None:
        fetcher = _PerCallGatedFetcher([_single_joke("first"), _single_joke("second")])
        scheduler = DeferredScheduler()
        terminal = Terminal(build_default_registry(), fetcher, scheduler=scheduler)

        terminal.submit_command("joke")
        terminal.submit_command("joke")
        refs = terminal.session.cell_refs()
        order = [line.id for line in terminal.session.scrollback]

        task = asyncio.ensure_future(scheduler.run_all(terminal.runner))
        for _ in range(5):
            await asyncio.sleep(0)
        assert len(fetcher.gates) == 2

        fetcher.gates[1].set()
        for _ in range(5):
            await asyncio.sleep(0)
        assert terminal.cells.get(refs[1].cell_id).status == CellStatus.RESOLVED
        assert terminal.cells.get(refs[0].cell_id).status == CellStatus.PENDING

        fetcher.gates[0].set()
        assert await task == [True, True]

        assert [line.id for line in terminal.session.scrollback] == order
        assert terminal.cells.get(refs[0].cell_id).content == RichBlock("JOKE", ("first",))
        assert terminal.cells.get(refs[1].cell_id).content == RichBlock("JOKE", ("second",))

    asyncio.run(_run())


def test_result_for_cleared_cell_is_discarded():
    async def _run() -> None:
        fetcher = _GatedFetcher()
        registry = build_default_registry(joke_url="http://jokes.test/1")
        scheduler = DeferredScheduler()
        terminal = Terminal(registry, fetcher, scheduler=scheduler)
        discarded = []
        terminal.bus.subscribe("cell.discarded", discarded.append)
        fetcher.prepare("http://jokes.test/1", _single_joke("late"))

        terminal.submit_command("joke")
        task = asyncio.ensure_future(scheduler.run_all(terminal.runner))
        await asyncio.sleep(0)
        terminal.submit_command("clear")
        fetcher.gates["http://jokes.test/1"].set()

        assert await task == [False]
        assert terminal.session.scrollback == []
        assert len(terminal.cells) == 0
        assert len(discarded) == 1

    asyncio.run(_run())


def test_fetch_failure_is_local_to_the_cell():
    async def _run() -> None:
        async def _failing(url: str) -> dict:
            raise CellFetchError("boom", url=url)

        store = CellStore()
        runner = CellRunner(store, _failing)
        invocation = store.mount(joke_cell("http://jokes.test/1"))

        assert await runner.run(invocation) is True
        cell = store.get(invocation.cell_id)
        assert cell.status == CellStatus.FAILED
        assert cell.error == "Failed to fetch joke"

    asyncio.run(_run())


def test_parse_failure_marks_cell_failed():
    async def _run() -> None:
        async def _bad_payload(url: str) -> dict:
            return {"type": "twopart"}

        store = CellStore()
        runner = CellRunner(store, _bad_payload)
        invocation = store.mount(joke_cell())

        await runner.run(invocation)

        assert store.get(invocation.cell_id).status == CellStatus.FAILED

    asyncio.run(_run())


def test_cell_settles_once():
    bus = EventBus()
    updates = []
    bus.subscribe("cell.updated", updates.append)
    store = CellStore(bus=bus)
    invocation = store.mount(joke_cell())

    assert store.resolve(invocation.cell_id, "ok") is True
    assert store.fail(invocation.cell_id, "late failure") is False
    assert store.get(invocation.cell_id).content == "ok"
    assert len(updates) == 1


def test_terminal_scrollback_keeps_cell_slot_while_pending():
    terminal = Terminal(build_default_registry(), _GatedFetcher(), scheduler=DeferredScheduler())

    terminal.submit_command("joke")

    line = terminal.session.scrollback[-1]
    assert isinstance(line.content, CellRef)
    assert terminal.cells.get(line.content.cell_id).status == CellStatus.PENDING


def test_httpx_fetcher_returns_json_object():
    async def _run() -> None:
        seen = []

        def _handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"type": "single", "joke": "hi"})

        fetcher = HttpxFetcher(timeout_sec=1, transport=httpx.MockTransport(_handler))
        payload = await fetcher("http://jokes.test/any")

        assert payload == {"type": "single", "joke": "hi"}
        assert seen[0].headers["Accept"] == "application/json"

    asyncio.run(_run())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"error": True}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["list", "payload"]),
    ],
)
def test_httpx_fetcher_maps_failures_to_cell_fetch_error(response):
    async def _run() -> None:
        fetcher = HttpxFetcher(timeout_sec=1, transport=httpx.MockTransport(lambda request: response))
        with pytest.raises(CellFetchError) as exc_info:
            await fetcher("http://jokes.test/any")
        assert exc_info.value.details["url"] == "http://jokes.test/any"

    asyncio.run(_run())


def test_httpx_fetcher_maps_transport_errors():
    async def _run() -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        fetcher = HttpxFetcher(timeout_sec=1, transport=httpx.MockTransport(_handler))
        with pytest.raises(CellFetchError):
            await fetcher("http://jokes.test/any")

    asyncio.run(_run())

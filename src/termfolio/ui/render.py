"""Presentation helpers shared by the CLI and the Textual terminal."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, TextIO

from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from termfolio.kernel.cells import CellInvocation, CellStatus, CellStore
from termfolio.kernel.theme import ThemeDescriptor
from termfolio.kernel.types import CellRef, LineKind, RichBlock, ScrollbackLine


def render_notice(level: str, text: str) -> str:
    prefix_map = {
        "info": "Info",
        "warn": "Warning",
        "error": "Error",
        "success": "Success",
    }
    prefix = prefix_map.get(level, "Info")
    return "{0}: {1}".format(prefix, text)


def render_doctor_text(report: Dict[str, Any]) -> str:
    rotated = report.get("logs_rotated_files")
    if not isinstance(rotated, list):
        rotated = []
    lines = [
        "Doctor Report",
        "project_root={0}".format(report.get("project_root", "")),
        "config_root={0}".format(report.get("config_root", "")),
        "config_initialized={0}".format(bool(report.get("config_initialized"))),
        "",
        "Terminal",
        "theme={0} window_mode={1}".format(report.get("theme", ""), report.get("window_mode", "")),
        "commands={0}".format(int(report.get("commands") or 0)),
        "fetch_timeout_sec={0}".format(report.get("fetch_timeout_sec", "")),
        "joke_url={0}".format(report.get("joke_url", "")),
        "waifu_url={0}".format(report.get("waifu_url", "")),
        "bus_handler_errors={0}".format(int(report.get("bus_handler_errors") or 0)),
        "",
        "Debug Log",
        "logs_enabled={0}".format(bool(report.get("logs_enabled"))),
        "logs_active_file={0}".format(report.get("logs_active_file", "")),
        "logs_total_size_bytes={0} logs_rotated_files={1}".format(
            int(report.get("logs_total_size_bytes") or 0),
            len(rotated),
        ),
        "logs_write_errors={0}".format(int(report.get("logs_write_errors") or 0)),
    ]
    return "\n".join(lines)


def _is_tty(stream: TextIO, forced: Optional[bool]) -> bool:
    if forced is not None:
        return forced
    isatty = getattr(stream, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except (OSError, ValueError):
            return False
    return False


def _line_style(kind: LineKind, theme: ThemeDescriptor) -> str:
    palette = theme.palette
    if kind == LineKind.ERROR:
        return palette.error
    if kind == LineKind.SUCCESS:
        return palette.success
    if kind == LineKind.INFO:
        return palette.info
    return palette.foreground


def rich_block_panel(block: RichBlock, theme: ThemeDescriptor) -> Panel:
    body: List[RenderableType] = [Text(paragraph, style=theme.palette.foreground) for paragraph in block.paragraphs]
    if block.footer:
        body.append(Text(block.footer, style="italic {0}".format(theme.palette.info)))
    return Panel(
        Group(*body),
        title=block.title,
        title_align="left",
        border_style=theme.palette.caret,
        box=box.ROUNDED,
    )


def cell_renderable(invocation: Optional[CellInvocation], theme: ThemeDescriptor) -> RenderableType:
    if invocation is None:
        # slot whose cell was unmounted before the line went away
        return Text("")
    if invocation.status == CellStatus.PENDING:
        return Text(invocation.spec.loading_text, style="dim {0}".format(theme.palette.foreground))
    if invocation.status == CellStatus.FAILED:
        return Text(invocation.error or invocation.spec.failure_text, style=theme.palette.error)
    content = invocation.content
    if isinstance(content, RichBlock):
        return rich_block_panel(content, theme)
    return Text(str(content or ""), style=theme.palette.foreground)


def line_renderable(line: ScrollbackLine, cells: CellStore, theme: ThemeDescriptor) -> RenderableType:
    content = line.content
    if line.kind == LineKind.INPUT:
        echo = Text()
        echo.append(theme.prompt + " ", style="bold {0}".format(theme.palette.caret))
        echo.append(str(content), style=theme.palette.foreground)
        return echo
    if isinstance(content, CellRef):
        return cell_renderable(cells.get(content.cell_id), theme)
    if isinstance(content, RichBlock):
        return rich_block_panel(content, theme)
    return Text(str(content), style=_line_style(line.kind, theme))


def line_plain_text(line: ScrollbackLine, cells: CellStore, theme: ThemeDescriptor) -> str:
    content = line.content
    if line.kind == LineKind.INPUT:
        return "{0} {1}".format(theme.prompt, content)
    if isinstance(content, CellRef):
        invocation = cells.get(content.cell_id)
        if invocation is None:
            return ""
        if invocation.status == CellStatus.PENDING:
            return invocation.spec.loading_text
        if invocation.status == CellStatus.FAILED:
            return invocation.error or invocation.spec.failure_text
        content = invocation.content
    if isinstance(content, RichBlock):
        return content.plain_text()
    return str(content or "")


def print_scrollback(
    lines: Iterable[ScrollbackLine],
    cells: CellStore,
    theme: ThemeDescriptor,
    stream: TextIO,
    is_tty: Optional[bool] = None,
) -> None:
    if _is_tty(stream, is_tty):
        console = Console(file=stream, highlight=False, soft_wrap=True)
        for line in lines:
            console.print(line_renderable(line, cells, theme))
        return

    for line in lines:
        stream.write(line_plain_text(line, cells, theme) + "\n")

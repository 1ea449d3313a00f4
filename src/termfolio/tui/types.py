"""Typed models for the termfolio Textual desktop."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TerminalStatus:
    theme: str
    header: str
    mode: str
    commands: int
    pending_cells: int = 0


@dataclass(frozen=True)
class WindowBox:
    """Window geometry in terminal cells, ready for Textual styles."""

    left: int
    top: int
    width: int
    height: int
    maximized: bool = False
    visible: bool = True

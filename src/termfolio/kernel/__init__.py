"""UI-free terminal kernel: registry, session, dispatcher, editor, cells, window, theme."""

from termfolio.kernel.cells import CellInvocation, CellRunner, CellStatus, CellStore, HttpxFetcher
from termfolio.kernel.dispatcher import Dispatcher
from termfolio.kernel.editor import InputEditor
from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.session import Session
from termfolio.kernel.terminal import Terminal
from termfolio.kernel.theme import ThemeDescriptor, ThemePreset, get_theme
from termfolio.kernel.window import WindowGeometry, WindowManager, WindowMode

__all__ = [
    "CellInvocation",
    "CellRunner",
    "CellStatus",
    "CellStore",
    "CommandRegistry",
    "Dispatcher",
    "HttpxFetcher",
    "InputEditor",
    "Session",
    "Terminal",
    "ThemeDescriptor",
    "ThemePreset",
    "WindowGeometry",
    "WindowManager",
    "WindowMode",
    "get_theme",
]

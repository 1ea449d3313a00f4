"""Theme presets and the read-only binding consumed by the terminal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from termfolio.errors import UnknownThemeError
from termfolio.kernel.content import WELCOME_MESSAGE
from termfolio.kernel.eventbus import THEME_CHANGED, EventBus


class ThemePreset(str, Enum):
    POWERSHELL = "powershell"
    MATRIX = "matrix"
    UBUNTU = "ubuntu"
    DRACULA = "dracula"
    CMD = "cmd"


DEFAULT_THEME = ThemePreset.POWERSHELL


@dataclass(frozen=True)
class Palette:
    background: str
    foreground: str
    caret: str
    error: str = "#f25f5c"
    success: str = "#62d26f"
    info: str = "#4ec9d6"


@dataclass(frozen=True)
class ThemeDescriptor:
    preset_id: str
    header: str
    prompt: str
    welcome: str
    palette: Palette


_PRESETS: Dict[ThemePreset, ThemeDescriptor] = {
    ThemePreset.POWERSHELL: ThemeDescriptor(
        preset_id=ThemePreset.POWERSHELL.value,
        header="Windows PowerShell",
        prompt="PS C:\\Users\\siddharth>",
        welcome=WELCOME_MESSAGE,
        palette=Palette(background="#012456", foreground="#ffffff", caret="#ffffff"),
    ),
    ThemePreset.MATRIX: ThemeDescriptor(
        preset_id=ThemePreset.MATRIX.value,
        header="Matrix Core",
        prompt="neo@matrix:~$",
        welcome="Wake up, Neo...\n\nHello, World! I'm Siddharth Jindal\nI'm a Software Developer & AI Engineer.",
        palette=Palette(background="#000500", foreground="#00ff41", caret="#00ff41"),
    ),
    ThemePreset.UBUNTU: ThemeDescriptor(
        preset_id=ThemePreset.UBUNTU.value,
        header="Terminal (Ubuntu)",
        prompt="siddharth@ubuntu:~$",
        welcome=WELCOME_MESSAGE,
        palette=Palette(background="#300a24", foreground="#ffffff", caret="#ffffff"),
    ),
    ThemePreset.DRACULA: ThemeDescriptor(
        preset_id=ThemePreset.DRACULA.value,
        header="Dracula Terminal",
        prompt="λ",
        welcome=WELCOME_MESSAGE,
        palette=Palette(background="#282a36", foreground="#f8f8f2", caret="#bd93f9"),
    ),
    ThemePreset.CMD: ThemeDescriptor(
        preset_id=ThemePreset.CMD.value,
        header="Command Prompt",
        prompt="C:\\Users\\siddharth>",
        welcome=WELCOME_MESSAGE,
        palette=Palette(background="#000000", foreground="#ffffff", caret="#ffffff"),
    ),
}


def theme_ids() -> List[str]:
    return [preset.value for preset in ThemePreset]


def get_theme(preset_id: object) -> ThemeDescriptor:
    normalized = str(getattr(preset_id, "value", preset_id) or "").strip().lower()
    try:
        preset = ThemePreset(normalized)
    except ValueError:
        raise UnknownThemeError(
            "unknown theme: {0} (choose one of: {1})".format(preset_id, ", ".join(theme_ids())),
            theme=str(preset_id),
        ) from None
    return _PRESETS[preset]


class ThemeBinding:
    """Holds the selected preset; selecting one resets the scrollback."""

    def __init__(
        self,
        reset_scrollback: Callable[[str], object],
        bus: Optional[EventBus] = None,
    ) -> None:
        self._reset_scrollback = reset_scrollback
        self._bus = bus
        self._theme: Optional[ThemeDescriptor] = None

    @property
    def theme(self) -> ThemeDescriptor:
        if self._theme is None:
            return get_theme(DEFAULT_THEME)
        return self._theme

    def select(self, preset_id: object) -> ThemeDescriptor:
        theme = get_theme(preset_id)
        previous = self._theme.preset_id if self._theme is not None else ""
        self._theme = theme
        self._reset_scrollback(theme.welcome)
        if self._bus is not None:
            self._bus.emit(
                THEME_CHANGED,
                {"theme": theme.preset_id, "previous": previous},
                source="theme",
            )
        return theme

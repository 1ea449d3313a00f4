"""Floating window geometry and lifecycle as a pure reducer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type, Union

from termfolio.kernel.eventbus import WINDOW_CHANGED, EventBus

MIN_WIDTH = 400
MIN_HEIGHT = 300
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 500


class WindowMode(str, Enum):
    NORMAL = "normal"
    MINIMIZED = "minimized"
    MAXIMIZED = "maximized"


@dataclass(frozen=True)
class WindowGeometry:
    x: int = 0
    y: int = 0
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    mode: WindowMode = WindowMode.NORMAL
    dragging: bool = False
    resizing: bool = False
    drag_offset: Tuple[int, int] = (0, 0)
    # pointer x, pointer y, width, height captured at resize start
    resize_anchor: Tuple[int, int, int, int] = (0, 0, 0, 0)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class Minimize:
    pass


@dataclass(frozen=True)
class Restore:
    pass


@dataclass(frozen=True)
class ToggleMaximize:
    pass


@dataclass(frozen=True)
class DragStart:
    px: int
    py: int


@dataclass(frozen=True)
class DragMove:
    px: int
    py: int


@dataclass(frozen=True)
class DragEnd:
    pass


@dataclass(frozen=True)
class ResizeStart:
    px: int
    py: int


@dataclass(frozen=True)
class ResizeMove:
    px: int
    py: int


@dataclass(frozen=True)
class ResizeEnd:
    pass


WindowEvent = Union[
    Minimize,
    Restore,
    ToggleMaximize,
    DragStart,
    DragMove,
    DragEnd,
    ResizeStart,
    ResizeMove,
    ResizeEnd,
]


def clamp_size(width: int, height: int) -> Tuple[int, int]:
    return (max(MIN_WIDTH, int(width)), max(MIN_HEIGHT, int(height)))


def initial_geometry(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> WindowGeometry:
    clamped_width, clamped_height = clamp_size(width, height)
    return WindowGeometry(width=clamped_width, height=clamped_height)


def _idle(geometry: WindowGeometry, mode: WindowMode) -> WindowGeometry:
    return replace(geometry, mode=mode, dragging=False, resizing=False)


def _minimize(geometry: WindowGeometry, event: Minimize) -> WindowGeometry:
    if geometry.mode == WindowMode.MINIMIZED:
        return geometry
    return _idle(geometry, WindowMode.MINIMIZED)


def _restore(geometry: WindowGeometry, event: Restore) -> WindowGeometry:
    if geometry.mode != WindowMode.MINIMIZED:
        return geometry
    return _idle(geometry, WindowMode.NORMAL)


def _toggle_maximize(geometry: WindowGeometry, event: ToggleMaximize) -> WindowGeometry:
    if geometry.mode == WindowMode.NORMAL:
        return _idle(geometry, WindowMode.MAXIMIZED)
    if geometry.mode == WindowMode.MAXIMIZED:
        return _idle(geometry, WindowMode.NORMAL)
    return geometry


def _drag_start(geometry: WindowGeometry, event: DragStart) -> WindowGeometry:
    if geometry.mode != WindowMode.NORMAL:
        return geometry
    return replace(
        geometry,
        dragging=True,
        resizing=False,
        drag_offset=(event.px - geometry.x, event.py - geometry.y),
    )


def _drag_move(geometry: WindowGeometry, event: DragMove) -> WindowGeometry:
    if geometry.mode != WindowMode.NORMAL or not geometry.dragging:
        return geometry
    offset_x, offset_y = geometry.drag_offset
    return replace(geometry, x=event.px - offset_x, y=event.py - offset_y)


def _drag_end(geometry: WindowGeometry, event: DragEnd) -> WindowGeometry:
    if not geometry.dragging:
        return geometry
    return replace(geometry, dragging=False)


def _resize_start(geometry: WindowGeometry, event: ResizeStart) -> WindowGeometry:
    if geometry.mode != WindowMode.NORMAL:
        return geometry
    return replace(
        geometry,
        resizing=True,
        dragging=False,
        resize_anchor=(event.px, event.py, geometry.width, geometry.height),
    )


def _resize_move(geometry: WindowGeometry, event: ResizeMove) -> WindowGeometry:
    if geometry.mode != WindowMode.NORMAL or not geometry.resizing:
        return geometry
    anchor_x, anchor_y, anchor_width, anchor_height = geometry.resize_anchor
    width, height = clamp_size(
        anchor_width + (event.px - anchor_x),
        anchor_height + (event.py - anchor_y),
    )
    return replace(geometry, width=width, height=height)


def _resize_end(geometry: WindowGeometry, event: ResizeEnd) -> WindowGeometry:
    if not geometry.resizing:
        return geometry
    return replace(geometry, resizing=False)


_REDUCERS: Dict[Type, Callable[[WindowGeometry, object], WindowGeometry]] = {
    Minimize: _minimize,
    Restore: _restore,
    ToggleMaximize: _toggle_maximize,
    DragStart: _drag_start,
    DragMove: _drag_move,
    DragEnd: _drag_end,
    ResizeStart: _resize_start,
    ResizeMove: _resize_move,
    ResizeEnd: _resize_end,
}


def reduce_window(geometry: WindowGeometry, event: WindowEvent) -> WindowGeometry:
    reducer = _REDUCERS.get(type(event))
    if reducer is None:
        raise TypeError("unsupported window event: {0!r}".format(event))
    return reducer(geometry, event)


def request_size(geometry: WindowGeometry, width: int, height: int) -> WindowGeometry:
    """Direct size request (outside a pointer gesture), clamped to the minimum."""

    if geometry.mode != WindowMode.NORMAL:
        return geometry
    clamped_width, clamped_height = clamp_size(width, height)
    return replace(geometry, width=clamped_width, height=clamped_height)


class WindowManager:
    """Owns the geometry of one terminal window."""

    def __init__(self, geometry: Optional[WindowGeometry] = None, bus: Optional[EventBus] = None) -> None:
        self._geometry = geometry or initial_geometry()
        self._bus = bus

    @property
    def geometry(self) -> WindowGeometry:
        return self._geometry

    @property
    def mode(self) -> WindowMode:
        return self._geometry.mode

    def dispatch(self, event: WindowEvent) -> WindowGeometry:
        return self._apply(reduce_window(self._geometry, event), type(event).__name__)

    def resize_to(self, width: int, height: int) -> WindowGeometry:
        return self._apply(request_size(self._geometry, width, height), "ResizeTo")

    def minimize(self) -> WindowGeometry:
        return self.dispatch(Minimize())

    def restore(self) -> WindowGeometry:
        return self.dispatch(Restore())

    def toggle_maximize(self) -> WindowGeometry:
        return self.dispatch(ToggleMaximize())

    def _apply(self, updated: WindowGeometry, event_name: str) -> WindowGeometry:
        if updated == self._geometry:
            return updated
        previous_mode = self._geometry.mode
        self._geometry = updated
        if self._bus is not None:
            self._bus.emit(
                WINDOW_CHANGED,
                {
                    "event": event_name,
                    "mode": updated.mode.value,
                    "previous_mode": previous_mode.value,
                    "x": updated.x,
                    "y": updated.y,
                    "width": updated.width,
                    "height": updated.height,
                },
                source="window",
            )
        return updated

"""Mouse events and their delivery to an input-injection backend."""

from __future__ import annotations

import abc
import enum
import struct
from dataclasses import dataclass
from typing import Optional

from ranacore.concurrent_queue import ConcurrentQueue

_FORMAT = struct.Struct("<hhbHHI")


class MouseButton(enum.IntEnum):
    """Button numbers as used by the X server."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    SCROLL_UP = 4
    SCROLL_DOWN = 5


class CoordMode(enum.IntEnum):
    """How the coordinates of a motion event are interpreted."""

    ABSOLUTE = 0
    RELATIVE = 1


_SCROLL_BUTTONS = (MouseButton.SCROLL_UP, MouseButton.SCROLL_DOWN)


@dataclass(frozen=True)
class MouseEvent:
    """A button change (``clicked``) or a pointer motion.

    For button events ``state`` is pressed (non-zero) or released (zero);
    for motion events it is a CoordMode.
    """

    x: int = 0
    y: int = 0
    clicked: bool = False
    button: int = 0
    state: int = 0
    event_index: int = 0

    SIZE = _FORMAT.size

    def pack(self) -> bytes:
        """Encode as the 13-byte little-endian wire record."""
        try:
            return _FORMAT.pack(
                self.x,
                self.y,
                int(self.clicked),
                self.button,
                self.state,
                self.event_index,
            )
        except struct.error as exc:
            raise ValueError(f"mouse event field out of range: {self}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "MouseEvent":
        """Decode a record produced by ``pack``."""
        if len(data) != _FORMAT.size:
            raise ValueError(f"expected {_FORMAT.size} bytes, got {len(data)}")
        x, y, clicked, button, state, event_index = _FORMAT.unpack(data)
        return cls(x, y, bool(clicked), button, state, event_index)


class MouseBackend(abc.ABC):
    """Injects synthetic pointer input into a display."""

    @abc.abstractmethod
    def button(self, button: int, state: int) -> None:
        """Press (non-zero ``state``) or release a button."""

    @abc.abstractmethod
    def motion(self, x: int, y: int) -> None:
        """Move the pointer to an absolute position."""

    @abc.abstractmethod
    def relative_motion(self, dx: int, dy: int) -> None:
        """Move the pointer by an offset."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Push pending input to the display."""


def _move(backend: MouseBackend, event: MouseEvent) -> None:
    if event.state == CoordMode.ABSOLUTE:
        backend.motion(event.x, event.y)
    else:
        backend.relative_motion(event.x, event.y)


def handle_mouse_event(backend: MouseBackend, event: MouseEvent) -> None:
    """Deliver one event and flush.

    A scroll-button press is followed at once by its release.
    """
    if event.clicked:
        backend.button(event.button, event.state)
        if event.button in _SCROLL_BUTTONS:
            backend.button(event.button, 0)
    else:
        _move(backend, event)
    backend.flush()


def handle_mouse_events(
    backend: Optional[MouseBackend], queue: ConcurrentQueue
) -> int:
    """Deliver the events queued at the time of the call; return how many.

    Nothing is taken from the queue when there is no backend.
    """
    if backend is None:
        return 0
    handled = 0
    for _ in range(len(queue)):
        event = queue.pop()
        if event is None:
            break
        if event.clicked:
            backend.button(event.button, event.state)
        else:
            _move(backend, event)
        handled += 1
    backend.flush()
    return handled
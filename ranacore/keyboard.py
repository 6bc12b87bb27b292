"""Keyboard events and their delivery to an input-injection backend."""

from __future__ import annotations

import abc
import enum
import struct
from dataclasses import dataclass
from typing import Dict, Optional

from ranacore.concurrent_queue import ConcurrentQueue
from ranacore.scancodes import Scancode, scancode_to_keycode

_FORMAT = struct.Struct("<IiI")


class Keysym(enum.IntEnum):
    """X keysyms for the non-character keys that are handled specially."""

    RETURN = 0xFF0D
    SHIFT_L = 0xFFE1
    SHIFT_R = 0xFFE2
    CAPS_LOCK = 0xFFE5
    BACKSPACE = 0xFF08
    KP_UP = 0xFF52
    KP_DOWN = 0xFF54
    KP_LEFT = 0xFF51
    KP_RIGHT = 0xFF53
    TAB = 0xFF09
    CONTROL_L = 0xFFE3
    CONTROL_R = 0xFFE4
    ALT_L = 0xFFE9
    ALT_R = 0xFFEA
    ESCAPE = 0xFF1B
    F1 = 0xFFBE
    F2 = 0xFFBF
    F3 = 0xFFC0
    F4 = 0xFFC1
    F5 = 0xFFC2
    F6 = 0xFFC3
    F7 = 0xFFC4
    F8 = 0xFFC5
    F9 = 0xFFC6
    F10 = 0xFFC7
    F11 = 0xFFC8
    F12 = 0xFFC9
    INSERT = 0xFF63
    DELETE = 0xFFFF
    HOME = 0xFF50
    PAGE_UP = 0xFF55
    PAGE_DOWN = 0xFF56
    END = 0xFF57


class _LinuxKey(enum.IntEnum):
    """Linux input-event key codes that map to special keysyms."""

    ESC = 1
    BACKSPACE = 14
    TAB = 15
    ENTER = 28
    LEFTCTRL = 29
    LEFTSHIFT = 42
    RIGHTSHIFT = 54
    LEFTALT = 56
    CAPSLOCK = 58
    F1 = 59
    F2 = 60
    F3 = 61
    F4 = 62
    F5 = 63
    F6 = 64
    F7 = 65
    F8 = 66
    F9 = 67
    F10 = 68
    F11 = 87
    F12 = 88
    RIGHTCTRL = 97
    RIGHTALT = 100
    HOME = 102
    UP = 103
    PAGEUP = 104
    LEFT = 105
    RIGHT = 106
    END = 107
    DOWN = 108
    PAGEDOWN = 109
    INSERT = 110
    DELETE = 111


# Characters produced by Linux key codes 0..111 on a US layout; "\0" = none.
_LINUX_KEY_CHARS = (
    "\0\0"
    "1234567890-="
    "\0\0"
    "qwertyuiop"
    "[]\0\0"
    "asdfghjkl;"
    "'`\0"
    "\\zxcvbnm,./"
    "\0"
    "\0"
    "\0 \0"
    + "\0" * 53
)

_MAX_CHAR_CODE = len(_LINUX_KEY_CHARS) - 1

_LINUX_KEYSYMS: Dict[int, Keysym] = {
    _LinuxKey.ESC: Keysym.ESCAPE,
    _LinuxKey.LEFTCTRL: Keysym.CONTROL_L,
    _LinuxKey.RIGHTCTRL: Keysym.CONTROL_R,
    _LinuxKey.LEFTSHIFT: Keysym.SHIFT_L,
    _LinuxKey.RIGHTSHIFT: Keysym.SHIFT_R,
    _LinuxKey.LEFTALT: Keysym.ALT_L,
    _LinuxKey.RIGHTALT: Keysym.ALT_R,
    _LinuxKey.CAPSLOCK: Keysym.CAPS_LOCK,
    _LinuxKey.TAB: Keysym.TAB,
    _LinuxKey.BACKSPACE: Keysym.BACKSPACE,
    _LinuxKey.UP: Keysym.KP_UP,
    _LinuxKey.DOWN: Keysym.KP_DOWN,
    _LinuxKey.LEFT: Keysym.KP_LEFT,
    _LinuxKey.RIGHT: Keysym.KP_RIGHT,
    _LinuxKey.ENTER: Keysym.RETURN,
    _LinuxKey.F1: Keysym.F1,
    _LinuxKey.F2: Keysym.F2,
    _LinuxKey.F3: Keysym.F3,
    _LinuxKey.F4: Keysym.F4,
    _LinuxKey.F5: Keysym.F5,
    _LinuxKey.F6: Keysym.F6,
    _LinuxKey.F7: Keysym.F7,
    _LinuxKey.F8: Keysym.F8,
    _LinuxKey.F9: Keysym.F9,
    _LinuxKey.F10: Keysym.F10,
    _LinuxKey.F11: Keysym.F11,
    _LinuxKey.F12: Keysym.F12,
    _LinuxKey.INSERT: Keysym.INSERT,
    _LinuxKey.DELETE: Keysym.DELETE,
    _LinuxKey.HOME: Keysym.HOME,
    _LinuxKey.PAGEUP: Keysym.PAGE_UP,
    _LinuxKey.PAGEDOWN: Keysym.PAGE_DOWN,
    _LinuxKey.END: Keysym.END,
}

# Escape, tab, backspace, return and delete are deliberately absent: their
# keycodes fall below 0x20 (or are plain characters) and pass through.
_SDL_KEYSYMS: Dict[int, Keysym] = {
    scancode_to_keycode(scancode): keysym
    for scancode, keysym in (
        (Scancode.LCTRL, Keysym.CONTROL_L),
        (Scancode.RCTRL, Keysym.CONTROL_R),
        (Scancode.LSHIFT, Keysym.SHIFT_L),
        (Scancode.RSHIFT, Keysym.SHIFT_R),
        (Scancode.LALT, Keysym.ALT_L),
        (Scancode.RALT, Keysym.ALT_R),
        (Scancode.CAPSLOCK, Keysym.CAPS_LOCK),
        (Scancode.UP, Keysym.KP_UP),
        (Scancode.DOWN, Keysym.KP_DOWN),
        (Scancode.LEFT, Keysym.KP_LEFT),
        (Scancode.RIGHT, Keysym.KP_RIGHT),
        (Scancode.F1, Keysym.F1),
        (Scancode.F2, Keysym.F2),
        (Scancode.F3, Keysym.F3),
        (Scancode.F4, Keysym.F4),
        (Scancode.F5, Keysym.F5),
        (Scancode.F6, Keysym.F6),
        (Scancode.F7, Keysym.F7),
        (Scancode.F8, Keysym.F8),
        (Scancode.F9, Keysym.F9),
        (Scancode.F10, Keysym.F10),
        (Scancode.F11, Keysym.F11),
        (Scancode.F12, Keysym.F12),
        (Scancode.INSERT, Keysym.INSERT),
        (Scancode.HOME, Keysym.HOME),
        (Scancode.PAGEUP, Keysym.PAGE_UP),
        (Scancode.PAGEDOWN, Keysym.PAGE_DOWN),
        (Scancode.END, Keysym.END),
    )
}

KEY_RELEASE = 0
KEY_PRESS = 1
KEY_REPEAT = 2


@dataclass(frozen=True)
class KeyboardEvent:
    """A key code with its value: 0 release, 1 press, 2 auto-repeat."""

    code: int = 0
    value: int = 0
    event_index: int = 0

    SIZE = _FORMAT.size

    def pack(self) -> bytes:
        """Encode as the 12-byte little-endian wire record."""
        try:
            return _FORMAT.pack(self.code, self.value, self.event_index)
        except struct.error as exc:
            raise ValueError(f"keyboard event field out of range: {self}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "KeyboardEvent":
        """Decode a record produced by ``pack``."""
        if len(data) != _FORMAT.size:
            raise ValueError(f"expected {_FORMAT.size} bytes, got {len(data)}")
        return cls(*_FORMAT.unpack(data))


class KeyBackend(abc.ABC):
    """Injects synthetic key input into a display."""

    @abc.abstractmethod
    def keysym_to_keycode(self, keysym: int) -> int:
        """Return the display's keycode for ``keysym``."""

    @abc.abstractmethod
    def fake_key_event(self, keycode: int, pressed: bool) -> None:
        """Press or release the key with ``keycode``."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Push pending input to the display."""


def char_for_linux_code(code: int) -> Optional[str]:
    """Return the character a Linux key code types, or None if it types none."""
    if not 0 <= code <= _MAX_CHAR_CODE:
        return None
    char = _LINUX_KEY_CHARS[code]
    return None if char == "\0" else char


def keysym_for_sdl_keycode(code: int) -> int:
    """Map an SDL keycode to the keysym that is injected for it.

    Codes below 0x20 are moved into the 0xff00 function-key range; keys
    without a special mapping pass through unchanged.
    """
    if code < 0x20:
        code |= 0xFF00
    return _SDL_KEYSYMS.get(code, code)


def handle_key(backend: KeyBackend, keysym: int, value: int) -> None:
    """Release (value 0) or press (value 1) the key for ``keysym``.

    Auto-repeat and any other value are ignored.
    """
    if value not in (KEY_RELEASE, KEY_PRESS):
        return
    backend.fake_key_event(backend.keysym_to_keycode(keysym), value == KEY_PRESS)
    backend.flush()


def handle_keyboard_event(backend: KeyBackend, event: KeyboardEvent) -> None:
    """Deliver one event whose code is an SDL keycode, then flush."""
    handle_key(backend, keysym_for_sdl_keycode(event.code), event.value)
    backend.flush()


def _type_char(backend: KeyBackend, char: str) -> None:
    keycode = backend.keysym_to_keycode(ord(char))
    for pressed in (False, True, False):
        backend.fake_key_event(keycode, pressed)
        backend.flush()


def _deliver_linux_event(backend: KeyBackend, event: KeyboardEvent) -> None:
    keysym = _LINUX_KEYSYMS.get(event.code)
    if keysym is not None:
        handle_key(backend, keysym, event.value)
        return
    if event.value not in (KEY_PRESS, KEY_REPEAT):
        return
    char = char_for_linux_code(event.code)
    if char is not None:
        _type_char(backend, char)


def handle_keyboard_events(
    backend: Optional[KeyBackend], queue: ConcurrentQueue
) -> int:
    """Deliver the Linux-coded events queued at the time of the call.

    Special keys are pressed or released as sent; character keys are typed
    (release, press, release) on press and auto-repeat. Returns how many
    events were taken from the queue; nothing is taken without a backend.
    """
    if backend is None:
        return 0
    handled = 0
    for _ in range(len(queue)):
        event = queue.pop()
        if event is None:
            break
        _deliver_linux_event(backend, event)
        handled += 1
    backend.flush()
    return handled
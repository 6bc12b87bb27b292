import pytest

from ranacore.concurrent_queue import ConcurrentQueue
from ranacore.keyboard import (
    KeyBackend,
    KeyboardEvent,
    Keysym,
    char_for_linux_code,
    handle_key,
    handle_keyboard_event,
    handle_keyboard_events,
    keysym_for_sdl_keycode,
)
from ranacore.scancodes import Scancode, scancode_to_keycode


class RecordingBackend(KeyBackend):
    def __init__(self):
        self.events = []
        self.flushes = 0

    def keysym_to_keycode(self, keysym):
        return int(keysym)

    def fake_key_event(self, keycode, pressed):
        self.events.append((keycode, pressed))

    def flush(self):
        self.flushes += 1


def test_pack_wire_bytes():
    event = KeyboardEvent(code=1, value=1, event_index=0)
    assert event.pack() == b"\x01\x00\x00\x00\x01\x00\x00\x00\x00\x00\x00\x00"


def test_pack_unpack_round_trip():
    event = KeyboardEvent(code=30, value=-1, event_index=4000000000)
    data = event.pack()
    assert len(data) == KeyboardEvent.SIZE
    assert KeyboardEvent.unpack(data) == event


def test_unpack_wrong_length():
    with pytest.raises(ValueError):
        KeyboardEvent.unpack(b"\x00" * 5)


def test_pack_out_of_range():
    with pytest.raises(ValueError):
        KeyboardEvent(code=-1).pack()


def test_char_for_linux_code():
    assert char_for_linux_code(2) == "1"
    assert char_for_linux_code(16) == "q"
    assert char_for_linux_code(57) == " "
    assert char_for_linux_code(1) is None
    assert char_for_linux_code(112) is None
    assert char_for_linux_code(-3) is None


def test_keysym_for_sdl_keycode_special():
    assert keysym_for_sdl_keycode(scancode_to_keycode(Scancode.LCTRL)) == Keysym.CONTROL_L
    assert keysym_for_sdl_keycode(scancode_to_keycode(Scancode.F12)) == Keysym.F12


def test_keysym_for_sdl_keycode_low_codes_and_passthrough():
    assert keysym_for_sdl_keycode(0x0D) == Keysym.RETURN
    assert keysym_for_sdl_keycode(ord("a")) == ord("a")


def test_handle_key_values():
    backend = RecordingBackend()
    handle_key(backend, Keysym.TAB, 1)
    handle_key(backend, Keysym.TAB, 0)
    handle_key(backend, Keysym.TAB, 2)
    handle_key(backend, Keysym.TAB, 7)
    assert backend.events == [(Keysym.TAB, True), (Keysym.TAB, False)]


def test_handle_keyboard_event_maps_sdl_code():
    backend = RecordingBackend()
    event = KeyboardEvent(code=scancode_to_keycode(Scancode.LSHIFT), value=1)
    handle_keyboard_event(backend, event)
    assert backend.events == [(Keysym.SHIFT_L, True)]
    assert backend.flushes >= 1


def test_handle_keyboard_events_special_and_char():
    backend = RecordingBackend()
    queue = ConcurrentQueue()
    queue.push(KeyboardEvent(code=1, value=1))
    queue.push(KeyboardEvent(code=30, value=1))
    queue.push(KeyboardEvent(code=30, value=0))
    assert handle_keyboard_events(backend, queue) == 3
    assert queue.empty()
    a = ord("a")
    assert backend.events == [
        (Keysym.ESCAPE, True),
        (a, False),
        (a, True),
        (a, False),
    ]


def test_handle_keyboard_events_repeat_types_char():
    backend = RecordingBackend()
    queue = ConcurrentQueue()
    queue.push(KeyboardEvent(code=57, value=2))
    handle_keyboard_events(backend, queue)
    assert backend.events == [(32, False), (32, True), (32, False)]


def test_handle_keyboard_events_without_backend_leaves_queue():
    queue = ConcurrentQueue()
    queue.push(KeyboardEvent(code=30, value=1))
    assert handle_keyboard_events(None, queue) == 0
    assert len(queue) == 1
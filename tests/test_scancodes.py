import pytest

from ranacore.scancodes import (
    NUM_SCANCODES,
    SDLK_SCANCODE_MASK,
    Scancode,
    scancode_to_keycode,
)


@pytest.mark.parametrize(
    "member, value",
    [
        (Scancode.UNKNOWN, 0),
        (Scancode.A, 4),
        (Scancode.DIGIT_1, 30),
        (Scancode.RETURN, 40),
        (Scancode.CAPSLOCK, 57),
        (Scancode.F12, 69),
        (Scancode.LCTRL, 224),
        (Scancode.RALT, 230),
        (Scancode.MODE, 257),
        (Scancode.AUDIOFASTFORWARD, 286),
    ],
)
def test_documented_values(member, value):
    assert int(member) == value


def test_keycodes_are_unique_and_bounded():
    keycodes = [scancode_to_keycode(member) for member in Scancode]
    assert len(keycodes) == len(set(keycodes))
    assert all(0 <= code & ~SDLK_SCANCODE_MASK < NUM_SCANCODES for code in keycodes)


@pytest.mark.parametrize("value", [130, 131, 132])
def test_locking_keys_are_absent(value):
    with pytest.raises(ValueError):
        Scancode(value)


def test_mask_is_bit_thirty():
    assert scancode_to_keycode(0) == 1 << 30


@pytest.mark.parametrize("member", list(Scancode))
def test_keycode_sets_mask_and_keeps_scancode(member):
    keycode = scancode_to_keycode(member)
    assert keycode & SDLK_SCANCODE_MASK
    assert keycode & ~SDLK_SCANCODE_MASK == int(member)


def test_keycode_accepts_plain_int():
    assert scancode_to_keycode(4) == scancode_to_keycode(Scancode.A)


def test_keycode_is_idempotent():
    keycode = scancode_to_keycode(Scancode.UP)
    assert scancode_to_keycode(keycode) == keycode


def test_negative_scancode_rejected():
    with pytest.raises(ValueError):
        scancode_to_keycode(-1)
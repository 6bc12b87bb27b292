"""Lenient conversion between UTF-16 code units and UTF-8 bytes.

Invalid sequences (unpaired surrogates, overlong or truncated UTF-8,
out-of-range code points) are replaced by U+FFFD rather than raising.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence

BMP_END = 0xFFFF
UNICODE_MAX = 0x10FFFF
INVALID_CODEPOINT = 0xFFFD

_GENERIC_SURROGATE_VALUE = 0xD800
_GENERIC_SURROGATE_MASK = 0xF800
_HIGH_SURROGATE_VALUE = 0xD800
_LOW_SURROGATE_VALUE = 0xDC00
_SURROGATE_MASK = 0xFC00
_SURROGATE_OFFSET = 0x10000
_SURROGATE_CODEPOINT_MASK = 0x03FF
_SURROGATE_CODEPOINT_BITS = 10

_CONTINUATION_VALUE = 0x80
_CONTINUATION_MASK = 0xC0
_CONTINUATION_BITS = 6

# (mask, value) of the leading byte for encodings of 1..4 bytes
_LEADING_BYTES = ((0x80, 0x00), (0xE0, 0xC0), (0xF0, 0xE0), (0xF8, 0xF0))


def _utf8_len(codepoint: int) -> int:
    if codepoint <= 0x7F:
        return 1
    if codepoint <= 0x7FF:
        return 2
    if codepoint <= 0xFFFF:
        return 3
    return 4


def _is_surrogate(unit: int) -> bool:
    return unit & _GENERIC_SURROGATE_MASK == _GENERIC_SURROGATE_VALUE


def _check_units(utf16: Iterable[int]) -> List[int]:
    units = list(utf16)
    for unit in units:
        if not 0 <= unit <= 0xFFFF:
            raise ValueError(f"UTF-16 code unit out of range: {unit!r}")
    return units


def _decode_utf16(units: Sequence[int]) -> Iterator[int]:
    count = len(units)
    i = 0
    while i < count:
        high = units[i]
        i += 1
        if not _is_surrogate(high):
            yield high
        elif high & _SURROGATE_MASK != _HIGH_SURROGATE_VALUE or i >= count:
            yield INVALID_CODEPOINT
        elif units[i] & _SURROGATE_MASK != _LOW_SURROGATE_VALUE:
            yield INVALID_CODEPOINT
        else:
            low = units[i]
            i += 1
            yield (
                ((high & _SURROGATE_CODEPOINT_MASK) << _SURROGATE_CODEPOINT_BITS)
                | (low & _SURROGATE_CODEPOINT_MASK)
            ) + _SURROGATE_OFFSET


def _decode_utf8(data: bytes) -> Iterator[int]:
    count = len(data)
    i = 0
    while i < count:
        lead = data[i]
        for length, (mask, value) in enumerate(_LEADING_BYTES, start=1):
            if lead & mask == value:
                break
        else:
            i += 1
            yield INVALID_CODEPOINT
            continue

        codepoint = lead & ~mask & 0xFF
        complete = True
        for _ in range(length - 1):
            if i + 1 >= count:
                complete = False
                break
            continuation = data[i + 1]
            if continuation & _CONTINUATION_MASK != _CONTINUATION_VALUE:
                complete = False
                break
            codepoint = (codepoint << _CONTINUATION_BITS) | (
                continuation & ~_CONTINUATION_MASK & 0xFF
            )
            i += 1
        i += 1

        if (
            not complete
            or _utf8_len(codepoint) != length
            or (codepoint < BMP_END and _is_surrogate(codepoint))
            or codepoint > UNICODE_MAX
        ):
            yield INVALID_CODEPOINT
        else:
            yield codepoint


def _encode_utf16(codepoint: int) -> List[int]:
    if codepoint <= BMP_END:
        return [codepoint]
    offset = codepoint - _SURROGATE_OFFSET
    high = _HIGH_SURROGATE_VALUE | ((offset >> _SURROGATE_CODEPOINT_BITS) & _SURROGATE_CODEPOINT_MASK)
    low = _LOW_SURROGATE_VALUE | (offset & _SURROGATE_CODEPOINT_MASK)
    return [high, low]


def utf16_to_utf8(utf16: Iterable[int], max_len: Optional[int] = None) -> bytes:
    """Convert UTF-16 code units to UTF-8 bytes.

    With ``max_len`` set, a code point whose encoding would not fit in the
    remaining space is dropped; later, shorter code points may still fit.
    """
    out = bytearray()
    for codepoint in _decode_utf16(_check_units(utf16)):
        encoded = chr(codepoint).encode("utf-8")
        if max_len is None or len(out) + len(encoded) <= max_len:
            out += encoded
    return bytes(out)


def utf8_to_utf16(utf8: Iterable[int], max_len: Optional[int] = None) -> List[int]:
    """Convert UTF-8 bytes to a list of UTF-16 code units.

    With ``max_len`` set, a code point whose units would not fit in the
    remaining space is dropped; later, shorter code points may still fit.
    """
    out: List[int] = []
    for codepoint in _decode_utf8(bytes(utf8)):
        units = _encode_utf16(codepoint)
        if max_len is None or len(out) + len(units) <= max_len:
            out.extend(units)
    return out


def utf8_size_of_utf16(utf16: Iterable[int]) -> int:
    """Number of UTF-8 bytes needed to encode the given UTF-16 units."""
    return sum(_utf8_len(cp) for cp in _decode_utf16(_check_units(utf16)))


def utf16_size_of_utf8(utf8: Iterable[int]) -> int:
    """Number of UTF-16 code units needed to encode the given UTF-8 bytes."""
    return sum(len(_encode_utf16(cp)) for cp in _decode_utf8(bytes(utf8)))
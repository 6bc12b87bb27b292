"""Screen dimensions exchanged as a packed record of three 32-bit integers."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_FORMAT = struct.Struct("<3i")


@dataclass(frozen=True)
class ScreenDim:
    """Buffer width, screen width and height of a display."""

    bw: int
    sw: int
    h: int

    SIZE = _FORMAT.size

    def pack(self) -> bytes:
        """Encode as 12 bytes of little-endian signed 32-bit integers."""
        try:
            return _FORMAT.pack(self.bw, self.sw, self.h)
        except struct.error as exc:
            raise ValueError(f"screen dimension out of range: {self}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "ScreenDim":
        """Decode a 12-byte record produced by ``pack``."""
        if len(data) != _FORMAT.size:
            raise ValueError(
                f"expected {_FORMAT.size} bytes, got {len(data)}"
            )
        return cls(*_FORMAT.unpack(data))
"""Allocator of integer indices from a fixed inclusive range."""

from __future__ import annotations

import threading


class IndexQueueExhausted(Exception):
    """Raised when every index in the range is already captured."""


class IndexQueue:
    """Hands out free indices from ``minimum`` to ``maximum`` inclusive.

    Allocation scans round-robin from the position of the last capture, so
    released indices are reused only after the scan wraps around to them.
    """

    def __init__(self, minimum: int, maximum: int) -> None:
        capacity = maximum - minimum + 1
        if minimum < 0 or capacity <= 0:
            raise ValueError(
                f"invalid index range: minimum={minimum}, maximum={maximum}"
            )
        self.minimum = minimum
        self.capacity = capacity
        self._index = 0
        self._occupied = [False] * capacity
        self._lock = threading.RLock()

    def _in_range(self, index: int) -> bool:
        return self.minimum <= index < self.minimum + self.capacity

    def release_all(self) -> None:
        """Mark every index as free."""
        with self._lock:
            self._occupied = [False] * self.capacity

    def capture(self) -> int:
        """Capture and return the next free index.

        Raises IndexQueueExhausted when no index is free.
        """
        with self._lock:
            for step in range(2 * self.capacity + 1):
                position = (self._index + step) % self.capacity
                if not self._occupied[position]:
                    self._occupied[position] = True
                    self._index = position
                    return self.minimum + position
            self._index = (self._index + 2 * self.capacity + 1) % self.capacity
            raise IndexQueueExhausted(
                f"no free index between {self.minimum} and "
                f"{self.minimum + self.capacity - 1}"
            )

    def capture_index(self, index: int) -> bool:
        """Capture a specific index; return False if it was already taken."""
        with self._lock:
            if not self._in_range(index):
                raise ValueError(f"index {index} is outside the queue's range")
            if self._occupied[index - self.minimum]:
                return False
            self._occupied[index - self.minimum] = True
            return True

    def is_captured(self, index: int) -> bool:
        """Return True if ``index`` is in range and currently captured."""
        with self._lock:
            return self._in_range(index) and self._occupied[index - self.minimum]

    def release(self, index: int) -> None:
        """Free ``index``; indices outside the range are ignored."""
        with self._lock:
            if self._in_range(index):
                self._occupied[index - self.minimum] = False
"""A thread-safe FIFO queue with non-blocking access to both ends."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class ConcurrentQueue(Generic[T]):
    """FIFO queue whose operations are guarded by a lock and never block.

    Reading from an empty queue returns the supplied default instead of
    waiting for an item to arrive.
    """

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._lock = threading.Lock()

    def push(self, item: T) -> None:
        """Append an item at the back of the queue."""
        with self._lock:
            self._items.append(item)

    def pop(self, default: Optional[T] = None) -> Optional[T]:
        """Remove and return the front item, or ``default`` if empty."""
        with self._lock:
            if not self._items:
                return default
            return self._items.popleft()

    def front(self, default: Optional[T] = None) -> Optional[T]:
        """Return the front item without removing it, or ``default``."""
        with self._lock:
            if not self._items:
                return default
            return self._items[0]

    def back(self, default: Optional[T] = None) -> Optional[T]:
        """Return the back item without removing it, or ``default``."""
        with self._lock:
            if not self._items:
                return default
            return self._items[-1]

    def empty(self) -> bool:
        """Return True when the queue holds no items."""
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
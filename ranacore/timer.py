"""Millisecond stopwatch and background scheduling helpers."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional


class Timer:
    """Measures elapsed wall time in whole milliseconds."""

    def __init__(self) -> None:
        self._start: Optional[float] = None

    def start(self) -> None:
        """Begin (or restart) timing."""
        self._start = time.perf_counter()

    def stop(self) -> int:
        """Return the milliseconds since ``start``, rounded to nearest."""
        if self._start is None:
            raise RuntimeError("timer was stopped before it was started")
        elapsed_ms = (time.perf_counter() - self._start) * 1000.0
        return int(elapsed_ms + 0.5)

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


def set_interval(
    func: Callable[..., Any], interval: float, *args: Any
) -> threading.Event:
    """Call ``func(*args)`` every ``interval`` milliseconds on a daemon thread.

    The first call happens immediately. Setting the returned event stops the
    loop after the current call.
    """
    stop = threading.Event()

    def _run() -> None:
        while not stop.is_set():
            func(*args)
            if stop.wait(interval / 1000.0):
                break

    threading.Thread(target=_run, daemon=True).start()
    return stop


def set_delay(
    func: Callable[..., Any], interval: float, *args: Any
) -> threading.Timer:
    """Call ``func(*args)`` once after ``interval`` milliseconds.

    The call runs on a daemon thread; the returned timer can be cancelled.
    """
    timer = threading.Timer(interval / 1000.0, func, args)
    timer.daemon = True
    timer.start()
    return timer
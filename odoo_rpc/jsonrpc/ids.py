"""Call identifier generation."""

from __future__ import annotations

import itertools
import threading


class CallIdGenerator:
    """Monotonic, thread-safe source of JSON-RPC request ids."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)

"""Bounded byte store shared by the I/O path and the display path."""

from __future__ import annotations

import threading


class RingBuffer:
    """Thread-safe bounded FIFO of bytes.

    When a write would exceed the capacity the oldest bytes are dropped, so
    the buffer always holds the newest data. Every method takes the same
    lock, held only while bytes are copied in or out.
    """

    DEFAULT_CAPACITY = 65536

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self._capacity = capacity if capacity > 0 else self.DEFAULT_CAPACITY
        self._data = bytearray()
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        """Append ``data``, discarding the oldest bytes beyond capacity."""
        if not data:
            return

        with self._lock:
            if len(data) >= self._capacity:
                self._data = bytearray(data[-self._capacity:])
                return

            self._data += data
            excess = len(self._data) - self._capacity
            if excess > 0:
                del self._data[:excess]

    def read_all(self) -> bytes:
        """Return the contents in arrival order and empty the buffer."""
        with self._lock:
            result = bytes(self._data)
            self._data.clear()
        return result

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._data

    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def capacity(self) -> int:
        # Fixed at construction, no lock needed
        return self._capacity

    def __len__(self) -> int:
        return self.size()

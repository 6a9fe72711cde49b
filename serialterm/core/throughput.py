"""Receive throughput monitor.

Counts received bytes and reports the per-second rate on a fixed one-second
tick, together with the running total.
"""

from __future__ import annotations

from PySide6 import QtCore


class ThroughputMonitor(QtCore.QObject):
    """Rolling byte-rate and total-bytes counter.

    Signals:
        throughput_sample: (bytes in the last interval, total bytes).
    """

    UPDATE_INTERVAL_MS = 1000

    throughput_sample = QtCore.Signal(int, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._total_bytes = 0
        self._interval_bytes = 0
        self._current_rate = 0.0

        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(self.UPDATE_INTERVAL_MS)
        self._timer.timeout.connect(self.tick)

    @property
    def total_bytes(self) -> int:
        return self._total_bytes

    @property
    def interval_bytes(self) -> int:
        return self._interval_bytes

    @property
    def current_rate(self) -> float:
        """Bytes per second measured over the last completed interval."""
        return self._current_rate

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def record_bytes(self, count: int) -> None:
        """Add ``count`` received bytes. Non-positive counts are ignored."""
        if count > 0:
            self._total_bytes += count
            self._interval_bytes += count

    def reset(self) -> None:
        """Zero all counters (user clear)."""
        self._total_bytes = 0
        self._interval_bytes = 0
        self._current_rate = 0.0

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        """Halt ticking. The running total is kept."""
        self._timer.stop()
        self._current_rate = 0.0

    @QtCore.Slot()
    def tick(self) -> None:
        """Close the current interval and emit a sample, even a zero one."""
        interval = self._interval_bytes
        self._interval_bytes = 0
        self._current_rate = float(interval)
        self.throughput_sample.emit(interval, self._total_bytes)

    @staticmethod
    def format_rate(bytes_per_second: float) -> str:
        """Format a rate: ``512 bytes/s`` or ``1.5 KB/s``."""
        if bytes_per_second >= 1024.0:
            return f"{bytes_per_second / 1024.0:.1f} KB/s"
        return f"{int(bytes_per_second)} bytes/s"

    @staticmethod
    def format_total(count: int) -> str:
        """Format a byte count: ``512 B``, ``1.5 KB`` or ``2.1 MB``."""
        if count >= 1048576:
            return f"{count / 1048576.0:.1f} MB"
        if count >= 1024:
            return f"{count / 1024.0:.1f} KB"
        return f"{count} B"

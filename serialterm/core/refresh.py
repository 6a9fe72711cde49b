"""Fixed-cadence display refresh.

Formatted text can arrive far faster than a text widget can repaint. The
scheduler collects it and hands it to the display in one operation per
tick, about 30 times a second.
"""

from __future__ import annotations

import threading
from typing import Callable, List

from PySide6 import QtCore

DisplayCallback = Callable[[str, bool], None]


class RefreshScheduler(QtCore.QObject):
    """Batches pending text into periodic display updates.

    ``display(text, scroll)`` is called at most once per tick with all text
    received since the previous tick. ``scroll`` tells the display whether
    to bring the new text into view.

    Signals:
        flushed: Number of characters handed to the display.
    """

    REFRESH_INTERVAL_MS = 33  # ~30 FPS
    SCROLL_TOLERANCE = 10

    flushed = QtCore.Signal(int)

    def __init__(self, display: DisplayCallback,
                 interval_ms: int = REFRESH_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._display = display
        self._pending: List[str] = []
        self._lock = threading.Lock()
        self._auto_scroll = True

        self._timer = QtCore.QTimer(self)
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)

    @property
    def auto_scroll(self) -> bool:
        return self._auto_scroll

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._pending)

    def pending_text(self) -> str:
        with self._lock:
            return ''.join(self._pending)

    @QtCore.Slot(str)
    def enqueue(self, text: str) -> None:
        if not text:
            return
        with self._lock:
            self._pending.append(text)

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    @QtCore.Slot()
    def tick(self) -> None:
        """Drain everything pending into one display call."""
        self.flush()

    def flush(self) -> None:
        with self._lock:
            if not self._pending:
                return
            text = ''.join(self._pending)
            self._pending.clear()
        self._display(text, self._auto_scroll)
        self.flushed.emit(len(text))

    def discard(self) -> None:
        """Drop pending text without displaying it (user clear)."""
        with self._lock:
            self._pending.clear()

    @QtCore.Slot()
    def on_transport_stopped(self) -> None:
        """Stop ticking and show whatever is still pending."""
        self._timer.stop()
        self.flush()

    @QtCore.Slot(int, int)
    def on_scroll_changed(self, value: int, maximum: int) -> None:
        """Record whether the user left the view at the bottom."""
        self._auto_scroll = value >= maximum - self.SCROLL_TOLERANCE

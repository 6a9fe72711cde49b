"""Serial transport running on a dedicated worker thread.

This module provides a serial transport whose device I/O never runs on the
caller's thread. Commands travel to the worker through a queue; outcomes come
back as Qt signals, delivered on the thread that owns the transport.
"""

from __future__ import annotations

import logging
import queue
import threading
import traceback
from enum import Enum
from typing import Optional

from PySide6 import QtCore

from .config import SerialLinkConfig
from .errors import (
    ErrorKind,
    LogicError,
    OpenError,
    SerialRuntimeError,
    as_event,
    classify_read_error,
)
from .handler import SerialPortHandler

logger = logging.getLogger(__name__)


class TransportState(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"
    FAULTED = "faulted"


_CMD_WRITE = "write"
_CMD_CLOSE = "close"


class _TransportWorker(QtCore.QThread):
    """Background thread that exclusively owns the device handle.

    Signals:
        opened: The device was opened.
        bytes_received: One read's worth of raw bytes.
        error: (message, kind) for open and write failures.
        faulted: (message, kind) for failures that end the session.
    """

    opened = QtCore.Signal()
    bytes_received = QtCore.Signal(object)
    error = QtCore.Signal(str, str)
    faulted = QtCore.Signal(str, str)

    def __init__(self, config: SerialLinkConfig, poll_interval: float, parent=None):
        super().__init__(parent)
        self._config = config
        self._handler = SerialPortHandler(config, poll_interval)
        self._commands: "queue.Queue[tuple]" = queue.Queue()
        self._abort = threading.Event()
        self.was_opened = False
        self.thread_ident: Optional[int] = None

    def submit_write(self, data: bytes) -> None:
        self._commands.put((_CMD_WRITE, data))

    def request_close(self) -> None:
        """Ask the loop to close and abandon whatever I/O is in flight."""
        self._abort.set()
        self._commands.put((_CMD_CLOSE, None))
        self._handler.cancel_pending_io()

    def run(self) -> None:
        """Open the device, then read until closed or faulted."""
        self.thread_ident = threading.get_ident()
        try:
            self._handler.open()
        except OpenError as e:
            logger.warning(f"Open failed ({e.kind.value}): {e.message}")
            self.error.emit(*as_event(e))
            return

        if self._abort.is_set():
            # Stopped while opening; the session never starts
            self._handler.close()
            return

        self.was_opened = True
        self.opened.emit()

        try:
            self._loop()
        except Exception:
            # Never let a fault escape the worker thread
            self.faulted.emit(
                f"Unexpected error:\n{traceback.format_exc()}",
                ErrorKind.RESOURCE_ERROR.value,
            )
        finally:
            self._handler.close()

    def _loop(self) -> None:
        while True:
            if not self._process_commands():
                return

            try:
                data = self._handler.read_available()
            except Exception as e:
                if self._abort.is_set():
                    return
                err = classify_read_error(e)
                logger.warning(f"Read failed on {self._config.port}: {err.message}")
                self.faulted.emit(*as_event(err))
                return

            if data:
                logger.debug(f"Read {len(data)} bytes from {self._config.port}")
                self.bytes_received.emit(data)

    def _process_commands(self) -> bool:
        """Run queued commands. Returns False once a close was requested."""
        while True:
            try:
                command, payload = self._commands.get_nowait()
            except queue.Empty:
                return not self._abort.is_set()

            if command == _CMD_CLOSE:
                return False

            try:
                self._handler.write(payload)
            except SerialRuntimeError as e:
                logger.warning(f"Write failed on {self._config.port}: {e.message}")
                self.error.emit(*as_event(e))


class SerialTransport(QtCore.QObject):
    """Asynchronous serial transport.

    Every public method returns immediately; results arrive as signals on
    the thread that created the transport.

    Signals:
        opened: The device is open and being read.
        stopped: The session ended (explicit stop or device fault).
        bytes_received: Raw bytes, one emission per readiness notification.
        error: (message, kind) where kind is an ``ErrorKind`` value.
    """

    READ_POLL_INTERVAL = 0.05
    STOP_TIMEOUT_MS = 3000

    opened = QtCore.Signal()
    stopped = QtCore.Signal()
    bytes_received = QtCore.Signal(object)
    error = QtCore.Signal(str, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._state = TransportState.CLOSED
        self._worker: Optional[_TransportWorker] = None
        self._stop_requested = False

    @property
    def state(self) -> TransportState:
        return self._state

    def is_running(self) -> bool:
        return self._state == TransportState.OPEN

    def worker_thread_id(self) -> Optional[int]:
        """Identity of the thread doing device I/O, None when idle."""
        return self._worker.thread_ident if self._worker else None

    def start(self, config: SerialLinkConfig) -> None:
        """Open the device described by ``config`` on the worker thread.

        Raises:
            ValidationError: ``config`` is invalid. No device is touched.
        """
        config.validate()

        if self._state != TransportState.CLOSED:
            self._emit_logic_error("Serial port is already running", ErrorKind.ALREADY_RUNNING)
            return

        self._state = TransportState.OPENING
        self._stop_requested = False

        worker = _TransportWorker(config, self.READ_POLL_INTERVAL)
        worker.opened.connect(self._on_worker_opened)
        worker.bytes_received.connect(self.bytes_received)
        worker.error.connect(self.error)
        worker.faulted.connect(self._on_worker_faulted)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker

        logger.info(f"Opening {config.describe()}")
        worker.start()

    def send(self, data: bytes) -> None:
        """Queue one write attempt. Rejected unless the port is open."""
        if self._state != TransportState.OPEN or self._worker is None:
            self._emit_logic_error("Serial port is not open", ErrorKind.NOT_OPEN)
            return
        if not data:
            return
        self._worker.submit_write(bytes(data))

    def stop(self) -> None:
        """Close the device. Accepted in every state; a no-op when closed."""
        if self._state == TransportState.CLOSED or self._worker is None:
            return
        self._stop_requested = True
        if self._state != TransportState.FAULTED:
            self._state = TransportState.CLOSING
        self._worker.request_close()

    def shutdown(self, wait_ms: int = STOP_TIMEOUT_MS) -> None:
        """Stop and wait for the worker thread to exit.

        Args:
            wait_ms: Maximum milliseconds to wait for the thread to finish.
        """
        worker = self._worker
        self.stop()
        if worker is not None:
            worker.wait(wait_ms)

    def _emit_logic_error(self, message: str, kind: ErrorKind) -> None:
        logger.warning(f"Rejected: {message}")
        self.error.emit(*as_event(LogicError(message, kind)))

    @QtCore.Slot()
    def _on_worker_opened(self) -> None:
        if self._state != TransportState.OPENING:
            return
        self._state = TransportState.OPEN
        self.opened.emit()

    @QtCore.Slot(str, str)
    def _on_worker_faulted(self, message: str, kind: str) -> None:
        # The worker is already closing the handle; stopped follows
        if self._state in (TransportState.OPEN, TransportState.OPENING):
            self._state = TransportState.FAULTED
        self.error.emit(message, kind)

    @QtCore.Slot()
    def _on_worker_finished(self) -> None:
        worker = self._worker
        if worker is None:
            return
        # finished fires just before run() unwinds; make sure it has
        worker.wait()
        emit_stopped = worker.was_opened or self._stop_requested
        self._worker = None
        self._state = TransportState.CLOSED
        worker.deleteLater()
        if emit_stopped:
            logger.info("Serial session stopped")
            self.stopped.emit()

"""Terminal session: the acquisition-and-display pipeline.

A session wires the transport to the ring buffer, the throughput monitor,
the formatter and the refresh scheduler, and exposes the commands and
events a front end needs. It holds no widgets; the display is whatever is
connected to ``display_update``.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6 import QtCore

from .core import (
    DisplayMode,
    FormatterConfig,
    FrameFormatter,
    RefreshScheduler,
    RingBuffer,
    TextCodec,
    ThroughputMonitor,
)
from .core.payload import SEND_SEPARATOR, echo_line
from .serial import SerialLinkConfig, SerialTransport, TransportState, ValidationError
from .serial.errors import as_event

logger = logging.getLogger(__name__)

SYSTEM_PREFIX = "SysInfo >> "


class TerminalSession(QtCore.QObject):
    """Pipeline from serial bytes to batched display text.

    Signals:
        opened / stopped: Transport session started or ended.
        bytes_received: Raw bytes exactly as read.
        error: (message, kind) for every failure, including rejected commands.
        formatted_text_ready: Text produced for one received chunk.
        throughput_sample: (bytes in the last second, total bytes).
        display_update: (text, scroll) ready to append to the view.
        config_changed: The new FormatterConfig after a display command.
        cleared: The receive view should be emptied.
    """

    opened = QtCore.Signal()
    stopped = QtCore.Signal()
    bytes_received = QtCore.Signal(object)
    error = QtCore.Signal(str, str)
    formatted_text_ready = QtCore.Signal(str)
    throughput_sample = QtCore.Signal(int, int)
    display_update = QtCore.Signal(str, bool)
    config_changed = QtCore.Signal(object)
    cleared = QtCore.Signal()

    def __init__(self, formatter_config: Optional[FormatterConfig] = None,
                 buffer_capacity: int = RingBuffer.DEFAULT_CAPACITY,
                 refresh_interval_ms: int = RefreshScheduler.REFRESH_INTERVAL_MS,
                 parent=None):
        super().__init__(parent)
        self.transport = SerialTransport(self)
        self.buffer = RingBuffer(buffer_capacity)
        self.formatter = FrameFormatter(formatter_config, self)
        self.throughput = ThroughputMonitor(self)
        self.scheduler = RefreshScheduler(self._display, refresh_interval_ms, self)
        self._link: Optional[SerialLinkConfig] = None
        self._connect_signals()

    def _connect_signals(self) -> None:
        self.transport.opened.connect(self._on_opened)
        self.transport.stopped.connect(self._on_stopped)
        self.transport.bytes_received.connect(self._on_bytes_received)
        self.transport.error.connect(self.error)

        self.formatter.formatted_text_ready.connect(self.scheduler.enqueue)
        self.formatter.formatted_text_ready.connect(self.formatted_text_ready)
        self.throughput.throughput_sample.connect(self.throughput_sample)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> TransportState:
        return self.transport.state

    def is_open(self) -> bool:
        return self.transport.is_running()

    @property
    def link(self) -> Optional[SerialLinkConfig]:
        """Configuration of the current or most recent session."""
        return self._link

    @property
    def formatter_config(self) -> FormatterConfig:
        return self.formatter.config

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def open(self, config: SerialLinkConfig) -> None:
        """Start a session.

        Raises:
            ValidationError: ``config`` is invalid. It is also emitted on
                ``error`` so a front end only listening to signals sees it.
        """
        try:
            self.transport.start(config)
        except ValidationError as e:
            logger.warning(f"Invalid configuration: {e.message}")
            self.error.emit(*as_event(e))
            raise
        if self.transport.state == TransportState.OPENING:
            self._link = config

    def close(self) -> None:
        self.transport.stop()

    def send(self, data: bytes) -> None:
        self.transport.send(data)

    def set_format_mode(self, mode: DisplayMode) -> None:
        self.formatter.set_mode(mode)
        self.config_changed.emit(self.formatter.config)

    def set_timestamp_enabled(self, enabled: bool) -> None:
        self.formatter.set_timestamp_enabled(enabled)
        self.config_changed.emit(self.formatter.config)

    def set_encoding(self, codec: TextCodec) -> None:
        self.formatter.set_codec(codec)
        self.config_changed.emit(self.formatter.config)

    def set_hex_newline_splitting(self, enabled: bool) -> None:
        self.formatter.set_hex_newline_splitting(enabled)
        self.config_changed.emit(self.formatter.config)

    def clear(self) -> None:
        """Forget received data: buffer, pending display text and counters."""
        self.buffer.clear()
        self.scheduler.discard()
        self.throughput.reset()
        self.cleared.emit()

    def take_buffered(self) -> bytes:
        """Drain the retained raw bytes, oldest first."""
        return self.buffer.read_all()

    def on_scroll_changed(self, value: int, maximum: int) -> None:
        self.scheduler.on_scroll_changed(value, maximum)

    def show_system_message(self, message: str) -> None:
        """Put a status line in the view, after any pending received text."""
        self.scheduler.flush()
        self.display_update.emit(f"{SYSTEM_PREFIX}{message}\r\n", self.scheduler.auto_scroll)

    def show_sent(self, text: str) -> None:
        """Echo user-sent text in the view, after any pending received text."""
        self.scheduler.flush()
        self.display_update.emit(SEND_SEPARATOR + echo_line(text), self.scheduler.auto_scroll)

    def shutdown(self) -> None:
        """Stop everything and wait for the I/O thread to exit."""
        self.transport.shutdown()
        self.scheduler.stop()
        self.throughput.stop()

    # -------------------------------------------------------------------------
    # Transport events
    # -------------------------------------------------------------------------

    @QtCore.Slot()
    def _on_opened(self) -> None:
        self.buffer.clear()
        self.throughput.reset()
        self.throughput.start()
        self.scheduler.start()
        self.show_system_message("Serial port connected")
        self.opened.emit()

    @QtCore.Slot()
    def _on_stopped(self) -> None:
        self.throughput.stop()
        self.scheduler.on_transport_stopped()
        self.show_system_message("Serial port closed")
        self.stopped.emit()

    @QtCore.Slot(object)
    def _on_bytes_received(self, raw: bytes) -> None:
        self.buffer.write(raw)
        self.throughput.record_bytes(len(raw))
        self.formatter.process(raw)
        self.bytes_received.emit(raw)

    def _display(self, text: str, scroll: bool) -> None:
        self.display_update.emit(text, scroll)

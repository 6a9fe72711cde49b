"""Low-level serial port handler.

The handler is owned by the transport's worker thread; nothing else calls
its I/O methods. ``cancel_pending_io`` is the one exception and only asks
pyserial to abandon a blocked read or write.
"""

from __future__ import annotations

import logging
from typing import Optional

import serial

from .config import SerialLinkConfig
from .errors import ErrorKind, SerialRuntimeError, classify_open_error, classify_write_error

logger = logging.getLogger(__name__)


class SerialPortHandler:
    """Handles low-level serial port operations."""

    def __init__(self, config: SerialLinkConfig, poll_interval: float = 0.05):
        self.config = config
        self.poll_interval = poll_interval
        self._ser: Optional[serial.SerialBase] = None

    @property
    def port(self) -> str:
        return self.config.port

    @property
    def is_open(self) -> bool:
        """Check if port is open."""
        return self._ser is not None and self._ser.is_open

    def open(self) -> None:
        """Open the device described by the configuration.

        Raises:
            OpenError: classified as device-not-found, permission-denied
                or open-failure. Partially acquired resources are released.
        """
        ser = None
        try:
            ser = serial.serial_for_url(self.port, do_not_open=True)
            for name, value in self.config.to_serial_kwargs().items():
                setattr(ser, name, value)
            ser.timeout = self.poll_interval
            ser.open()
            self._apply_buffer_hint(ser)
        except Exception as e:
            if ser is not None:
                try:
                    ser.close()
                except Exception:
                    pass
            raise classify_open_error(e, self.port) from e

        self._ser = ser
        logger.info(f"Opened {self.config.describe()}")

    def _apply_buffer_hint(self, ser: serial.SerialBase) -> None:
        """Pass the read chunk hint to drivers that expose a buffer size."""
        set_buffer_size = getattr(ser, 'set_buffer_size', None)
        if set_buffer_size is None:
            return
        try:
            set_buffer_size(rx_size=self.config.read_chunk_hint)
        except (ValueError, serial.SerialException) as e:
            logger.debug(f"Driver ignored rx buffer hint: {e}")

    def read_available(self) -> bytes:
        """Wait for readiness, then read every byte currently available.

        Blocks at most ``poll_interval`` for the first byte. Once one byte
        has arrived, whatever else the OS already holds is read in the same
        call; the read never waits for bytes that have not arrived yet.
        """
        if self._ser is None:
            return b""
        first = self._ser.read(1)
        if not first:
            return b""
        pending = self._ser.in_waiting
        if pending:
            return first + self._ser.read(pending)
        return first

    def write(self, data: bytes) -> None:
        """Make a single write attempt.

        Raises:
            SerialRuntimeError: write-error, timeout or incomplete-write.
        """
        if self._ser is None:
            raise SerialRuntimeError("Serial port is not open", ErrorKind.WRITE_ERROR)
        try:
            written = self._ser.write(data)
        except Exception as e:
            raise classify_write_error(e) from e

        # pyserial returns None from a few URL handlers; treat it as complete
        if written is not None and written != len(data):
            raise SerialRuntimeError(
                f"Incomplete write: {written} of {len(data)} bytes written",
                ErrorKind.INCOMPLETE_WRITE,
            )

    def cancel_pending_io(self) -> None:
        """Abandon any blocked read/write, where the driver supports it."""
        ser = self._ser
        if ser is None:
            return
        for name in ('cancel_read', 'cancel_write'):
            cancel = getattr(ser, name, None)
            if cancel is None:
                continue
            try:
                cancel()
            except Exception as e:
                logger.debug(f"{name} failed on {self.port}: {e}")

    def close(self) -> None:
        """Close the serial connection."""
        if self._ser:
            try:
                if self._ser.is_open:
                    self._ser.close()
            except Exception as e:
                logger.warning(f"Error closing {self.port}: {e}")
            self._ser = None
            logger.info(f"Closed {self.port}")

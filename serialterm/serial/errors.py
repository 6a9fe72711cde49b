"""Error taxonomy for the serial pipeline.

Only ``ValidationError`` is ever raised to a caller. Every other failure is
caught on the worker thread, classified here, and delivered to the caller as
an ``error(message, kind)`` signal.
"""

from __future__ import annotations

import errno
from enum import Enum
from typing import Optional, Tuple

import serial


class ErrorKind(str, Enum):
    """Discriminator carried by every error event."""
    VALIDATION = "validation"
    DEVICE_NOT_FOUND = "device-not-found"
    PERMISSION_DENIED = "permission-denied"
    OPEN_FAILURE = "open-failure"
    READ_ERROR = "read-error"
    WRITE_ERROR = "write-error"
    INCOMPLETE_WRITE = "incomplete-write"
    RESOURCE_ERROR = "resource-error"
    TIMEOUT = "timeout"
    ALREADY_RUNNING = "already-running"
    NOT_OPEN = "not-open"


class SerialTermError(Exception):
    """Base class for all pipeline errors."""
    default_kind = ErrorKind.OPEN_FAILURE

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind


class ValidationError(SerialTermError):
    """Malformed configuration; hardware is never touched."""
    default_kind = ErrorKind.VALIDATION


class OpenError(SerialTermError):
    """The device could not be opened."""
    default_kind = ErrorKind.OPEN_FAILURE


class SerialRuntimeError(SerialTermError):
    """Failure on an already open device (read, write, unplug)."""
    default_kind = ErrorKind.RESOURCE_ERROR


class LogicError(SerialTermError):
    """Command issued in a state that does not accept it."""
    default_kind = ErrorKind.NOT_OPEN


# errno values that mean the device is gone rather than merely misbehaving
_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENODEV, errno.ENXIO}
_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EBUSY}
_DISCONNECT_ERRNOS = {errno.EIO, errno.ENODEV, errno.ENXIO, errno.EBADF}

# Windows builds of pyserial only embed the WinError text in the message
_NOT_FOUND_MARKERS = ("filenotfounderror", "no such file", "cannot find the file",
                      "could not find", "does not exist")
_PERMISSION_MARKERS = ("permissionerror", "permission denied", "access is denied")


def classify_open_error(exc: BaseException, port: str) -> OpenError:
    """Turn an exception raised while opening ``port`` into an OpenError."""
    code = getattr(exc, "errno", None)
    text = str(exc).lower()

    if isinstance(exc, FileNotFoundError) or code in _NOT_FOUND_ERRNOS \
            or any(m in text for m in _NOT_FOUND_MARKERS):
        return OpenError(f"Device not found: {port}", ErrorKind.DEVICE_NOT_FOUND)
    if isinstance(exc, PermissionError) or code in _PERMISSION_ERRNOS \
            or any(m in text for m in _PERMISSION_MARKERS):
        return OpenError(f"Permission denied: {port}", ErrorKind.PERMISSION_DENIED)
    return OpenError(f"Failed to open port {port}: {exc}", ErrorKind.OPEN_FAILURE)


def classify_read_error(exc: BaseException) -> SerialRuntimeError:
    """Classify an exception raised while reading from an open device."""
    if isinstance(exc, serial.SerialTimeoutException):
        return SerialRuntimeError(f"Timeout error: {exc}", ErrorKind.TIMEOUT)
    code = getattr(exc, "errno", None)
    if isinstance(exc, serial.SerialException) or code in _DISCONNECT_ERRNOS:
        return SerialRuntimeError(
            f"Resource error (device may have been disconnected): {exc}",
            ErrorKind.RESOURCE_ERROR,
        )
    return SerialRuntimeError(f"Read error: {exc}", ErrorKind.READ_ERROR)


def classify_write_error(exc: BaseException) -> SerialRuntimeError:
    """Classify an exception raised by a single write attempt."""
    if isinstance(exc, serial.SerialTimeoutException):
        return SerialRuntimeError(f"Timeout error: {exc}", ErrorKind.TIMEOUT)
    return SerialRuntimeError(f"Failed to write data: {exc}", ErrorKind.WRITE_ERROR)


def as_event(error: SerialTermError) -> Tuple[str, str]:
    """Return the ``(message, kind)`` pair emitted on error signals."""
    return error.message, error.kind.value

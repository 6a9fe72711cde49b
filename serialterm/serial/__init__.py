"""Serial communication package for SerialTerm."""

from .config import SerialLinkConfig, Parity, FlowControl
from .errors import (
    ErrorKind,
    SerialTermError,
    ValidationError,
    OpenError,
    SerialRuntimeError,
    LogicError,
)
from .handler import SerialPortHandler
from .transport import SerialTransport, TransportState

__all__ = [
    "SerialLinkConfig",
    "Parity",
    "FlowControl",
    "ErrorKind",
    "SerialTermError",
    "ValidationError",
    "OpenError",
    "SerialRuntimeError",
    "LogicError",
    "SerialPortHandler",
    "SerialTransport",
    "TransportState",
]

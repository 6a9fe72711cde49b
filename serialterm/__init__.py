"""SerialTerm application package."""

from .version import __version__, __version_info__, APP_NAME
from .core import (
    RingBuffer,
    FrameFormatter,
    FormatterConfig,
    ThroughputMonitor,
    RefreshScheduler,
    TerminalPreferences,
)
from .serial import SerialTransport, SerialLinkConfig, ValidationError
from .session import TerminalSession

__all__ = [
    "__version__",
    "__version_info__",
    "APP_NAME",
    "RingBuffer",
    "FrameFormatter",
    "FormatterConfig",
    "ThroughputMonitor",
    "RefreshScheduler",
    "TerminalPreferences",
    "SerialTransport",
    "SerialLinkConfig",
    "ValidationError",
    "TerminalSession",
]

"""Core data path for SerialTerm: buffering, formatting, rate and refresh."""

from .ring_buffer import RingBuffer
from .formatter import (
    DisplayMode,
    TextCodec,
    FormatterConfig,
    FrameFormatter,
    format_frame,
)
from .throughput import ThroughputMonitor
from .refresh import RefreshScheduler
from .payload import SEND_SEPARATOR, build_payload, parse_hex, echo_line
from .preferences import TerminalPreferences

__all__ = [
    'RingBuffer',
    'DisplayMode',
    'TextCodec',
    'FormatterConfig',
    'FrameFormatter',
    'format_frame',
    'ThroughputMonitor',
    'RefreshScheduler',
    'build_payload',
    'parse_hex',
    'echo_line',
    'SEND_SEPARATOR',
    'TerminalPreferences',
]

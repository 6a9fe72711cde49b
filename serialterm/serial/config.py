"""Serial link configuration for SerialTerm."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

import serial

from .errors import ValidationError


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Parity(str, Enum):
    NONE = "none"
    ODD = "odd"
    EVEN = "even"


class FlowControl(str, Enum):
    NONE = "none"


_PARITY_MAP = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.ODD: serial.PARITY_ODD,
    Parity.EVEN: serial.PARITY_EVEN,
}

_DATA_BITS_MAP = {
    5: serial.FIVEBITS,
    6: serial.SIXBITS,
    7: serial.SEVENBITS,
    8: serial.EIGHTBITS,
}

_STOP_BITS_MAP = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}


@dataclass(frozen=True)
class SerialLinkConfig:
    """Parameters for one open attempt.

    Immutable once handed to the transport. ``port`` is anything
    ``serial.serial_for_url`` accepts: a device path, a COM name, or a
    pyserial URL such as ``loop://``.
    """
    DEFAULT_BAUD = 115200
    DEFAULT_READ_CHUNK = 4096
    SUPPORTED_BAUD_RATES = (
        1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200,
        230400, 460800, 921600,
    )
    SUPPORTED_DATA_BITS = (5, 6, 7, 8)
    SUPPORTED_STOP_BITS = (1, 1.5, 2)

    port: str = ""
    baud_rate: int = DEFAULT_BAUD
    data_bits: int = 8
    stop_bits: Union[int, float] = 1
    parity: Parity = Parity.NONE
    flow_control: FlowControl = FlowControl.NONE
    read_chunk_hint: int = DEFAULT_READ_CHUNK

    def validation_error(self) -> str:
        """Return a description of the first problem, or an empty string."""
        if not self.port:
            return "Port name cannot be empty"
        if not isinstance(self.port, str):
            return f"Invalid port name: {self.port!r}"

        if not _is_int(self.baud_rate):
            return f"Invalid baud rate: {self.baud_rate!r}"
        if self.baud_rate <= 0:
            return "Baud rate must be a positive number"

        if self.baud_rate not in self.SUPPORTED_BAUD_RATES:
            rates = ", ".join(str(r) for r in self.SUPPORTED_BAUD_RATES)
            return f"Invalid baud rate: {self.baud_rate}. Supported rates: {rates}"

        if not _is_int(self.data_bits) or self.data_bits not in self.SUPPORTED_DATA_BITS:
            return f"Invalid data bits: {self.data_bits}"

        if not _is_number(self.stop_bits) or self.stop_bits not in self.SUPPORTED_STOP_BITS:
            return f"Invalid stop bits: {self.stop_bits}"

        if self.parity not in tuple(Parity):
            return f"Invalid parity: {self.parity}"

        if self.flow_control not in tuple(FlowControl):
            return f"Unsupported flow control: {self.flow_control}"

        if not _is_int(self.read_chunk_hint) or self.read_chunk_hint <= 0:
            return "Read buffer size must be a positive number"

        return ""

    def is_valid(self) -> bool:
        return not self.validation_error()

    def validate(self) -> None:
        """Raise ValidationError if the configuration cannot be used."""
        message = self.validation_error()
        if message:
            raise ValidationError(message)

    def to_serial_kwargs(self) -> dict:
        """Map onto ``serial.Serial`` attribute names and constants."""
        return {
            'baudrate': self.baud_rate,
            'bytesize': _DATA_BITS_MAP[self.data_bits],
            'parity': _PARITY_MAP[Parity(self.parity)],
            'stopbits': _STOP_BITS_MAP[self.stop_bits],
            'xonxoff': False,
            'rtscts': False,
            'dsrdtr': False,
        }

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``/dev/ttyUSB0 115200 8N1``."""
        parity = Parity(self.parity).value[0].upper()
        return f"{self.port} {self.baud_rate} {self.data_bits}{parity}{self.stop_bits:g}"

"""Outbound payload construction for the send box."""

from __future__ import annotations

import re

from ..serial.errors import ValidationError

_HEX_PAIR = re.compile(r'[A-Fa-f0-9]{2}')
_HEX_DIGIT = re.compile(r'[A-Fa-f0-9]')

LINE_ENDING = b'\r\n'


def parse_hex(text: str) -> bytes:
    """Parse hex digits from ``text``, ignoring every other character.

    ``"48 65 6c"`` and ``"48656C"`` both give ``b'Hel'``. With an odd number
    of digits the first one stands alone: ``"ABC"`` gives ``b'\\x0a\\xbc'``.

    Raises:
        ValidationError: ``text`` holds no hex pair at all.
    """
    if not _HEX_PAIR.search(text):
        raise ValidationError("Input is not valid hexadecimal")
    digits = ''.join(_HEX_DIGIT.findall(text))
    if len(digits) % 2:
        digits = '0' + digits
    return bytes.fromhex(digits)


def build_payload(text: str, hex_mode: bool = False, append_newline: bool = True,
                  encoding: str = 'utf-8') -> bytes:
    """Bytes to transmit for the contents of the send box.

    Args:
        text: What the user typed.
        hex_mode: Interpret ``text`` as hex digits instead of characters.
        append_newline: Terminate the payload with CR LF.
        encoding: Text encoding used when ``hex_mode`` is off.
    """
    if not text:
        return b''
    data = parse_hex(text) if hex_mode else text.encode(encoding, errors='replace')
    if append_newline:
        data += LINE_ENDING
    return data


SEND_SEPARATOR = "\r\n-------------------------------------\r\n"


def echo_line(text: str) -> str:
    """Line shown in the receive view for data the user sent."""
    return f"send>>>  {text}  >>>end\r\n"

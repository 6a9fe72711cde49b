"""Byte-to-text formatting for the receive view.

``format_frame`` is a pure function of its inputs. ``FrameFormatter`` wraps
it in a QObject so results can be delivered as a signal, like every other
stage of the pipeline.
"""

from __future__ import annotations

import codecs
import locale
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional

from PySide6 import QtCore


class DisplayMode(str, Enum):
    TEXT = "text"
    HEX = "hex"


class TextCodec(str, Enum):
    LATIN1 = "latin1"
    UTF8 = "utf8"
    GBK = "gbk"


@dataclass(frozen=True)
class FormatterConfig:
    """Display settings applied to each chunk of received bytes."""
    mode: DisplayMode = DisplayMode.TEXT
    codec: TextCodec = TextCodec.LATIN1
    timestamp_enabled: bool = False
    hex_newline_splitting: bool = True


TIMESTAMP_MARKER = ">>"
CONTROL_BYTES = frozenset((0x0A, 0x0D))


def format_timestamp(now: Optional[datetime] = None) -> str:
    """Local time as ``HH:MM:SS.mmm``."""
    now = now or datetime.now()
    return now.strftime('%H:%M:%S.%f')[:-3]


def decode_text(raw: bytes, codec: TextCodec) -> str:
    """Decode ``raw`` with the selected codec.

    latin1 maps every byte to one character and never fails. utf8 replaces
    invalid sequences. gbk falls back to the platform default encoding and
    finally to latin1 when the codec is not available.
    """
    codec = TextCodec(codec)
    if codec == TextCodec.LATIN1:
        return raw.decode('latin-1')
    if codec == TextCodec.UTF8:
        return raw.decode('utf-8', errors='replace')

    for name in ('gbk', locale.getpreferredencoding(False)):
        try:
            codecs.lookup(name)
        except LookupError:
            continue
        return raw.decode(name, errors='replace')
    return raw.decode('latin-1')


def hex_tokens(raw: bytes) -> str:
    """Uppercase hex pairs separated by single spaces: ``48 65 6C``."""
    return ' '.join(f'{b:02X}' for b in raw)


def format_hex(raw: bytes, newline_splitting: bool) -> str:
    """Render ``raw`` as hex.

    With ``newline_splitting`` every maximal run of 0x0A/0x0D bytes becomes
    a bracketed token such as ``[0D 0A]`` placed on its own line. Runs are
    only detected inside ``raw``; a run split across two calls stays split.
    """
    if not newline_splitting:
        return hex_tokens(raw)

    out: List[str] = []
    i = 0
    n = len(raw)
    while i < n:
        start = i
        is_control = raw[i] in CONTROL_BYTES
        while i < n and (raw[i] in CONTROL_BYTES) == is_control:
            i += 1
        chunk = raw[start:i]

        if is_control:
            if out:
                out.append('\n')
            out.append(f'[{hex_tokens(chunk)}]')
            if i < n:
                out.append('\n')
        else:
            out.append(hex_tokens(chunk))
    return ''.join(out)


def format_frame(raw: bytes, config: FormatterConfig,
                 now: Optional[datetime] = None) -> str:
    """Turn raw bytes into display text according to ``config``."""
    if DisplayMode(config.mode) == DisplayMode.HEX:
        body = format_hex(raw, config.hex_newline_splitting)
    else:
        body = decode_text(raw, config.codec)

    if config.timestamp_enabled:
        return f"{format_timestamp(now)} {TIMESTAMP_MARKER} {body}"
    return body


class FrameFormatter(QtCore.QObject):
    """Formats received chunks and emits the resulting text.

    Signals:
        formatted_text_ready: Display text for one chunk of bytes.
    """

    formatted_text_ready = QtCore.Signal(str)

    def __init__(self, config: Optional[FormatterConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or FormatterConfig()

    @property
    def config(self) -> FormatterConfig:
        return self._config

    def set_config(self, config: FormatterConfig) -> None:
        self._config = config

    def set_mode(self, mode: DisplayMode) -> None:
        self._config = replace(self._config, mode=DisplayMode(mode))

    def set_codec(self, codec: TextCodec) -> None:
        self._config = replace(self._config, codec=TextCodec(codec))

    def set_timestamp_enabled(self, enabled: bool) -> None:
        self._config = replace(self._config, timestamp_enabled=bool(enabled))

    def set_hex_newline_splitting(self, enabled: bool) -> None:
        self._config = replace(self._config, hex_newline_splitting=bool(enabled))

    @QtCore.Slot(object)
    def process(self, raw: bytes) -> None:
        """Format ``raw`` and emit ``formatted_text_ready``. Empty input is ignored."""
        if not raw:
            return
        self.formatted_text_ready.emit(format_frame(bytes(raw), self._config))

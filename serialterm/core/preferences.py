"""User preferences for the terminal.

Preferences are plain values supplied by whoever hosts the terminal. They
are never written to disk; they only produce the immutable configurations
the pipeline consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..serial.config import Parity, SerialLinkConfig
from .formatter import DisplayMode, FormatterConfig, TextCodec


@dataclass
class TerminalPreferences:
    """Terminal preferences."""
    # Serial
    last_port: str = ""
    baud_rate: int = SerialLinkConfig.DEFAULT_BAUD
    data_bits: int = 8
    stop_bits: Union[int, float] = 1
    parity: Parity = Parity.NONE

    # Display
    display_mode: DisplayMode = DisplayMode.TEXT
    codec: TextCodec = TextCodec.LATIN1
    timestamp_enabled: bool = False
    hex_newline_splitting: bool = True
    keyword_highlighting: bool = True

    # Send
    hex_send: bool = False
    append_newline: bool = True
    clear_after_send: bool = False

    def link_config(self, port: Optional[str] = None) -> SerialLinkConfig:
        """Build a link configuration, defaulting to the last used port."""
        return SerialLinkConfig(
            port=self.last_port if port is None else port,
            baud_rate=self.baud_rate,
            data_bits=self.data_bits,
            stop_bits=self.stop_bits,
            parity=Parity(self.parity),
        )

    def formatter_config(self) -> FormatterConfig:
        return FormatterConfig(
            mode=DisplayMode(self.display_mode),
            codec=TextCodec(self.codec),
            timestamp_enabled=self.timestamp_enabled,
            hex_newline_splitting=self.hex_newline_splitting,
        )

    def remember_link(self, config: SerialLinkConfig) -> None:
        """Adopt the settings of a link that opened successfully."""
        self.last_port = config.port
        self.baud_rate = config.baud_rate
        self.data_bits = config.data_bits
        self.stop_bits = config.stop_bits
        self.parity = Parity(config.parity)

    def remember_display(self, config: FormatterConfig) -> None:
        self.display_mode = config.mode
        self.codec = config.codec
        self.timestamp_enabled = config.timestamp_enabled
        self.hex_newline_splitting = config.hex_newline_splitting

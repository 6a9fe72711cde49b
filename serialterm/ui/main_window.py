"""Main window for SerialTerm.

A thin front end over TerminalSession: it builds configurations from the
controls, forwards commands, and appends whatever the session hands it.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..core import DisplayMode, TerminalPreferences, TextCodec, ThroughputMonitor
from ..core.payload import build_payload
from ..serial import Parity, SerialLinkConfig, ValidationError
from ..session import TerminalSession
from ..version import __version__, APP_NAME
from .highlighter import KeywordHighlighter
from .widgets import PortDiscovery, StatCard

logger = logging.getLogger(__name__)


class MainWindow(QtWidgets.QMainWindow):
    """Main application window."""

    DATA_BITS = (8, 7, 6, 5)
    STOP_BITS = (1, 1.5, 2)
    PARITIES = (Parity.NONE, Parity.ODD, Parity.EVEN)
    CODECS = (TextCodec.LATIN1, TextCodec.UTF8, TextCodec.GBK)

    def __init__(self, preferences: Optional[TerminalPreferences] = None):
        super().__init__()
        self.prefs = preferences or TerminalPreferences()
        self.session = TerminalSession(self.prefs.formatter_config(), parent=self)
        self._setup_ui()
        self._apply_preferences()
        self._connect_signals()
        self._refresh_ports()

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def _setup_ui(self) -> None:
        self.setWindowTitle(f"{APP_NAME} v{__version__}")
        self.resize(1000, 700)

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        self._create_connection_bar(layout)
        self._create_display_bar(layout)

        splitter = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        self.receive_edit = QtWidgets.QPlainTextEdit()
        self.receive_edit.setReadOnly(True)
        self.receive_edit.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.FixedFont))
        self.highlighter = KeywordHighlighter(self.receive_edit.document())
        splitter.addWidget(self.receive_edit)
        splitter.addWidget(self._create_send_panel())
        splitter.setSizes([500, 150])
        layout.addWidget(splitter, stretch=1)

        self._create_status_bar(layout)

    def _create_connection_bar(self, parent: QtWidgets.QVBoxLayout) -> None:
        bar = QtWidgets.QHBoxLayout()

        bar.addWidget(QtWidgets.QLabel("Port:"))
        self.port_combo = QtWidgets.QComboBox()
        self.port_combo.setEditable(True)
        self.port_combo.setMinimumWidth(240)
        bar.addWidget(self.port_combo)

        self.refresh_btn = QtWidgets.QPushButton("↻ Refresh")
        bar.addWidget(self.refresh_btn)
        self.show_all_cb = QtWidgets.QCheckBox("Show all")
        bar.addWidget(self.show_all_cb)

        bar.addWidget(QtWidgets.QLabel("Baud:"))
        self.baud_combo = QtWidgets.QComboBox()
        self.baud_combo.addItems([str(b) for b in SerialLinkConfig.SUPPORTED_BAUD_RATES])
        bar.addWidget(self.baud_combo)

        self.data_bits_combo = QtWidgets.QComboBox()
        self.data_bits_combo.addItems([str(b) for b in self.DATA_BITS])
        bar.addWidget(self.data_bits_combo)

        self.parity_combo = QtWidgets.QComboBox()
        self.parity_combo.addItems([p.value.capitalize() for p in self.PARITIES])
        bar.addWidget(self.parity_combo)

        self.stop_bits_combo = QtWidgets.QComboBox()
        self.stop_bits_combo.addItems([f"{s:g}" for s in self.STOP_BITS])
        bar.addWidget(self.stop_bits_combo)

        bar.addStretch()
        self.open_btn = QtWidgets.QPushButton("Open")
        self.open_btn.setMinimumWidth(100)
        bar.addWidget(self.open_btn)

        parent.addLayout(bar)

    def _create_display_bar(self, parent: QtWidgets.QVBoxLayout) -> None:
        bar = QtWidgets.QHBoxLayout()

        self.hex_display_cb = QtWidgets.QCheckBox("Hex display")
        bar.addWidget(self.hex_display_cb)
        self.hex_newline_cb = QtWidgets.QCheckBox("Split on CR/LF")
        bar.addWidget(self.hex_newline_cb)
        self.timestamp_cb = QtWidgets.QCheckBox("Timestamp")
        bar.addWidget(self.timestamp_cb)
        self.highlight_cb = QtWidgets.QCheckBox("Highlight keywords")
        bar.addWidget(self.highlight_cb)

        bar.addWidget(QtWidgets.QLabel("Encoding:"))
        self.codec_combo = QtWidgets.QComboBox()
        self.codec_combo.addItems(["ANSI (Latin-1)", "UTF-8", "GBK"])
        bar.addWidget(self.codec_combo)

        bar.addStretch()
        self.clear_btn = QtWidgets.QPushButton("Clear")
        bar.addWidget(self.clear_btn)

        parent.addLayout(bar)

    def _create_send_panel(self) -> QtWidgets.QWidget:
        panel = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        self.send_edit = QtWidgets.QPlainTextEdit()
        layout.addWidget(self.send_edit)

        row = QtWidgets.QHBoxLayout()
        self.hex_send_cb = QtWidgets.QCheckBox("Hex send")
        row.addWidget(self.hex_send_cb)
        self.newline_cb = QtWidgets.QCheckBox("Append CR LF")
        row.addWidget(self.newline_cb)
        self.clear_after_send_cb = QtWidgets.QCheckBox("Clear after send")
        row.addWidget(self.clear_after_send_cb)
        row.addStretch()
        self.clear_send_btn = QtWidgets.QPushButton("Clear input")
        row.addWidget(self.clear_send_btn)
        self.send_btn = QtWidgets.QPushButton("Send")
        row.addWidget(self.send_btn)
        layout.addLayout(row)

        return panel

    def _create_status_bar(self, parent: QtWidgets.QVBoxLayout) -> None:
        bar = QtWidgets.QHBoxLayout()
        self.status_label = QtWidgets.QLabel("● Disconnected")
        bar.addWidget(self.status_label)
        bar.addStretch()
        self.rate_card = StatCard("RX rate:")
        bar.addWidget(self.rate_card)
        self.total_card = StatCard("RX total:")
        bar.addWidget(self.total_card)
        parent.addLayout(bar)

    def _apply_preferences(self) -> None:
        p = self.prefs
        self.baud_combo.setCurrentText(str(p.baud_rate))
        self.data_bits_combo.setCurrentIndex(self.DATA_BITS.index(p.data_bits))
        self.stop_bits_combo.setCurrentIndex(self.STOP_BITS.index(p.stop_bits))
        self.parity_combo.setCurrentIndex(self.PARITIES.index(Parity(p.parity)))
        self.hex_display_cb.setChecked(p.display_mode == DisplayMode.HEX)
        self.hex_newline_cb.setChecked(p.hex_newline_splitting)
        self.timestamp_cb.setChecked(p.timestamp_enabled)
        self.highlight_cb.setChecked(p.keyword_highlighting)
        self.highlighter.set_enabled(p.keyword_highlighting)
        self.codec_combo.setCurrentIndex(self.CODECS.index(TextCodec(p.codec)))
        self.hex_send_cb.setChecked(p.hex_send)
        self.newline_cb.setChecked(p.append_newline)
        self.clear_after_send_cb.setChecked(p.clear_after_send)
        self.rate_card.set_text(ThroughputMonitor.format_rate(0))
        self.total_card.set_text(ThroughputMonitor.format_total(0))

    def _connect_signals(self) -> None:
        self.refresh_btn.clicked.connect(self._refresh_ports)
        self.show_all_cb.toggled.connect(self._refresh_ports)
        self.open_btn.clicked.connect(self._toggle_connection)
        self.send_btn.clicked.connect(self._send)
        self.clear_btn.clicked.connect(self.session.clear)
        self.clear_send_btn.clicked.connect(self.send_edit.clear)

        self.hex_display_cb.toggled.connect(
            lambda on: self.session.set_format_mode(DisplayMode.HEX if on else DisplayMode.TEXT))
        self.hex_newline_cb.toggled.connect(self.session.set_hex_newline_splitting)
        self.timestamp_cb.toggled.connect(self.session.set_timestamp_enabled)
        self.codec_combo.currentIndexChanged.connect(
            lambda i: self.session.set_encoding(self.CODECS[i]))
        self.highlight_cb.toggled.connect(self._on_highlight_toggled)
        self.hex_send_cb.toggled.connect(lambda on: setattr(self.prefs, 'hex_send', on))
        self.newline_cb.toggled.connect(lambda on: setattr(self.prefs, 'append_newline', on))
        self.clear_after_send_cb.toggled.connect(
            lambda on: setattr(self.prefs, 'clear_after_send', on))

        s = self.session
        s.opened.connect(self._on_opened)
        s.stopped.connect(self._on_stopped)
        s.error.connect(self._on_error)
        s.display_update.connect(self._append_text)
        s.throughput_sample.connect(self._on_throughput)
        s.config_changed.connect(self.prefs.remember_display)
        s.cleared.connect(self.receive_edit.clear)

        scroll_bar = self.receive_edit.verticalScrollBar()
        scroll_bar.valueChanged.connect(
            lambda value: self.session.on_scroll_changed(value, scroll_bar.maximum()))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _refresh_ports(self) -> None:
        current = self.port_combo.currentText() or self.prefs.last_port
        self.port_combo.clear()
        for entry in PortDiscovery.get_ports(self.show_all_cb.isChecked()):
            self.port_combo.addItem(entry.label, entry.device)
        index = self.port_combo.findData(current)
        if index >= 0:
            self.port_combo.setCurrentIndex(index)
        elif current:
            self.port_combo.setEditText(current)

    def _selected_port(self) -> str:
        index = self.port_combo.currentIndex()
        data = self.port_combo.itemData(index) if index >= 0 else None
        if data and self.port_combo.itemText(index) == self.port_combo.currentText():
            return data
        return self.port_combo.currentText().strip()

    def _build_config(self) -> SerialLinkConfig:
        return SerialLinkConfig(
            port=self._selected_port(),
            baud_rate=int(self.baud_combo.currentText()),
            data_bits=self.DATA_BITS[self.data_bits_combo.currentIndex()],
            stop_bits=self.STOP_BITS[self.stop_bits_combo.currentIndex()],
            parity=self.PARITIES[self.parity_combo.currentIndex()],
        )

    def _toggle_connection(self) -> None:
        if not self.session.is_open():
            try:
                self.session.open(self._build_config())
            except ValidationError:
                # Already reported through the error signal
                return
            self.open_btn.setEnabled(False)
            self.status_label.setText("● Opening...")
        else:
            self.open_btn.setEnabled(False)
            self.session.close()

    def _send(self) -> None:
        if not self.session.is_open():
            QtWidgets.QMessageBox.information(self, APP_NAME, "Serial port is not open")
            return

        text = self.send_edit.toPlainText()
        try:
            data = build_payload(text, self.prefs.hex_send, self.prefs.append_newline)
        except ValidationError as e:
            QtWidgets.QMessageBox.information(self, APP_NAME, e.message)
            return
        if not data:
            return

        self.session.show_sent(text)
        self.session.send(data)

        if self.prefs.clear_after_send:
            self.send_edit.clear()
        self.send_edit.setFocus()

    def _set_port_controls_enabled(self, enabled: bool) -> None:
        for w in (self.port_combo, self.refresh_btn, self.show_all_cb, self.baud_combo,
                  self.data_bits_combo, self.parity_combo, self.stop_bits_combo):
            w.setEnabled(enabled)

    # -------------------------------------------------------------------------
    # Session events
    # -------------------------------------------------------------------------

    def _on_opened(self) -> None:
        link = self.session.link
        if link is not None:
            self.prefs.remember_link(link)
        self._set_port_controls_enabled(False)
        self.open_btn.setText("Close")
        self.open_btn.setEnabled(True)
        self.status_label.setText(f"● Connected: {link.describe() if link else ''}")

    def _on_stopped(self) -> None:
        self._set_port_controls_enabled(True)
        self.open_btn.setText("Open")
        self.open_btn.setEnabled(True)
        self.status_label.setText("● Disconnected")
        self.rate_card.set_text(ThroughputMonitor.format_rate(0))

    def _on_error(self, message: str, kind: str) -> None:
        logger.warning(f"Serial error [{kind}]: {message}")
        if not self.session.is_open():
            self._set_port_controls_enabled(True)
            self.open_btn.setText("Open")
            self.open_btn.setEnabled(True)
            self.status_label.setText("● Disconnected")
        QtWidgets.QMessageBox.warning(self, "Serial error", message)

    def _on_throughput(self, interval_bytes: int, total_bytes: int) -> None:
        self.rate_card.set_text(ThroughputMonitor.format_rate(interval_bytes))
        self.total_card.set_text(ThroughputMonitor.format_total(total_bytes))

    def _on_highlight_toggled(self, enabled: bool) -> None:
        self.prefs.keyword_highlighting = enabled
        self.highlighter.set_enabled(enabled)

    def _append_text(self, text: str, scroll: bool) -> None:
        cursor = QtGui.QTextCursor(self.receive_edit.document())
        cursor.movePosition(QtGui.QTextCursor.End)
        cursor.insertText(text)
        if scroll:
            bar = self.receive_edit.verticalScrollBar()
            bar.setValue(bar.maximum())

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self.session.shutdown()
        super().closeEvent(event)

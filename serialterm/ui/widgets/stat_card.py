"""Compact status readout widget."""

from __future__ import annotations
from PySide6 import QtWidgets


class StatCard(QtWidgets.QFrame):
    """Caption plus a single value line, used for RX rate and RX total."""

    def __init__(self, label: str, parent=None):
        super().__init__(parent)
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(8, 2, 8, 2)
        layout.setSpacing(6)

        caption = QtWidgets.QLabel(label)
        layout.addWidget(caption)

        self.value_label = QtWidgets.QLabel("--")
        self.value_label.setMinimumWidth(90)
        layout.addWidget(self.value_label)

    def set_text(self, text: str) -> None:
        self.value_label.setText(text)

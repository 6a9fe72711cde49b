"""Keyword colouring for the receive view."""

from __future__ import annotations

from typing import List, Tuple

from PySide6 import QtCore, QtGui

# (pattern, colour, case-insensitive)
KEYWORD_RULES: Tuple[Tuple[str, str, bool], ...] = (
    (r'\binfo\b', '#0066CC', True),
    (r'\bwarning\b', '#FF9900', True),
    (r'\berror\b', '#CC0000', True),
    (r'\bsysinfo\b', '#00AA00', True),
    (r'\d{2}:\d{2}:\d{2}\.\d{3}\s*>>', '#808080', False),
)


class KeywordHighlighter(QtGui.QSyntaxHighlighter):
    """Colours info/warning/error/sysinfo keywords and timestamps."""

    def __init__(self, document: QtGui.QTextDocument = None):
        super().__init__(document)
        self._enabled = True
        self._rules: List[Tuple[QtCore.QRegularExpression, QtGui.QTextCharFormat]] = []
        for pattern, color, nocase in KEYWORD_RULES:
            options = QtCore.QRegularExpression.CaseInsensitiveOption if nocase \
                else QtCore.QRegularExpression.NoPatternOption
            fmt = QtGui.QTextCharFormat()
            fmt.setForeground(QtGui.QColor(color))
            self._rules.append((QtCore.QRegularExpression(pattern, options), fmt))

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        if self._enabled != enabled:
            self._enabled = enabled
            self.rehighlight()

    def highlightBlock(self, text: str) -> None:
        if not self._enabled:
            return
        for regex, fmt in self._rules:
            it = regex.globalMatch(text)
            while it.hasNext():
                match = it.next()
                self.setFormat(match.capturedStart(), match.capturedLength(), fmt)

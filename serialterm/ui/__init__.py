"""UI package for SerialTerm."""

from .main_window import MainWindow
from .highlighter import KeywordHighlighter

__all__ = [
    "MainWindow",
    "KeywordHighlighter",
]

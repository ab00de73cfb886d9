"""Textual widgets for cwd-history."""

from .bars import HistorySearchBar
from .history_input import HistoryInput, default_border_color

__all__ = [
    "HistoryInput",
    "HistorySearchBar",
    "default_border_color",
]

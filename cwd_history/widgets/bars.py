"""Search bar widget for the reverse-i-search overlay."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static


class HistorySearchBar(Static):
    """Thin bar below the input showing the reverse-i-search state.

    Visible only while Ctrl+R reverse search is active.  Displays the
    search prompt line (query and highlighted match) and, below it, the
    match counter or ``(failed)``.
    """

    def __init__(self) -> None:
        super().__init__("", id="history-search-bar")
        self.display = False

    def show_overlay(self, lines: list[str]) -> None:
        """Show the pre-rendered overlay lines (may contain ANSI escapes)."""
        self.update(Text.from_ansi("\n".join(lines)))
        self.display = True

    def dismiss(self) -> None:
        """Hide the search bar."""
        self.display = False
        self.update("")

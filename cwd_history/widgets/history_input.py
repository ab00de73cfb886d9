"""Prompt input widget with cross-session history and Ctrl+R search."""

from __future__ import annotations

from typing import Callable, Iterable

from textual import events
from textual.message import Message
from textual.widgets import TextArea

from ..constants import DEFAULT_BASH_BORDER_COLOR, DEFAULT_BORDER_COLOR, TEXTUAL_KEYS
from ..editor import is_bash_mode
from ..features.reverse_search import ReverseSearchManager
from ..history import PromptEntry, PromptHistory


def default_border_color(
    normal: str = DEFAULT_BORDER_COLOR, bash: str = DEFAULT_BASH_BORDER_COLOR
) -> Callable[[str], str]:
    """Border color rule: *bash* for ``!command`` input, *normal* otherwise."""
    return lambda text: bash if is_bash_mode(text) else normal


class HistoryInput(TextArea):
    """Prompt input backed by a prompt history.

    Key dispatch:

    * Every key is first offered to the reverse-i-search manager (Ctrl+R
      enters search mode).  Keys it consumes stop here.
    * While searching, unconsumed keys get the default TextArea handling.
    * Otherwise Enter submits, and Up/Down browse the history when the
      cursor is on the first/last line.
    """

    class Submitted(TextArea.Changed):
        """Fired when the user presses Enter."""

    class SearchChanged(Message):
        """Fired whenever the reverse-i-search state changes."""

        def __init__(self, search: ReverseSearchManager) -> None:
            super().__init__()
            self.search = search

    def __init__(
        self,
        *args: object,
        border_color: Callable[[str], str] | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self._border_color = border_color or default_border_color()
        self._browse = PromptHistory()
        self.search = ReverseSearchManager(self, on_change=self._search_changed)

    # -- editor surface used by the search manager ----------------------------

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.load_text(text)
        self.move_cursor(self.document.end)
        self._update_border()

    def set_history(self, history: Iterable[PromptEntry]) -> None:
        """Replace the prompt history wholesale (oldest first)."""
        entries = tuple(history)
        self.search.set_history(entries)
        self._browse.replace(entry.text for entry in entries)

    @property
    def prompt_history(self) -> tuple[PromptEntry, ...]:
        return self.search.history

    # -- styling ---------------------------------------------------------------

    def _update_border(self) -> None:
        self.styles.border = ("round", self._border_color(self.text))

    def on_mount(self) -> None:
        self._update_border()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area is self:
            self._update_border()

    def _search_changed(self) -> None:
        self.post_message(self.SearchChanged(self.search))

    # -- key handling ----------------------------------------------------------

    @staticmethod
    def _raw_input(event: events.Key) -> str | None:
        """Translate a Textual key event to the raw input the search expects."""
        if event.key in TEXTUAL_KEYS:
            return TEXTUAL_KEYS[event.key]
        if event.is_printable and event.character:
            return event.character
        return None

    async def _on_key(self, event: events.Key) -> None:
        data = self._raw_input(event)
        if data is not None and self.search.handle_input(data):
            event.prevent_default()
            event.stop()
            return

        if self.search.active:
            await super()._on_key(event)
            return

        if event.key == "enter":
            event.prevent_default()
            event.stop()
            self._browse.reset_browse()
            self.post_message(self.Submitted(text_area=self))
        elif event.key == "up" and self._browse.entry_count > 0 and self.cursor_location[0] == 0:
            # History navigation when cursor is on the first line
            entry = self._browse.older(self.text)
            if entry is not None:
                self.set_text(entry)
            event.prevent_default()
            event.stop()
        elif (
            event.key == "down"
            and self._browse.is_browsing
            and self.cursor_location[0] >= self.text.count("\n")
        ):
            # History navigation when cursor is on the last line
            entry = self._browse.newer()
            if entry is not None:
                self.set_text(entry)
            event.prevent_default()
            event.stop()
        else:
            await super()._on_key(event)

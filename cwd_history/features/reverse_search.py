"""Reverse history search (Ctrl+R) manager.

The :class:`ReverseSearchManager` owns the search-session state and all
transitions of the reverse-i-search mode.  It talks to the editor through
the narrow :class:`EditorTextLike` protocol and consumes raw terminal input
(``"\\x12"`` for Ctrl+R, ``"\\x1b"`` for Escape, ...), so the same state
machine drives both a plain line editor and the Textual input widget.

States
------
* idle -- only Ctrl+R is consumed; it enters search mode.
* searching -- printable characters edit the query, Ctrl+R steps to the
  next match, Enter accepts, Escape/Ctrl+G cancel.  Anything else is left
  for the editor's default handler and the mode stays active.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol

from .._utils import (
    compile_query,
    single_line,
    truncate_highlighted,
    truncate_to_width,
    visible_width,
)
from ..constants import (
    FAILED,
    KEY_ACCEPT,
    KEY_BACKSPACE,
    KEY_CANCEL,
    KEY_ESCAPE,
    KEY_SEARCH,
    NO_MATCH,
    SEARCH_PROMPT,
    STATUS_LINE,
)
from ..history import PromptEntry


class EditorTextLike(Protocol):
    """Minimal interface the manager needs from the editor."""

    def get_text(self) -> str: ...
    def set_text(self, text: str) -> None: ...


class ReverseSearchManager:
    """Manage Ctrl+R reverse-i-search state and transitions.

    Parameters
    ----------
    editor:
        Object exposing ``get_text()`` / ``set_text()``.
    history:
        Initial prompt history, oldest first.
    on_change:
        Optional callback invoked after every consumed input (e.g. to
        request a repaint).
    """

    def __init__(
        self,
        editor: EditorTextLike,
        history: Iterable[PromptEntry] = (),
        *,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._editor = editor
        self._history: tuple[PromptEntry, ...] = tuple(history)
        self._on_change = on_change

        # Owned state
        self.active: bool = False
        self.query: str = ""
        self.matches: list[PromptEntry] = []
        self.match_idx: int = -1
        self.original: str = ""

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def history(self) -> tuple[PromptEntry, ...]:
        return self._history

    def set_history(self, history: Iterable[PromptEntry]) -> None:
        """Replace the searchable corpus wholesale."""
        self._history = tuple(history)

    @property
    def current_match(self) -> PromptEntry | None:
        if 0 <= self.match_idx < len(self.matches):
            return self.matches[self.match_idx]
        return None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_input(self, data: str) -> bool:
        """Offer one unit of raw input to the search mode.

        Returns ``True`` if the input was consumed.  ``False`` means the
        caller should pass it to the editor's default handler.
        """
        if not self.active:
            if data == KEY_SEARCH:
                self.start()
                self._changed()
                return True
            return False

        if data == KEY_ESCAPE or data == KEY_CANCEL:
            self.cancel()
        elif data in KEY_ACCEPT:
            self.accept()
        elif data == KEY_SEARCH:
            self.cycle_next()
        elif data in KEY_BACKSPACE:
            if self.query:
                self.query = self.query[:-1]
                self.do_search()
        elif len(data) == 1 and ord(data) >= 32 and data != "\x7f":
            self.query += data
            self.do_search()
        else:
            return False

        self._changed()
        return True

    def start(self) -> None:
        """Enter search mode, remembering the editor's current text."""
        self.active = True
        self.query = ""
        self.matches = []
        self.match_idx = -1
        self.original = self._editor.get_text()

    def do_search(self) -> None:
        """Recompute matches for the current query."""
        pattern = compile_query(self.query)
        if pattern is None:
            self.matches = []
            self.match_idx = -1
            return
        self.matches = [entry for entry in self._history if pattern.search(entry.text)]
        self.match_idx = 0 if self.matches else -1

    def cycle_next(self) -> None:
        """Step to the next match, wrapping around."""
        if not self.matches:
            return
        self.match_idx = (self.match_idx + 1) % len(self.matches)

    def accept(self) -> None:
        """Leave search mode with the current match (or the saved text)."""
        match = self.current_match
        self._finish(match.text if match is not None else self.original)

    def cancel(self) -> None:
        """Leave search mode and restore the text from before the search."""
        self._finish(self.original)

    def _finish(self, text: str) -> None:
        self.active = False
        self._editor.set_text(text)
        self.query = ""
        self.matches = []
        self.match_idx = -1
        self.original = ""

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def overlay_lines(self, width: int) -> list[str]:
        """Search prompt line plus an optional status line, each within *width*."""
        prompt = SEARCH_PROMPT.format(query=self.query)
        match = self.current_match

        prompt_width = visible_width(prompt)
        if prompt_width >= width:
            line = truncate_to_width(prompt, width)
        elif match is not None:
            # The overlay is a single terminal line.
            flat = single_line(match.text)
            line = prompt + truncate_highlighted(
                flat, compile_query(self.query), width - prompt_width
            )
        else:
            line = prompt + truncate_to_width(NO_MATCH, width - prompt_width)

        lines = [line]
        if self.matches:
            status = STATUS_LINE.format(index=self.match_idx + 1, total=len(self.matches))
            lines.append(truncate_to_width(status, width))
        elif self.query:
            lines.append(truncate_to_width(FAILED, width))
        return lines

    def render_overlay(self, lines: list[str], width: int) -> list[str]:
        """Return *lines* with the last one replaced by the search overlay."""
        if not self.active or not lines:
            return list(lines)
        return [*lines[:-1], *self.overlay_lines(width)]

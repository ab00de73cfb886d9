"""Textual front-end: a prompt input with cwd-wide history search."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Iterable, Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Static

from .extension import CwdHistoryExtension
from .history import PromptEntry
from .log import logger
from .preferences import Preferences, load_preferences
from .refresh import Refresh
from .transcript_loader import load_session_records
from .widgets import HistoryInput, HistorySearchBar, default_border_color


class AppContext:
    """The :class:`ExtensionContext` the app hands to the extension."""

    has_ui = True

    def __init__(self, app: CwdHistoryApp) -> None:
        self._app = app

    @property
    def cwd(self) -> str:
        return self._app.cwd

    @property
    def session_file(self) -> Path | None:
        return self._app.session_file

    def session_entries(self) -> Iterable[Any]:
        return list(self._app.session_records)

    def get_editor_text(self) -> str:
        return self._app.query_one(HistoryInput).text

    def set_editor_history(self, history: Sequence[PromptEntry]) -> None:
        self._app.query_one(HistoryInput).set_history(history)


class CwdHistoryApp(App):
    """Prompt input whose history spans every session run in a directory."""

    TITLE = "cwd-history"

    CSS = """
    #session-label {
        color: $text-muted;
        padding: 0 1;
    }
    #history-input {
        height: auto;
        min-height: 3;
        max-height: 12;
    }
    #history-search-bar {
        height: auto;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        cwd: str | os.PathLike[str] | None = None,
        session_file: Path | None = None,
        prefs: Preferences | None = None,
        extension: CwdHistoryExtension | None = None,
    ) -> None:
        super().__init__()
        self.cwd = os.path.abspath(cwd or os.getcwd())
        self.session_file = session_file
        self.prefs = prefs or load_preferences()
        self.session_records: list[dict] = self._load_records(session_file)
        self.extension = extension or CwdHistoryExtension.from_preferences(
            self.prefs, spawn=self._spawn_refresh
        )
        self.history_context = AppContext(self)

    @staticmethod
    def _load_records(session_file: Path | None) -> list[dict]:
        if session_file is None:
            return []
        return list(load_session_records(session_file))

    def compose(self) -> ComposeResult:
        yield Static(self._session_label(), id="session-label")
        yield HistoryInput(
            id="history-input",
            border_color=default_border_color(
                self.prefs.colors.border, self.prefs.colors.bash_border
            ),
        )
        yield HistorySearchBar()
        yield Footer()

    def _session_label(self) -> str:
        name = self.session_file.name if self.session_file else "(new session)"
        return f"{self.cwd}  ·  {name}"

    def on_mount(self) -> None:
        self.query_one(HistoryInput).focus()
        self.extension.on_session_start(None, self.history_context)

    def switch_session(self, session_file: Path | None) -> None:
        """Make *session_file* the active session and refresh history."""
        self.session_file = session_file
        self.session_records = self._load_records(session_file)
        self.query_one("#session-label", Static).update(self._session_label())
        self.extension.on_session_switch(None, self.history_context)

    def _spawn_refresh(self, coro: Refresh) -> Any:
        return self.run_worker(coro, group="history-refresh", exit_on_error=False)

    # -- input events ----------------------------------------------------------

    def on_history_input_search_changed(self, message: HistoryInput.SearchChanged) -> None:
        bar = self.query_one(HistorySearchBar)
        if not message.search.active:
            bar.dismiss()
            return
        width = bar.size.width or self.size.width
        bar.show_overlay(message.search.overlay_lines(width))

    def on_history_input_submitted(self, message: HistoryInput.Submitted) -> None:
        widget = message.text_area
        text = widget.text
        if not text.strip():
            return
        now = int(time.time() * 1000)
        record = {
            "type": "message",
            "timestamp": now,
            "message": {
                "role": "user",
                "content": [{"type": "text", "text": text}],
                "timestamp": now,
            },
        }
        self.session_records.append(record)
        logger.debug("submitted prompt (%d chars)", len(text))
        widget.clear()
        # A new generation supersedes any pass still holding the old prompts.
        self.extension.controller.apply_editor_with_history(self.history_context)

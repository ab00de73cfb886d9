"""Host integration: refresh editor history on session start and switch."""

from __future__ import annotations

from typing import Any, Callable, Protocol

from .aggregator import HistoryAggregator
from .preferences import Preferences, load_preferences
from .refresh import ExtensionContext, HistoryRefreshController, Spawn


class HostLike(Protocol):
    """Event registration offered by the host application."""

    def on(self, event: str, handler: Callable[[Any, ExtensionContext], Any]) -> None: ...


class CwdHistoryExtension:
    """Wire the refresh controller to the host's session lifecycle."""

    def __init__(self, controller: HistoryRefreshController) -> None:
        self.controller = controller

    @classmethod
    def from_preferences(
        cls, prefs: Preferences | None = None, *, spawn: Spawn | None = None
    ) -> CwdHistoryExtension:
        prefs = prefs or load_preferences()
        aggregator = HistoryAggregator(
            prefs.sessions_dir,
            max_entries=prefs.history.max_entries,
            recent_prompts=prefs.history.recent_prompts,
            tail_bytes=prefs.history.tail_bytes,
        )
        return cls(HistoryRefreshController(aggregator, spawn=spawn))

    def on_session_start(self, _event: Any, ctx: ExtensionContext) -> Any:
        return self.controller.apply_editor_with_history(ctx)

    def on_session_switch(self, _event: Any, ctx: ExtensionContext) -> Any:
        return self.controller.apply_editor_with_history(ctx)

    def register(self, host: HostLike) -> None:
        host.on("session_start", self.on_session_start)
        host.on("session_switch", self.on_session_switch)

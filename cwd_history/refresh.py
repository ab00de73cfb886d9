"""Seed the editor with history now, then refresh it in the background.

On every session start or switch the editor is wired synchronously to the
active session's prompts, so it is never without history.  A background
pass then aggregates prompts from sibling session logs and swaps the richer
list in, unless the result has gone stale:

* a newer pass started since (last *started* wins, not last finished),
* the user has typed since the pass began, or
* the result equals the list already installed.

Stale passes are never aborted; their results are simply ignored.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any, Callable, Coroutine, Iterable, Protocol, Sequence

from .aggregator import HistoryAggregator
from .history import PromptEntry, build_history_list, histories_match
from .log import logger
from .transcript_loader import collect_user_prompts

Refresh = Coroutine[Any, Any, bool]
Spawn = Callable[[Refresh], Any]


class ExtensionContext(Protocol):
    """What the host exposes about the active session and its editor."""

    @property
    def cwd(self) -> str: ...
    @property
    def has_ui(self) -> bool: ...
    @property
    def session_file(self) -> str | os.PathLike[str] | None: ...

    def session_entries(self) -> Iterable[Any]: ...
    def get_editor_text(self) -> str: ...
    def set_editor_history(self, history: Sequence[PromptEntry]) -> None: ...


class HistoryRefreshController:
    """Apply immediate history and supersede stale background refreshes."""

    def __init__(
        self,
        aggregator: HistoryAggregator,
        *,
        spawn: Spawn | None = None,
    ) -> None:
        self.aggregator = aggregator
        self._spawn = spawn or self._spawn_task
        self._generation = 0
        self._tasks: set[asyncio.Task[bool]] = set()

    # -- generation tokens ------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        """Start a new load and return its generation token."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    # -- lifecycle --------------------------------------------------------

    def apply_editor_with_history(self, ctx: ExtensionContext) -> Any:
        """Install immediate history and spawn the cross-session refresh.

        Returns whatever *spawn* returned for the background pass (an
        :class:`asyncio.Task` by default), or None when there is no UI.
        """
        if not ctx.has_ui:
            return None

        session_file = ctx.session_file
        current = collect_user_prompts(ctx.session_entries())
        immediate = self.aggregator.build_immediate(current)

        token = self.begin()
        initial_text = ctx.get_editor_text()
        ctx.set_editor_history(immediate)
        logger.debug(
            "load %d: %d immediate prompt(s) for %s", token, len(immediate), ctx.cwd
        )

        return self._spawn(
            self.refresh(ctx, token, current, immediate, initial_text, session_file)
        )

    async def refresh(
        self,
        ctx: ExtensionContext,
        token: int,
        current: Sequence[PromptEntry],
        immediate: Sequence[PromptEntry],
        initial_text: str,
        session_file: str | os.PathLike[str] | None = None,
    ) -> bool:
        """Run one aggregation pass; return True if its result was applied."""
        try:
            previous = await self.aggregator.load_prompt_history_for_cwd(
                ctx.cwd, session_file
            )
        except Exception:
            logger.debug("history aggregation failed for %s", ctx.cwd, exc_info=True)
            return False

        if not self.is_current(token):
            logger.debug("load %d superseded by %d", token, self._generation)
            return False
        if ctx.get_editor_text() != initial_text:
            logger.debug("load %d skipped: editor text changed", token)
            return False

        history = build_history_list(current, previous, self.aggregator.max_entries)
        if histories_match(history, immediate):
            return False

        ctx.set_editor_history(history)
        logger.debug("load %d applied %d prompt(s)", token, len(history))
        return True

    def _spawn_task(self, coro: Refresh) -> asyncio.Task[bool] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running event loop; background refresh skipped")
            coro.close()
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

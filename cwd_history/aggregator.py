"""Build the editor's prompt history for a working directory.

The immediate list only needs the active session's records and is built
synchronously.  The full list additionally tail-reads the sibling session
logs kept for the same directory, newest file first, until a fixed prompt
budget is reached.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from .constants import (
    MAX_HISTORY_ENTRIES,
    MAX_RECENT_PROMPTS,
    SESSIONS_ROOT,
    TAIL_BYTES,
)
from .history import PromptEntry, build_history_list
from .log import logger
from .session_files import (
    list_session_files_async,
    read_tail_async,
    session_dir_for_cwd,
)
from .transcript_loader import parse_prompt_lines


def _resolve(path: str | os.PathLike[str]) -> Path | None:
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError):
        return None


class HistoryAggregator:
    """Merge current-session prompts with prompts from sibling session logs."""

    def __init__(
        self,
        sessions_root: Path | None = None,
        *,
        max_entries: int = MAX_HISTORY_ENTRIES,
        recent_prompts: int = MAX_RECENT_PROMPTS,
        tail_bytes: int = TAIL_BYTES,
    ) -> None:
        self.sessions_root = sessions_root if sessions_root is not None else SESSIONS_ROOT
        self.max_entries = max_entries
        self.recent_prompts = recent_prompts
        self.tail_bytes = tail_bytes

    def session_dir(self, cwd: str | os.PathLike[str]) -> Path:
        return session_dir_for_cwd(cwd, self.sessions_root)

    def build_immediate(self, current: Sequence[PromptEntry]) -> list[PromptEntry]:
        """History from the active session only."""
        return build_history_list(current, (), self.max_entries)

    async def load_prompt_history_for_cwd(
        self,
        cwd: str | os.PathLike[str],
        exclude_file: str | os.PathLike[str] | None = None,
    ) -> list[PromptEntry]:
        """Harvest up to ``recent_prompts`` prompts from other sessions in *cwd*.

        Files are visited most recently modified first; the active session's
        own log (*exclude_file*) is skipped.  A file that cannot be read
        contributes nothing.
        """
        session_dir = self.session_dir(cwd)
        excluded = _resolve(exclude_file) if exclude_file else None
        prompts: list[PromptEntry] = []

        if self.recent_prompts <= 0:
            return prompts

        files = await list_session_files_async(session_dir)
        logger.debug("found %d session file(s) in %s", len(files), session_dir)

        for session_file in files:
            if excluded is not None and _resolve(session_file.path) == excluded:
                continue

            tail = await read_tail_async(session_file.path, self.tail_bytes)
            if not tail:
                continue

            remaining = self.recent_prompts - len(prompts)
            prompts.extend(parse_prompt_lines(tail, limit=remaining))
            if len(prompts) >= self.recent_prompts:
                break

        return prompts

    async def build_full(
        self,
        current: Sequence[PromptEntry],
        cwd: str | os.PathLike[str],
        exclude_file: str | os.PathLike[str] | None = None,
    ) -> list[PromptEntry]:
        """History from the active session plus sibling session logs."""
        previous = await self.load_prompt_history_for_cwd(cwd, exclude_file)
        return build_history_list(current, previous, self.max_entries)

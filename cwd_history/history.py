"""Prompt history: entries, merging, and Up/Down browsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .constants import MAX_HISTORY_ENTRIES


@dataclass(frozen=True)
class PromptEntry:
    """A single user prompt harvested from a session log."""

    text: str
    timestamp: int  # epoch millis


def build_history_list(
    current_session: Iterable[PromptEntry],
    previous_sessions: Iterable[PromptEntry] = (),
    max_entries: int = MAX_HISTORY_ENTRIES,
) -> list[PromptEntry]:
    """Merge prompts into an ascending, de-duplicated, capped history list.

    Current-session prompts come first so that, for equal timestamps, the
    stable sort keeps them ahead of prompts harvested from other files.
    Duplicates are identified by ``(timestamp, text)``; the first one wins.
    Only the *max_entries* most recent entries are kept.
    """
    merged = sorted(
        [*current_session, *previous_sessions], key=lambda entry: entry.timestamp
    )

    seen: set[tuple[int, str]] = set()
    deduped: list[PromptEntry] = []
    for entry in merged:
        key = (entry.timestamp, entry.text)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(entry)

    if max_entries <= 0:
        return []
    return deduped[-max_entries:]


def histories_match(a: Sequence[PromptEntry], b: Sequence[PromptEntry]) -> bool:
    """True when both lists hold the same prompts in the same order."""
    if len(a) != len(b):
        return False
    return all(
        x.text == y.text and x.timestamp == y.timestamp for x, y in zip(a, b)
    )


class PromptHistory:
    """Up/Down browsing over the installed prompt list.

    The list is replaced wholesale by :meth:`replace`, which also ends any
    browse in progress.  The first :meth:`older` step remembers the input
    being edited; stepping :meth:`newer` past the newest prompt gives it back.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[str] = []  # oldest first
        self._position: int | None = None
        self._draft = ""
        self.replace(entries)

    def replace(self, entries: Iterable[str]) -> None:
        """Install prompt texts (oldest first); blank prompts are skipped."""
        self._entries = [text for text in entries if text.strip()]
        self.reset_browse()

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def is_browsing(self) -> bool:
        return self._position is not None

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    def older(self, current_text: str) -> str | None:
        """Step toward the oldest prompt.

        *current_text* is kept as the draft when this step starts a browse.
        Returns None when there is nothing older.
        """
        if not self._entries:
            return None
        if self._position is None:
            self._draft = current_text
            self._position = len(self._entries)
        if self._position == 0:
            return None
        self._position -= 1
        return self._entries[self._position]

    def newer(self) -> str | None:
        """Step toward the newest prompt, ending with the saved draft."""
        if self._position is None:
            return None
        self._position += 1
        if self._position < len(self._entries):
            return self._entries[self._position]
        draft = self._draft
        self.reset_browse()
        return draft

    def reset_browse(self) -> None:
        self._position = None
        self._draft = ""

"""Shared constants for cwd-history."""

from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# History limits
# ---------------------------------------------------------------------------

#: Hard cap on the merged history list handed to the editor.
MAX_HISTORY_ENTRIES: int = 100

#: Budget of prompts harvested from sibling session files per pass.
MAX_RECENT_PROMPTS: int = 30

#: Bytes read from the end of each sibling session file.
TAIL_BYTES: int = 256 * 1024

#: Where the host keeps one directory of ``*.jsonl`` session logs per cwd.
SESSIONS_ROOT: Path = Path.home() / ".pi" / "agent" / "sessions"

SESSION_FILE_SUFFIX = ".jsonl"

# ---------------------------------------------------------------------------
# Raw terminal input
# ---------------------------------------------------------------------------

KEY_SEARCH = "\x12"  # Ctrl+R
KEY_CANCEL = "\x07"  # Ctrl+G
KEY_ESCAPE = "\x1b"
KEY_ACCEPT = ("\r", "\n")
KEY_BACKSPACE = ("\x7f", "\x08")

#: Textual key names translated to the raw bytes the search manager expects.
TEXTUAL_KEYS: dict[str, str] = {
    "ctrl+r": KEY_SEARCH,
    "ctrl+g": KEY_CANCEL,
    "escape": KEY_ESCAPE,
    "enter": "\r",
    "backspace": "\x7f",
}

# ---------------------------------------------------------------------------
# Search overlay
# ---------------------------------------------------------------------------

SEARCH_PROMPT = "(reverse-i-search)`{query}': "
NO_MATCH = "(no match)"
FAILED = "(failed)"
STATUS_LINE = "[{index}/{total}] hit Enter to select, Ctrl+G to cancel"
ELLIPSIS = "..."

INVERSE_ON = "\x1b[7m"
INVERSE_OFF = "\x1b[27m"

# ---------------------------------------------------------------------------
# Default colors
# ---------------------------------------------------------------------------

DEFAULT_BORDER_COLOR = "#cb7700"
DEFAULT_BASH_BORDER_COLOR = "#5599dd"

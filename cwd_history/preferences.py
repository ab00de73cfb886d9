"""User preferences for cwd-history.

Loads settings from ~/.pi/agent/cwd-history.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    DEFAULT_BASH_BORDER_COLOR,
    DEFAULT_BORDER_COLOR,
    MAX_HISTORY_ENTRIES,
    MAX_RECENT_PROMPTS,
    SESSIONS_ROOT,
    TAIL_BYTES,
)
from .log import logger

PREFS_PATH = Path.home() / ".pi" / "agent" / "cwd-history.yaml"

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

_DEFAULT_YAML = f"""\
# cwd-history preferences
# Delete this file to reset to defaults.

history:
  max_entries: {MAX_HISTORY_ENTRIES}       # prompts kept in the editor history
  recent_prompts: {MAX_RECENT_PROMPTS}     # prompts harvested from other sessions
  tail_bytes: {TAIL_BYTES}   # bytes read from the end of each session log

sessions:
  dir: ""                        # session log root (empty = ~/.pi/agent/sessions)

colors:
  border: "{DEFAULT_BORDER_COLOR}"           # input border
  bash_border: "{DEFAULT_BASH_BORDER_COLOR}"      # input border for !commands
"""


@dataclass
class HistoryPreferences:
    """Limits for history aggregation."""

    max_entries: int = MAX_HISTORY_ENTRIES
    recent_prompts: int = MAX_RECENT_PROMPTS
    tail_bytes: int = TAIL_BYTES


@dataclass
class ColorPreferences:
    """Input border colors."""

    border: str = DEFAULT_BORDER_COLOR
    bash_border: str = DEFAULT_BASH_BORDER_COLOR


@dataclass
class Preferences:
    """Top-level preferences."""

    history: HistoryPreferences = field(default_factory=HistoryPreferences)
    colors: ColorPreferences = field(default_factory=ColorPreferences)
    sessions_dir: Path = SESSIONS_ROOT


def resolve_color(value: object) -> str | None:
    """Return *value* if it is a ``#rrggbb`` color, else None."""
    text = str(value).strip()
    return text if _HEX_COLOR_RE.match(text) else None


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError):
            logger.debug("failed to load preferences from %s", path, exc_info=True)
            return prefs
        if not isinstance(data, dict):
            return prefs

        if isinstance(data.get("history"), dict):
            hdata = data["history"]
            for key in ("max_entries", "recent_prompts", "tail_bytes"):
                if key in hdata:
                    number = _positive_int(hdata[key])
                    if number is not None:
                        setattr(prefs.history, key, number)
        if isinstance(data.get("sessions"), dict):
            sdir = data["sessions"].get("dir")
            if isinstance(sdir, str) and sdir.strip():
                prefs.sessions_dir = Path(sdir.strip()).expanduser()
        if isinstance(data.get("colors"), dict):
            for key, value in data["colors"].items():
                color = resolve_color(value)
                if color and hasattr(prefs.colors, key):
                    setattr(prefs.colors, key, color)
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML, encoding="utf-8")
        except OSError:
            logger.debug("could not write default preferences", exc_info=True)

    return prefs

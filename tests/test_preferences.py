"""Tests for cwd_history.preferences.

Covers load_preferences and resolve_color.  All file I/O uses tmp_path so
nothing touches the real user config.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from cwd_history.constants import (
    DEFAULT_BASH_BORDER_COLOR,
    DEFAULT_BORDER_COLOR,
    SESSIONS_ROOT,
)
from cwd_history.preferences import Preferences, load_preferences, resolve_color


def _write(path: Path, data: object) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# -- resolve_color -----------------------------------------------------------


class TestResolveColor:
    def test_hex_color(self):
        assert resolve_color("#ff0000") == "#ff0000"

    def test_whitespace_stripped(self):
        assert resolve_color("  #aabbcc  ") == "#aabbcc"

    def test_short_hex_rejected(self):
        assert resolve_color("#fff") is None

    def test_junk_rejected(self):
        assert resolve_color("rainbow") is None
        assert resolve_color(123) is None


# -- load_preferences --------------------------------------------------------


class TestLoadPreferencesDefaults:
    """When no file exists, load_preferences returns sensible defaults."""

    def test_defaults_when_no_file(self, tmp_path: Path):
        prefs = load_preferences(tmp_path / "nonexistent.yaml")
        assert prefs.history.max_entries == 100
        assert prefs.history.recent_prompts == 30
        assert prefs.history.tail_bytes == 256 * 1024
        assert prefs.colors.border == DEFAULT_BORDER_COLOR
        assert prefs.colors.bash_border == DEFAULT_BASH_BORDER_COLOR
        assert prefs.sessions_dir == SESSIONS_ROOT

    def test_creates_default_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "prefs.yaml"
        load_preferences(path)
        assert path.exists()

    def test_default_file_round_trips(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        assert load_preferences(path) == Preferences()


class TestLoadPreferencesFromFile:
    def test_history_limits(self, tmp_path: Path):
        path = _write(
            tmp_path / "prefs.yaml",
            {"history": {"max_entries": 50, "recent_prompts": 10, "tail_bytes": 4096}},
        )
        prefs = load_preferences(path)
        assert prefs.history.max_entries == 50
        assert prefs.history.recent_prompts == 10
        assert prefs.history.tail_bytes == 4096

    def test_invalid_limits_ignored(self, tmp_path: Path):
        path = _write(
            tmp_path / "prefs.yaml",
            {"history": {"max_entries": -1, "recent_prompts": "lots", "tail_bytes": True}},
        )
        prefs = load_preferences(path)
        assert prefs.history.max_entries == 100
        assert prefs.history.recent_prompts == 30
        assert prefs.history.tail_bytes == 256 * 1024

    def test_sessions_dir_expanded(self, tmp_path: Path):
        path = _write(tmp_path / "prefs.yaml", {"sessions": {"dir": "~/logs"}})
        prefs = load_preferences(path)
        assert prefs.sessions_dir == Path("~/logs").expanduser()

    def test_empty_sessions_dir_keeps_default(self, tmp_path: Path):
        path = _write(tmp_path / "prefs.yaml", {"sessions": {"dir": ""}})
        assert load_preferences(path).sessions_dir == SESSIONS_ROOT

    def test_colors(self, tmp_path: Path):
        path = _write(
            tmp_path / "prefs.yaml",
            {"colors": {"border": "#112233", "bash_border": "nope", "unknown": "#000000"}},
        )
        prefs = load_preferences(path)
        assert prefs.colors.border == "#112233"
        assert prefs.colors.bash_border == DEFAULT_BASH_BORDER_COLOR
        assert not hasattr(prefs.colors, "unknown")

    def test_partial_file(self, tmp_path: Path):
        path = _write(tmp_path / "prefs.yaml", {"history": {"max_entries": 7}})
        prefs = load_preferences(path)
        assert prefs.history.max_entries == 7
        assert prefs.history.recent_prompts == 30

    def test_invalid_yaml_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("history: [unclosed\n", encoding="utf-8")
        assert load_preferences(path) == Preferences()

    def test_non_mapping_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_preferences(path) == Preferences()

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("", encoding="utf-8")
        assert load_preferences(path) == Preferences()

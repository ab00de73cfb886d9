"""Tests for cwd_history.editor (HistoryEditor wrapper and border coloring)."""

from __future__ import annotations

from cwd_history.editor import (
    HistoryEditor,
    ansi_color,
    bash_mode_border,
    is_bash_mode,
)
from cwd_history.history import PromptEntry


class FakeBaseEditor:
    """Line editor double that records what reaches it."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.inputs: list[str] = []
        self.added: list[str] = []

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text

    def handle_input(self, data: str) -> None:
        self.inputs.append(data)
        if len(data) == 1 and data.isprintable():
            self.text += data

    def add_to_history(self, text: str) -> None:
        self.added.append(text)

    def clear_history(self) -> None:
        self.added.clear()

    def render(self, width: int) -> list[str]:
        return ["-" * width, self.text, "-" * width]


class NoHistoryBase(FakeBaseEditor):
    add_to_history = None


class AppendOnlyBase(FakeBaseEditor):
    clear_history = None


HISTORY = [PromptEntry("git status", 1), PromptEntry("npm test", 2)]


class TestSetHistory:
    def test_seeds_base_history(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.set_history(HISTORY)
        assert base.added == ["git status", "npm test"]
        assert list(editor.history) == HISTORY

    def test_base_without_history_stack(self):
        base = NoHistoryBase()
        editor = HistoryEditor(base)
        editor.set_history(HISTORY)
        assert list(editor.search.history) == HISTORY

    def test_second_install_replaces_base_history(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.set_history([PromptEntry("a", 1)])
        editor.set_history([PromptEntry("old", 0), PromptEntry("a", 1)])
        assert base.added == ["old", "a"]

    def test_append_only_base_gets_no_duplicates(self):
        base = AppendOnlyBase()
        editor = HistoryEditor(base)
        editor.set_history([PromptEntry("a", 1)])
        editor.set_history([PromptEntry("old", 0), PromptEntry("a", 1)])
        assert sorted(base.added) == ["a", "old"]

    def test_generator_consumed_once(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.set_history(e for e in HISTORY)
        assert base.added == ["git status", "npm test"]
        assert list(editor.history) == HISTORY


class TestInputRouting:
    def test_plain_input_reaches_base(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.handle_input("a")
        assert base.inputs == ["a"]
        assert editor.get_text() == "a"

    def test_search_keys_consumed(self):
        base = FakeBaseEditor("draft")
        editor = HistoryEditor(base)
        editor.set_history(HISTORY)
        for data in ("\x12", "n", "p", "m", "\r"):
            editor.handle_input(data)
        assert base.inputs == []
        assert editor.get_text() == "npm test"

    def test_unhandled_key_during_search_reaches_base(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.handle_input("\x12")
        editor.handle_input("\x1b[A")
        assert base.inputs == ["\x1b[A"]
        assert editor.search.active is True

    def test_request_render_called(self):
        calls = []
        editor = HistoryEditor(FakeBaseEditor(), request_render=lambda: calls.append(1))
        editor.handle_input("\x12")
        editor.handle_input("\x07")
        assert len(calls) == 2

    def test_set_text_delegates(self):
        base = FakeBaseEditor()
        editor = HistoryEditor(base)
        editor.set_text("new")
        assert base.text == "new"


class TestRender:
    def test_idle_render_is_base_render(self):
        base = FakeBaseEditor("typing")
        editor = HistoryEditor(base)
        assert editor.render(10) == base.render(10)

    def test_search_overlay_replaces_last_line(self):
        base = FakeBaseEditor("draft")
        editor = HistoryEditor(base)
        editor.set_history(HISTORY)
        for data in "\x12git":
            editor.handle_input(data)
        lines = editor.render(60)
        assert lines[:2] == ["-" * 60, "draft"]
        assert lines[2].startswith("(reverse-i-search)`git': ")
        assert lines[3].startswith("[1/1]")
        assert len(lines) == 4


class TestBorderColor:
    def test_is_bash_mode(self):
        assert is_bash_mode("!ls")
        assert is_bash_mode("   !ls")
        assert not is_bash_mode("ls !")
        assert not is_bash_mode("")

    def test_ansi_color(self):
        assert ansi_color("#ff8000")("x") == "\x1b[38;2;255;128;0mx\x1b[39m"

    def test_switches_on_bash_input(self):
        text = {"value": "hello"}
        colorize = bash_mode_border(
            lambda: text["value"], lambda s: f"N{s}", lambda s: f"B{s}"
        )
        assert colorize("-") == "N-"
        text["value"] = "!make"
        assert colorize("-") == "B-"

    def test_default_border_follows_base_text(self):
        base = FakeBaseEditor("plain")
        editor = HistoryEditor(base)
        normal = editor.border_color("-")
        base.text = "!git log"
        assert editor.border_color("-") != normal

    def test_custom_border_color(self):
        editor = HistoryEditor(FakeBaseEditor(), border_color=str.upper)
        assert editor.border_color("abc") == "ABC"

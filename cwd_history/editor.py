"""History-aware wrapper around a base line editor.

:class:`HistoryEditor` layers two things on top of any editor that renders
to lines and consumes raw terminal input:

* a prompt-history corpus, which also seeds the editor's own Up/Down
  history when it has one, and
* the Ctrl+R reverse-i-search mode from :mod:`cwd_history.features.reverse_search`.

Border styling is a constructor argument rather than something patched
onto the base editor afterwards.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence

from .constants import DEFAULT_BASH_BORDER_COLOR, DEFAULT_BORDER_COLOR
from .features.reverse_search import ReverseSearchManager
from .history import PromptEntry

BorderColor = Callable[[str], str]


class BaseEditor(Protocol):
    """Capabilities consumed from the underlying editor widget."""

    def get_text(self) -> str: ...
    def set_text(self, text: str) -> None: ...
    def handle_input(self, data: str) -> None: ...
    def render(self, width: int) -> list[str]: ...

    # Optional: ``add_to_history(text)`` and ``clear_history()`` for bases
    # with their own Up/Down history stack.


def is_bash_mode(text: str) -> bool:
    """True when the input is a ``!command`` shell escape."""
    return text.lstrip().startswith("!")


def bash_mode_border(
    get_text: Callable[[], str],
    normal: BorderColor,
    bash: BorderColor,
) -> BorderColor:
    """Build a border colorizer that switches to *bash* for ``!`` input."""

    def colorize(text: str) -> str:
        return (bash if is_bash_mode(get_text()) else normal)(text)

    return colorize


def ansi_color(hex_color: str) -> BorderColor:
    """Colorizer that wraps text in a 24-bit ANSI foreground color."""
    value = hex_color.lstrip("#")
    r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    prefix = f"\x1b[38;2;{r};{g};{b}m"
    return lambda text: f"{prefix}{text}\x1b[39m"


class HistoryEditor:
    """Editor with a cross-session prompt history and reverse-i-search."""

    def __init__(
        self,
        base: BaseEditor,
        *,
        border_color: BorderColor | None = None,
        request_render: Callable[[], None] | None = None,
    ) -> None:
        self.base = base
        self.search = ReverseSearchManager(base, on_change=request_render)
        self._seeded: set[tuple[int, str]] = set()
        self._border_color: BorderColor = border_color or bash_mode_border(
            base.get_text,
            ansi_color(DEFAULT_BORDER_COLOR),
            ansi_color(DEFAULT_BASH_BORDER_COLOR),
        )

    @property
    def border_color(self) -> BorderColor:
        return self._border_color

    @property
    def history(self) -> Sequence[PromptEntry]:
        return self.search.history

    def set_history(self, history: Iterable[PromptEntry]) -> None:
        """Install *history* (oldest first) as the search corpus.

        The base editor's own history stack, if it has one, is replaced by
        the same prompts.  Bases that cannot clear their stack only receive
        prompts they were not given before.
        """
        entries = tuple(history)
        add_to_history = getattr(self.base, "add_to_history", None)
        if callable(add_to_history):
            clear_history = getattr(self.base, "clear_history", None)
            if callable(clear_history):
                clear_history()
                self._seeded.clear()
            for entry in entries:
                key = (entry.timestamp, entry.text)
                if key in self._seeded:
                    continue
                self._seeded.add(key)
                add_to_history(entry.text)
        self.search.set_history(entries)

    # -- base editor surface ----------------------------------------------

    def get_text(self) -> str:
        return self.base.get_text()

    def set_text(self, text: str) -> None:
        self.base.set_text(text)

    def handle_input(self, data: str) -> None:
        if self.search.handle_input(data):
            return
        self.base.handle_input(data)

    def render(self, width: int) -> list[str]:
        return self.search.render_overlay(self.base.render(width), width)

"""Terminal-width helpers shared by the search overlay and widgets."""

from __future__ import annotations

import re

from rich.cells import cell_len

from .constants import ELLIPSIS, INVERSE_OFF, INVERSE_ON

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_BLANK_RE = re.compile(r"[\n\t\v\f]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def visible_width(text: str) -> int:
    """Number of terminal cells *text* occupies, ignoring escape sequences."""
    return cell_len(strip_ansi(text))


def single_line(text: str) -> str:
    """Flatten *text* for a one-line display.

    Newlines and tabs become spaces; carriage returns and every other
    control character are dropped, since they have no fixed cell width.
    """
    return _CONTROL_RE.sub("", _BLANK_RE.sub(" ", text))


def compile_query(query: str) -> re.Pattern[str] | None:
    """Compile a search query as a case-insensitive regex.

    Returns None for an empty query or one that is not a valid pattern.
    """
    if not query:
        return None
    try:
        return re.compile(query, re.IGNORECASE)
    except (re.error, OverflowError, RecursionError):
        return None


def highlight_spans(
    text: str, pattern: re.Pattern[str] | None
) -> list[tuple[str, bool]]:
    """Split *text* into ``(chunk, is_match)`` pieces for *pattern*."""
    if pattern is None:
        return [(text, False)] if text else []

    spans: list[tuple[str, bool]] = []
    pos = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > pos:
            spans.append((text[pos:start], False))
        spans.append((text[start:end], True))
        pos = end
    if pos < len(text):
        spans.append((text[pos:], False))
    return spans


def _crop(text: str, max_width: int) -> tuple[str, int]:
    """Longest prefix of *text* fitting in *max_width* cells, and its width."""
    used = 0
    for index, char in enumerate(text):
        width = cell_len(char)
        if used + width > max_width:
            return text[:index], used
        used += width
    return text, used


def truncate_highlighted(
    text: str,
    pattern: re.Pattern[str] | None,
    max_width: int,
    ellipsis: str = ELLIPSIS,
) -> str:
    """Wrap matches of *pattern* in inverse video and fit *text* to *max_width*.

    Width is measured on the visible text only; the result never occupies
    more than *max_width* cells.  Truncated output ends with *ellipsis*.
    """
    if max_width <= 0:
        return ""

    spans = highlight_spans(text, pattern)
    truncated = cell_len(text) > max_width
    if truncated:
        ellipsis, ellipsis_width = _crop(ellipsis, max_width)
        budget = max_width - ellipsis_width
    else:
        budget = max_width

    out: list[str] = []
    for chunk, is_match in spans:
        piece, used = _crop(chunk, budget)
        if piece:
            out.append(f"{INVERSE_ON}{piece}{INVERSE_OFF}" if is_match else piece)
        budget -= used
        if len(piece) < len(chunk):
            break

    if truncated:
        out.append(ellipsis)
    return "".join(out)


def truncate_to_width(text: str, max_width: int, ellipsis: str = ELLIPSIS) -> str:
    """Plain-text variant of :func:`truncate_highlighted`."""
    return truncate_highlighted(text, None, max_width, ellipsis)

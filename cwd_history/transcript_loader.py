"""Parse session log records into :class:`PromptEntry` values.

Only user-authored messages with text content become prompts.  Text
injected by tools or extensions is filtered out so history search only
sees what the user actually typed.
"""

from __future__ import annotations

import json
import math
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from .history import PromptEntry
from .log import logger

# <skill name="..." location="...">...</skill> blocks are injected context.
_SKILL_TAG_RE = re.compile(r"<skill\s+[^>]*>[\s\S]*?</skill>", re.IGNORECASE)

# Prompts generated by extensions (e.g. the review rubric) are not history.
_EXTENSION_PROMPT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^# Review Guidelines[ \t]*(?:\r?\n|$)", re.IGNORECASE),
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def extract_text(content: Iterable[Any]) -> str:
    """Return the filtered, trimmed text of a message's content segments."""
    text = "".join(
        item["text"]
        for item in content
        if isinstance(item, dict)
        and item.get("type") == "text"
        and isinstance(item.get("text"), str)
    )

    filtered = _SKILL_TAG_RE.sub("", text)

    probe = filtered.lstrip()
    for pattern in _EXTENSION_PROMPT_PATTERNS:
        if pattern.search(probe):
            return ""

    return filtered.strip()


def _coerce_timestamp(value: Any) -> int | None:
    """Convert a persisted timestamp to epoch millis, or None if unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            number = float(raw)
        except ValueError:
            pass
        else:
            return int(number) if math.isfinite(number) else None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    return None


def prompt_from_record(
    record: Any, now: Callable[[], int] = _now_ms
) -> PromptEntry | None:
    """Turn one session record into a prompt, or None if it isn't one.

    The timestamp prefers the message, then the record, then *now()*.
    """
    if not isinstance(record, dict) or record.get("type") != "message":
        return None
    message = record.get("message")
    if not isinstance(message, dict) or message.get("role") != "user":
        return None
    content = message.get("content")
    if not isinstance(content, list):
        return None

    text = extract_text(content)
    if not text:
        return None

    timestamp = _coerce_timestamp(message.get("timestamp"))
    if timestamp is None:
        timestamp = _coerce_timestamp(record.get("timestamp"))
    if timestamp is None:
        timestamp = now()
    return PromptEntry(text=text, timestamp=timestamp)


def collect_user_prompts(
    records: Iterable[Any], now: Callable[[], int] = _now_ms
) -> list[PromptEntry]:
    """Collect prompts from already-parsed in-memory session records."""
    prompts: list[PromptEntry] = []
    for record in records:
        entry = prompt_from_record(record, now)
        if entry is not None:
            prompts.append(entry)
    return prompts


def parse_prompt_lines(
    text: str, limit: int | None = None, now: Callable[[], int] = _now_ms
) -> list[PromptEntry]:
    """Parse newline-delimited JSON records into prompts.

    Malformed lines are skipped.  Parsing stops once *limit* prompts have
    been produced.
    """
    prompts: list[PromptEntry] = []
    if limit is not None and limit <= 0:
        return prompts

    for line in text.split("\n"):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except (ValueError, RecursionError):
            continue
        entry = prompt_from_record(record, now)
        if entry is None:
            continue
        prompts.append(entry)
        if limit is not None and len(prompts) >= limit:
            break
    return prompts


def load_session_records(session_path: Path) -> Iterator[dict]:
    """Load every record from a session ``.jsonl`` file.

    Yields nothing if the file is missing or unreadable; malformed lines
    are skipped.
    """
    try:
        with open(session_path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except (ValueError, RecursionError):
                    continue
                if isinstance(record, dict):
                    yield record
    except OSError:
        logger.debug("cannot read session file %s", session_path, exc_info=True)

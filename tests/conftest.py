"""Shared test fixtures for the cwd-history test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def user_record(
    text: str,
    timestamp: int | None = None,
    *,
    role: str = "user",
    record_timestamp: object = None,
) -> dict:
    """A session log record holding one message with a single text segment."""
    message: dict = {"role": role, "content": [{"type": "text", "text": text}]}
    if timestamp is not None:
        message["timestamp"] = timestamp
    record: dict = {"type": "message", "message": message}
    if record_timestamp is not None:
        record["timestamp"] = record_timestamp
    return record


def write_session(path: Path, records: list[dict], extra_lines: list[str] = ()) -> Path:
    """Write *records* (plus raw *extra_lines*) as a JSONL session log."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        for record in records:
            fh.write(json.dumps(record) + "\n")
        for line in extra_lines:
            fh.write(line + "\n")
    return path


@pytest.fixture
def sessions_root(tmp_path: Path) -> Path:
    """An empty session-log root directory."""
    root = tmp_path / "sessions"
    root.mkdir()
    return root


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A working directory whose sessions are under test."""
    cwd = tmp_path / "work" / "project"
    cwd.mkdir(parents=True)
    return cwd

"""Locate and tail-read the session logs kept for a working directory.

Session logs are append-only ``*.jsonl`` files owned by the host.  This
module only reads them; every filesystem failure degrades to "no data".
"""

from __future__ import annotations

import asyncio
import os
import re
from dataclasses import dataclass
from pathlib import Path

from .constants import SESSION_FILE_SUFFIX, SESSIONS_ROOT, TAIL_BYTES
from .log import logger

_LEADING_SEPARATOR_RE = re.compile(r"^[/\\]")
_SEPARATOR_RE = re.compile(r"[/\\:]")


@dataclass(frozen=True)
class SessionFile:
    """A session log on disk with the mtime observed when listing."""

    path: Path
    mtime: float


def session_dir_name(cwd: str | os.PathLike[str]) -> str:
    """Encode a working directory as the name of its session directory.

    ``/home/me/project`` becomes ``--home-me-project--``.
    """
    safe = _SEPARATOR_RE.sub("-", _LEADING_SEPARATOR_RE.sub("", str(cwd)))
    return f"--{safe}--"


def session_dir_for_cwd(
    cwd: str | os.PathLike[str], sessions_root: Path | None = None
) -> Path:
    """Return the directory holding the session logs for *cwd*."""
    root = sessions_root if sessions_root is not None else SESSIONS_ROOT
    return root / session_dir_name(os.path.abspath(cwd))


def read_tail(path: Path, max_bytes: int = TAIL_BYTES) -> str:
    """Read the last *max_bytes* of *path* as text.

    When the read starts past the beginning of the file, everything up to
    and including the first newline is dropped so the caller never sees a
    truncated leading line.  Returns ``""`` on any I/O failure.
    """
    try:
        size = path.stat().st_size
    except OSError:
        logger.debug("cannot stat %s", path, exc_info=True)
        return ""

    start = max(0, size - max(0, max_bytes))
    length = size - start
    if length <= 0:
        return ""

    try:
        with open(path, "rb") as fh:
            fh.seek(start)
            raw = fh.read(length)
    except OSError:
        logger.debug("cannot read tail of %s", path, exc_info=True)
        return ""

    if not raw:
        return ""
    if start > 0:
        idx = raw.find(b"\n")
        if idx >= 0:
            raw = raw[idx + 1 :]
    return raw.decode("utf-8", errors="replace")


async def read_tail_async(path: Path, max_bytes: int = TAIL_BYTES) -> str:
    """:func:`read_tail` run in a worker thread."""
    return await asyncio.to_thread(read_tail, path, max_bytes)


def list_session_files(session_dir: Path) -> list[SessionFile]:
    """List the ``*.jsonl`` files in *session_dir*, most recently modified first.

    Files that vanish or cannot be stat'ed while listing are skipped.
    """
    try:
        candidates = [
            entry
            for entry in session_dir.iterdir()
            if entry.name.endswith(SESSION_FILE_SUFFIX)
        ]
    except OSError:
        logger.debug("cannot list %s", session_dir, exc_info=True)
        return []

    files: list[SessionFile] = []
    for path in candidates:
        try:
            if not path.is_file():
                continue
            mtime = path.stat().st_mtime
        except OSError:
            continue
        files.append(SessionFile(path=path, mtime=mtime))

    files.sort(key=lambda f: f.mtime, reverse=True)
    return files


async def list_session_files_async(session_dir: Path) -> list[SessionFile]:
    """:func:`list_session_files` run in a worker thread."""
    return await asyncio.to_thread(list_session_files, session_dir)

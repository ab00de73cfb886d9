"""Entry point for the cwd-history CLI."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from datetime import datetime
from pathlib import Path

from . import __version__
from .aggregator import HistoryAggregator
from .history import PromptEntry
from .log import enable_debug_logging, logger
from .preferences import Preferences, load_preferences
from .transcript_loader import collect_user_prompts, load_session_records


def _format_entry(entry: PromptEntry) -> str:
    stamp = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    text = " ".join(entry.text.split())
    return f"{stamp}  {text}"


async def _collect_history(
    prefs: Preferences, cwd: str, session_file: Path | None
) -> list[PromptEntry]:
    aggregator = HistoryAggregator(
        prefs.sessions_dir,
        max_entries=prefs.history.max_entries,
        recent_prompts=prefs.history.recent_prompts,
        tail_bytes=prefs.history.tail_bytes,
    )
    current = (
        collect_user_prompts(load_session_records(session_file)) if session_file else []
    )
    return await aggregator.build_full(current, cwd, session_file)


def _print_history(prefs: Preferences, cwd: str, session_file: Path | None) -> int:
    """Print the aggregated history for *cwd*, newest last."""
    history = asyncio.run(_collect_history(prefs, cwd, session_file))
    if not history:
        print(f"No prompt history for {cwd}", file=sys.stderr)
        return 1
    for entry in history:
        print(_format_entry(entry))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cwd-history",
        description="Prompt input with history shared across a directory's sessions",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"cwd-history {__version__}",
    )
    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        help="Working directory whose sessions to read (default: current)",
    )
    parser.add_argument(
        "--session-file",
        "-s",
        type=Path,
        default=None,
        help="Active session log (its prompts load first and it is not re-scanned)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Preferences file (default: ~/.pi/agent/cwd-history.yaml)",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="Print the aggregated history and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run cwd-history."""
    args = build_parser().parse_args(argv)

    if args.debug:
        enable_debug_logging()

    prefs = load_preferences(args.config)
    cwd = os.path.abspath(args.cwd or os.getcwd())
    logger.debug("cwd=%s session_file=%s", cwd, args.session_file)

    if args.list:
        sys.exit(_print_history(prefs, cwd, args.session_file))

    from .app import CwdHistoryApp

    CwdHistoryApp(cwd=cwd, session_file=args.session_file, prefs=prefs).run()


if __name__ == "__main__":
    main()

"""dailylog - Main entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import load_config
from .controller import InteractionController
from .index import NoteIndex
from .store import NoteStore, StoreError
from .tui import run as run_tui

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "dailylog.log"


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Configure the root logger.

    Logs go to `log_file` when given, otherwise to stderr.
    """
    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dailylog",
        description="dailylog - Timestamped daily notes in your terminal",
    )
    parser.add_argument(
        "--base-dir",
        "-d",
        type=Path,
        help="Storage root (default: $DAILYLOG_HOME or ~/.dailylog)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to config file (default: auto-detect in storage root)",
    )

    commands = parser.add_argument_group("commands", "Run one action and exit instead of opening the UI")
    exclusive = commands.add_mutually_exclusive_group()
    exclusive.add_argument("--add", "-a", metavar="TEXT", help="Append a note to today's log")
    exclusive.add_argument("--list", "-l", action="store_true", help="List daily logs, newest first")
    exclusive.add_argument("--search", "-s", metavar="QUERY", help="List daily logs containing QUERY")
    exclusive.add_argument("--backup", "-b", action="store_true", help="Write a zip backup of all logs")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity (default: WARNING)",
    )
    logging_group.add_argument(
        "--log-file",
        type=Path,
        help=f"Write logs here (default: stderr, or <storage root>/{LOG_FILE_NAME} in the UI)",
    )
    return parser


def run_command(args: argparse.Namespace, store: NoteStore) -> int:
    """Run a one-shot command. Returns the process exit code."""
    index = NoteIndex(store)
    try:
        if args.add is not None:
            now = datetime.now()
            entry = store.append(now.date(), args.add, at=now)
            print(f"{store.path_for(now.date())}: {entry.to_line()}", end="")
        elif args.backup:
            print(store.backup())
        else:
            index.reload()
            logs = index.search(args.search) if args.search is not None else index.catalog
            for log in logs:
                print(log.title)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def is_command(args: argparse.Namespace) -> bool:
    return args.add is not None or args.list or args.search is not None or args.backup


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.base_dir, args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    interactive = not is_command(args)
    log_file = args.log_file
    if log_file is None and interactive:
        log_file = config.base_dir / LOG_FILE_NAME

    store = NoteStore(config)
    try:
        store.ensure_directories()
        setup_logging(args.log_level, log_file)
    except (StoreError, OSError) as e:
        print(f"Error creating directories: {e}", file=sys.stderr)
        sys.exit(1)

    if not interactive:
        sys.exit(run_command(args, store))

    controller = InteractionController(store, NoteIndex(store))
    run_tui(controller)


if __name__ == "__main__":  # pragma: no cover
    main()

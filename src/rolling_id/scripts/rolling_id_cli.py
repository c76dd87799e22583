"""Command-line access to a rolling identifier store."""
from __future__ import annotations

import argparse
import logging
import sys

from rolling_id.core.errors import RollingIdError
from rolling_id.core.settings import settings
from rolling_id.services.rotating_store import RotatingIdStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rolling-id",
        description="Issue rotating identifiers from a windowed seed chain",
    )
    parser.add_argument(
        "--location",
        default=None,
        help="Seed record path (defaults to ROLLING_ID_STORAGE_LOCATION)",
    )
    parser.add_argument(
        "--step-size",
        type=int,
        default=None,
        help="Seconds between identifier changes (defaults to ROLLING_ID_STEP_SIZE_SECONDS)",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=None,
        help="Seconds of history to retain (defaults to ROLLING_ID_WINDOW_SECONDS)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("current", help="Print the identifier for the current time bucket")
    commands.add_parser("rotate", help="Print the oldest retained seed and start a new chain")
    commands.add_parser("sync", help="Advance the stored chain to the current time bucket")
    window_cmd = commands.add_parser("window", help="Change the retained history window")
    window_cmd.add_argument("new_window", type=int, help="New window in seconds")
    return parser


def run(args: argparse.Namespace) -> str | None:
    """Execute a parsed command and return the text to print, if any."""
    store = RotatingIdStore(
        args.location or settings.storage_location,
        args.step_size if args.step_size is not None else settings.step_size_seconds,
        args.window if args.window is not None else settings.window_seconds,
    )

    if args.command == "current":
        return store.get_current_id().serialize()
    if args.command == "rotate":
        return store.get_seed_and_rotate().serialize()
    if args.command == "sync":
        store.make_seed_current()
        return None
    if args.command == "window":
        store.change_window(args.new_window)
        return None
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    try:
        output = run(args)
    except RollingIdError as exc:
        print(f"[rolling-id] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    if output is not None:
        print(output)


if __name__ == "__main__":
    main()

"""Command line entry point."""

from __future__ import annotations

import argparse
import functools
import signal
import sys
import threading
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import TextIO

import anyio

from .allowlist import AllowList
from .bridge.runtime import ChatProcessor, run_processing_loop
from .config import ChatSettings, load_settings, validate_settings
from .console import ConsoleReader, log_console_response
from .errors import AllowListFormatError, AllowListUnavailableError, ConfigError
from .log import get_logger, setup_logging
from .queue import LocalInputBuffer, MessageQueue
from .session import LoggingSession

logger = get_logger("absinthe_chat.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="absinthe-chat",
        description="Chat command client with an allow-list for privileged commands.",
    )
    parser.add_argument(
        "--address",
        help="Address of the server you want to connect to (host:port)",
    )
    parser.add_argument(
        "--login",
        nargs="?",
        const="",
        help="Player name in offline mode; omit the value for an online account",
    )
    parser.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="NAME|UUID",
        help="Allow a sender to run commands (repeatable)",
    )
    parser.add_argument("--config", type=Path, help="Path to a TOML config file")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=("debug", "info", "warning", "error"),
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> ChatSettings:
    settings = load_settings(args.config)
    if args.address is not None:
        settings = replace(settings, address=args.address)
    if args.login is not None:
        settings = replace(settings, login=args.login)
    validate_settings(settings)
    return settings


def load_allowlist(path: Path, seeds: Sequence[str] = ()) -> AllowList:
    """Load the persisted allow-list, falling back to an empty one."""
    allowlist = AllowList()
    try:
        allowlist.load(path)
    except AllowListUnavailableError:
        logger.info("allowlist.missing", path=str(path))
    except AllowListFormatError as exc:
        logger.error("allowlist.invalid", path=str(path), error=str(exc))
    for entry in seeds:
        if allowlist.add(entry):
            logger.info("allowlist.seeded", entry=entry)
    return allowlist


def run(settings: ChatSettings, seeds: Sequence[str], *, stdin: TextIO) -> int:
    allowlist = load_allowlist(settings.allowlist_path, seeds)
    queue = MessageQueue()
    console_input = LocalInputBuffer()
    session = LoggingSession(settings.address, settings.login)
    stop = threading.Event()

    processor = ChatProcessor(
        prefix=settings.prefix,
        queue=queue,
        console_input=console_input,
        allowlist=allowlist,
        remote=session,
        console=log_console_response,
        on_allowlist_changed=lambda current: current.save(settings.allowlist_path),
    )
    reader = ConsoleReader(stdin, console_input, on_eof=stop.set)

    previous = signal.signal(signal.SIGINT, lambda signum, frame: stop.set())
    try:
        session.start()
        reader.start()
        anyio.run(
            functools.partial(
                run_processing_loop,
                processor,
                should_stop=stop.is_set,
                tick_interval=settings.tick_interval,
            )
        )
        # input queued before the stop signal still gets answered
        processor.run_once()
    finally:
        signal.signal(signal.SIGINT, previous)
        session.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))
    return run(settings, args.allow, stdin=sys.stdin)


def entrypoint() -> None:
    raise SystemExit(main())

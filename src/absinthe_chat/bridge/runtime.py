"""Processing loop: drains remote and local input and dispatches commands."""

from __future__ import annotations

from collections.abc import Callable

import anyio

from ..allowlist import AllowList
from ..config import DEFAULT_TICK_INTERVAL
from ..errors import PersistenceError
from ..log import get_logger
from ..queue import LocalInputBuffer, MessageQueue
from ..session import RemoteSession
from ..types import ChatEvent
from .commands import CommandDispatcher, normalize_console_line, parse_command
from .policy import authorize

logger = get_logger("absinthe_chat.bridge.runtime")


class ChatProcessor:
    """One processing cycle per `run_once` call.

    Owns the allow-list and the dispatcher; neither may be touched from the
    network-receive thread. Remote events are processed before local lines
    within a cycle.
    """

    def __init__(
        self,
        *,
        prefix: str,
        queue: MessageQueue,
        console_input: LocalInputBuffer,
        allowlist: AllowList,
        remote: RemoteSession,
        console: Callable[[str], None],
        on_allowlist_changed: Callable[[AllowList], None] | None = None,
    ) -> None:
        self.prefix = prefix
        self.queue = queue
        self.console_input = console_input
        self.allowlist = allowlist
        self.remote = remote
        self.console = console
        self.dispatcher = CommandDispatcher(prefix, allowlist)
        self._on_allowlist_changed = on_allowlist_changed

    def run_once(self) -> None:
        for event in self.queue.pop_all():
            self.handle_remote(event)
        for line in self.console_input.pop_all():
            self.handle_local(line)

    def handle_remote(self, event: ChatEvent) -> None:
        parsed = parse_command(self.prefix, event.content)
        if not parsed.is_command:
            logger.debug("chat.message", sender=event.sender_name, text=event.content)
            return
        decision = authorize(parsed, event, self.allowlist)
        if not decision.accepted:
            logger.info(
                "chat.command.rejected",
                sender=event.sender_name,
                uuid=str(event.sender),
                reason=decision.reason,
            )
            if decision.message:
                self.remote.send_chat(decision.message)
            return
        logger.info(
            "chat.command",
            sender=event.sender_name,
            command=parsed.command.name if parsed.command else None,
        )
        result = self.dispatcher.dispatch(parsed)
        if result is None:
            return
        self.remote.send_chat(result.text)
        if result.allowlist_changed:
            self._persist_allowlist()

    def handle_local(self, line: str) -> None:
        text = normalize_console_line(self.prefix, line)
        if text is None:
            return
        result = self.dispatcher.dispatch(parse_command(self.prefix, text))
        if result is None:
            return
        self.console(result.text)
        if result.allowlist_changed:
            self._persist_allowlist()

    def _persist_allowlist(self) -> None:
        if self._on_allowlist_changed is None:
            return
        try:
            self._on_allowlist_changed(self.allowlist)
        except PersistenceError as exc:
            logger.error("allowlist.persist_failed", path=str(exc.path), error=str(exc))


async def run_processing_loop(
    processor: ChatProcessor,
    *,
    should_stop: Callable[[], bool],
    tick_interval: float = DEFAULT_TICK_INTERVAL,
) -> int:
    """Run cycles until `should_stop()` is true; returns the cycle count."""
    cycles = 0
    while not should_stop():
        processor.run_once()
        cycles += 1
        await anyio.sleep(tick_interval)
    logger.info("bridge.loop.stopped", cycles=cycles)
    return cycles

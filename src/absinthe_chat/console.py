"""Local operator console: a reader thread and the response sink."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TextIO

from .log import get_logger
from .queue import LocalInputBuffer

logger = get_logger("absinthe_chat.console")


class ConsoleReader:
    """Reads lines from `stream` on a daemon thread into `buffer`."""

    def __init__(
        self,
        stream: TextIO,
        buffer: LocalInputBuffer,
        *,
        on_eof: Callable[[], None] | None = None,
    ) -> None:
        self._stream = stream
        self._buffer = buffer
        self._on_eof = on_eof
        self._thread = threading.Thread(
            target=self._run, name="console-reader", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _run(self) -> None:
        for line in self._stream:
            self._buffer.push(line.rstrip("\r\n"))
        logger.debug("console.eof")
        if self._on_eof is not None:
            self._on_eof()


def log_console_response(text: str) -> None:
    logger.info("console.response", text=text)

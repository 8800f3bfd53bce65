"""Boundary with the network session.

The wire protocol lives outside this package. A transport calls into
`ChatReceiver` from its receive thread and provides a `RemoteSession` for
outgoing chat.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol
from uuid import UUID

from .log import get_logger
from .queue import MessageQueue
from .types import make_chat_event

logger = get_logger("absinthe_chat.session")


class RemoteSession(Protocol):
    def send_chat(self, text: str) -> None: ...

    def is_playable(self) -> bool: ...


class ChatReceiver:
    """Turns received chat packets into queued `ChatEvent`s.

    Runs on the network-receive thread; it only touches the queue and its own
    secure-chat flag.
    """

    def __init__(
        self,
        queue: MessageQueue,
        *,
        name_lookup: Callable[[UUID], str] | None = None,
    ) -> None:
        self.queue = queue
        self._name_lookup = name_lookup
        self._secure_chat_enforced = False

    @property
    def secure_chat_enforced(self) -> bool:
        return self._secure_chat_enforced

    def on_login(self, *, enforce_secure_chat: bool) -> None:
        self._secure_chat_enforced = bool(enforce_secure_chat)
        logger.info(
            "session.login",
            enforce_secure_chat=self._secure_chat_enforced,
        )

    def on_player_chat(
        self,
        *,
        sender: UUID,
        content: str,
        has_signature: bool,
        sender_name: str = "",
    ) -> bool:
        """Queue a chat message; returns False when it was dropped."""
        if not sender_name and self._name_lookup is not None:
            sender_name = self._name_lookup(sender)
        event = make_chat_event(
            sender=sender,
            sender_name=sender_name,
            content=content,
            has_signature=has_signature,
            enforced=self._secure_chat_enforced,
        )
        if event is None:
            return False
        self.queue.push(event)
        return True


class LoggingSession:
    """Session used when no transport is attached; outgoing chat is logged."""

    def __init__(self, address: str, login: str) -> None:
        self.address = address
        self.login = login
        self._lock = threading.Lock()
        self._playable = False

    def start(self) -> None:
        with self._lock:
            self._playable = True
        logger.info("session.started", address=self.address, login=self.login or None)

    def close(self) -> None:
        with self._lock:
            self._playable = False
        logger.info("session.closed", address=self.address)

    def is_playable(self) -> bool:
        with self._lock:
            return self._playable

    def send_chat(self, text: str) -> None:
        logger.info("chat.send", text=text)

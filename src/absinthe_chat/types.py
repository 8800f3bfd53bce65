"""Inbound chat event type."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

NIL_SENDER = UUID(int=0)
UNKNOWN_SENDER_NAME = "unknown"


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """A remote chat message, immutable once enqueued.

    `sender` is the all-zero UUID when the server did not tell us who sent
    the message. `enforced` mirrors the server's secure-chat setting at the
    time the message arrived; it is carried for callers but no policy
    currently depends on it.
    """

    sender: UUID
    sender_name: str
    content: str
    has_signature: bool = False
    enforced: bool = False


def make_chat_event(
    *,
    content: str,
    sender: UUID | None = None,
    sender_name: str = "",
    has_signature: bool = False,
    enforced: bool = False,
) -> ChatEvent | None:
    """Build a `ChatEvent`, or return None for messages with no content."""
    if not content:
        return None
    return ChatEvent(
        sender=sender if sender is not None else NIL_SENDER,
        sender_name=sender_name or UNKNOWN_SENDER_NAME,
        content=content,
        has_signature=bool(has_signature),
        enforced=bool(enforced),
    )

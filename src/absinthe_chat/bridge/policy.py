"""Authorization of commands that arrive over the network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..allowlist import AllowList
from ..types import ChatEvent
from .commands.parse import ParsedCommand

SIGNATURE_MISSING = "signature missing, signed chat required"
NOT_AUTHORIZED = "not authorized"

RejectionKind = Literal["user_input", "authorization"]


@dataclass(frozen=True, slots=True)
class AuthorizationDecision:
    accepted: bool
    reason: str | None = None
    kind: RejectionKind | None = None

    @property
    def message(self) -> str | None:
        """Text to send back to the sender, None when accepted."""
        if self.accepted:
            return None
        if self.kind == "user_input":
            return self.reason
        return f"Command rejected: {self.reason}."


ACCEPTED = AuthorizationDecision(accepted=True)


def authorize(
    parsed: ParsedCommand, event: ChatEvent, allowlist: AllowList
) -> AuthorizationDecision:
    """Decide whether a remote command may run.

    Local console input never goes through here. `event.enforced` is not
    consulted: signatures are required regardless of the server setting.
    """
    if not parsed.ok:
        return AuthorizationDecision(
            accepted=False, reason=parsed.error, kind="user_input"
        )
    if not event.has_signature:
        return AuthorizationDecision(
            accepted=False, reason=SIGNATURE_MISSING, kind="authorization"
        )
    if not allowlist.is_authorized(event):
        return AuthorizationDecision(
            accepted=False, reason=NOT_AUTHORIZED, kind="authorization"
        )
    return ACCEPTED

"""Tests for bridge/policy.py."""

from __future__ import annotations

from absinthe_chat.allowlist import AllowList
from absinthe_chat.bridge.commands.parse import parse_command
from absinthe_chat.bridge.policy import (
    ACCEPTED,
    NOT_AUTHORIZED,
    SIGNATURE_MISSING,
    authorize,
)

from chat_fixtures import make_chat_event


def test_accepts_signed_allowed_sender() -> None:
    event = make_chat_event(content="?ping")
    decision = authorize(parse_command("?", event.content), event, AllowList(["bob"]))
    assert decision == ACCEPTED
    assert decision.message is None


def test_malformed_command_surfaces_parse_error() -> None:
    event = make_chat_event(content="?", has_signature=False)
    parsed = parse_command("?", event.content)
    decision = authorize(parsed, event, AllowList())
    assert decision.accepted is False
    assert decision.kind == "user_input"
    assert decision.message == parsed.error


def test_unsigned_is_rejected_before_allowlist() -> None:
    event = make_chat_event(has_signature=False)
    decision = authorize(parse_command("?", "?ping"), event, AllowList(["bob"]))
    assert decision.accepted is False
    assert decision.reason == SIGNATURE_MISSING
    assert decision.message == "Command rejected: signature missing, signed chat required."


def test_sender_not_on_allowlist() -> None:
    event = make_chat_event(sender_name="mallory")
    decision = authorize(parse_command("?", "?ping"), event, AllowList(["bob"]))
    assert decision.accepted is False
    assert decision.reason == NOT_AUTHORIZED
    assert decision.message == "Command rejected: not authorized."


def test_empty_allowlist_rejects_signed_sender() -> None:
    decision = authorize(parse_command("?", "?ping"), make_chat_event(), AllowList())
    assert decision.reason == NOT_AUTHORIZED


def test_enforced_flag_does_not_change_decision() -> None:
    allowlist = AllowList(["bob"])
    parsed = parse_command("?", "?ping")
    for has_signature in (True, False):
        relaxed = make_chat_event(has_signature=has_signature, enforced=False)
        enforced = make_chat_event(has_signature=has_signature, enforced=True)
        assert authorize(parsed, relaxed, allowlist) == authorize(
            parsed, enforced, allowlist
        )

"""Built-in chat commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ...allowlist import AllowList
from .parse import ChatCommand, ParsedCommand


class CommandId(str, Enum):
    HELP = "help"
    PING = "ping"
    ECHO = "echo"
    ALLOW = "allow"
    DENY = "deny"
    LIST = "list"


BUILTIN_COMMAND_IDS = frozenset(command.value for command in CommandId)

ECHO_USAGE = "Malformed command. Usage: {prefix} echo <text>."
ALLOW_USAGE = "Malformed command. Usage: {prefix} allow <name|uuid> [...]."
DENY_USAGE = "Malformed command. Usage: {prefix} deny <name|uuid> [...]."
UNKNOWN_COMMAND = 'Unknown command "{name}". Try "{prefix} help".'


@dataclass(frozen=True, slots=True)
class CommandResult:
    text: str
    allowlist_changed: bool = False


def _count_message(count: int, *, verb: str, none: str) -> str:
    if count == 0:
        return none
    noun = "entry" if count == 1 else "entries"
    return f"{verb} {count} {noun}."


class CommandDispatcher:
    """Routes parsed commands to the built-in handlers.

    Every `CommandId` must have a handler; construction fails otherwise.
    The dispatcher mutates `allowlist` and so belongs to the processing loop.
    """

    def __init__(self, prefix: str, allowlist: AllowList) -> None:
        self.prefix = prefix
        self.allowlist = allowlist
        self._handlers: dict[CommandId, Callable[[ChatCommand], CommandResult]] = {
            CommandId.HELP: self._handle_help,
            CommandId.PING: self._handle_ping,
            CommandId.ECHO: self._handle_echo,
            CommandId.ALLOW: self._handle_allow,
            CommandId.DENY: self._handle_deny,
            CommandId.LIST: self._handle_list,
        }
        missing = set(CommandId) - set(self._handlers)
        if missing:
            names = ", ".join(sorted(command.value for command in missing))
            raise RuntimeError(f"no handler for built-in commands: {names}")

    def dispatch(self, parsed: ParsedCommand) -> CommandResult | None:
        """Run a parsed command; None only when the text was not a command."""
        if not parsed.is_command:
            return None
        if not parsed.ok or parsed.command is None:
            return CommandResult(text=parsed.error or "")
        return self.handle(parsed.command)

    def handle(self, command: ChatCommand) -> CommandResult:
        if command.name not in BUILTIN_COMMAND_IDS:
            return CommandResult(
                text=UNKNOWN_COMMAND.format(name=command.name, prefix=self.prefix)
            )
        return self._handlers[CommandId(command.name)](command)

    def format_help(self) -> str:
        p = self.prefix
        return (
            f"Commands: {p}help, {p}ping, {p}echo <text>, "
            f"{p}allow <name|uuid>, {p}deny <name|uuid>, {p}list"
        )

    def _handle_help(self, command: ChatCommand) -> CommandResult:
        return CommandResult(text=self.format_help())

    def _handle_ping(self, command: ChatCommand) -> CommandResult:
        return CommandResult(text="pong")

    def _handle_echo(self, command: ChatCommand) -> CommandResult:
        if not command.args:
            return CommandResult(text=ECHO_USAGE.format(prefix=self.prefix))
        return CommandResult(text=" ".join(command.args))

    def _handle_allow(self, command: ChatCommand) -> CommandResult:
        if not command.args:
            return CommandResult(text=ALLOW_USAGE.format(prefix=self.prefix))
        added = sum(1 for entry in command.args if self.allowlist.add(entry))
        return CommandResult(
            text=_count_message(added, verb="Added", none="No new entries added."),
            allowlist_changed=added > 0,
        )

    def _handle_deny(self, command: ChatCommand) -> CommandResult:
        if not command.args:
            return CommandResult(text=DENY_USAGE.format(prefix=self.prefix))
        removed = sum(1 for entry in command.args if self.allowlist.remove(entry))
        return CommandResult(
            text=_count_message(
                removed, verb="Removed", none="No matching entries removed."
            ),
            allowlist_changed=removed > 0,
        )

    def _handle_list(self, command: ChatCommand) -> CommandResult:
        return CommandResult(text=self.allowlist.format_entries())

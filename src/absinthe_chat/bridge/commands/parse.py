"""Command parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChatCommand:
    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """Result of `parse_command`.

    `error` is set exactly when the text carried the prefix but no command
    name could be extracted.
    """

    is_command: bool
    ok: bool = False
    error: str | None = None
    command: ChatCommand | None = None


NOT_A_COMMAND = ParsedCommand(is_command=False)


def malformed_command_message(prefix: str) -> str:
    return (
        f"Malformed command. Usage: {prefix} <command> [args]. "
        f'Try "{prefix} help".'
    )


def parse_command(prefix: str, text: str) -> ParsedCommand:
    """Parse a prefixed command from chat text.

    Args:
        prefix: The command prefix, matched exactly (no case folding).
        text: The message text to parse.

    Returns:
        `NOT_A_COMMAND` when `text` does not start with `prefix`, otherwise a
        result with either a command or a malformed-command error.
    """
    if not text.startswith(prefix):
        return NOT_A_COMMAND
    tokens = split_command_args(text[len(prefix) :])
    if not tokens:
        return ParsedCommand(
            is_command=True, ok=False, error=malformed_command_message(prefix)
        )
    name, *args = tokens
    return ParsedCommand(
        is_command=True,
        ok=True,
        command=ChatCommand(name=name, args=tuple(args)),
    )


def split_command_args(text: str) -> tuple[str, ...]:
    """Split text on runs of whitespace, dropping empty tokens."""
    return tuple(text.split())


def normalize_console_line(prefix: str, line: str) -> str | None:
    """Prepare a local console line for `parse_command`.

    Operators may omit the prefix: `allow bob` is read as `<prefix> allow bob`.
    Blank lines return None.
    """
    stripped = line.strip()
    if not stripped:
        return None
    if stripped.startswith(prefix):
        return stripped
    return f"{prefix} {stripped}"

"""Command handling for the chat bridge.

This module provides command parsing and dispatch of the built-in commands.
"""

from __future__ import annotations

from .builtin import BUILTIN_COMMAND_IDS, CommandDispatcher, CommandId, CommandResult
from .parse import (
    ChatCommand,
    ParsedCommand,
    normalize_console_line,
    parse_command,
    split_command_args,
)

__all__ = [
    "BUILTIN_COMMAND_IDS",
    "ChatCommand",
    "CommandDispatcher",
    "CommandId",
    "CommandResult",
    "ParsedCommand",
    "normalize_console_line",
    "parse_command",
    "split_command_args",
]

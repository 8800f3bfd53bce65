"""Error types raised by absinthe_chat.

User-input and authorization failures are not exceptions: they travel as
values (`ParsedCommand.error`, `CommandResult`, `AuthorizationDecision`) and
end up as chat or console responses.
"""

from __future__ import annotations

from pathlib import Path


class AbsintheError(Exception):
    """Base class for absinthe_chat errors."""


class ConfigError(AbsintheError):
    """Invalid command line or configuration file; fatal at startup."""


class PersistenceError(AbsintheError):
    """Allow-list file could not be read, parsed or written."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class AllowListUnavailableError(PersistenceError):
    """The allow-list file is missing or unreadable.

    Callers usually treat this as "start with an empty list".
    """


class AllowListFormatError(PersistenceError):
    """The allow-list file exists but is not a valid document."""


class AllowListWriteError(PersistenceError):
    """The allow-list could not be written to its destination."""

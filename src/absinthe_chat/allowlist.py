"""Persisted allow-list of senders permitted to run privileged commands.

Entries are either a sender UUID or a display name. Names are compared
case-insensitively (stored lowercase). The list is persisted as a TOML
document with a single `whitelist` array of strings:

    whitelist = [
        "bob",
        "069a79f4-44e9-4726-a5be-fca90e38aaf5",
    ]
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import UUID

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import AllowListFormatError, AllowListUnavailableError, AllowListWriteError
from .log import get_logger
from .types import ChatEvent

logger = get_logger("absinthe_chat.allowlist")

WHITELIST_KEY = "whitelist"
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, slots=True)
class Identifier:
    value: UUID

    def __str__(self) -> str:
        return format_uuid(self.value)


@dataclass(frozen=True, slots=True)
class Name:
    value: str

    def __str__(self) -> str:
        return self.value


AllowListEntry = Identifier | Name


def parse_uuid(text: str) -> UUID | None:
    """Parse 32 hex digits (hyphens ignored, any case) into a UUID."""
    digits = text.replace("-", "")
    if len(digits) != 32 or not _HEX_DIGITS.issuperset(digits):
        return None
    return UUID(bytes=bytes.fromhex(digits))


def format_uuid(value: UUID) -> str:
    """Canonical lowercase 8-4-4-4-12 form."""
    return str(value)


def normalize_name(value: str) -> str:
    return value.lower()


def parse_entry(text: str) -> AllowListEntry | None:
    """Classify `text` as an identifier or a normalized name.

    Returns None for input that can be neither (empty strings).
    """
    if not text:
        return None
    uuid = parse_uuid(text)
    if uuid is not None:
        return Identifier(uuid)
    name = normalize_name(text)
    if not name:
        return None
    return Name(name)


class AllowList:
    """Set of authorized senders.

    Not thread-safe: only the processing loop may mutate it, and `save`/`load`
    must not overlap on the same instance.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        # dicts keep insertion order for listing and saving
        self._uuids: dict[UUID, None] = {}
        self._names: dict[str, None] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: str) -> bool:
        """Add an entry; returns False when it was empty or already present."""
        parsed = parse_entry(entry)
        if parsed is None:
            return False
        return self._insert(parsed)

    def remove(self, entry: str) -> bool:
        parsed = parse_entry(entry)
        if parsed is None:
            return False
        bucket: dict[Any, None] = (
            self._uuids if isinstance(parsed, Identifier) else self._names
        )
        if parsed.value not in bucket:
            return False
        del bucket[parsed.value]
        return True

    def is_empty(self) -> bool:
        return not self._uuids and not self._names

    def is_authorized(self, event: ChatEvent) -> bool:
        """Any UUID or name match authorizes; an empty list authorizes nobody."""
        if self.is_empty():
            return False
        if event.sender in self._uuids:
            return True
        return normalize_name(event.sender_name) in self._names

    def entries(self) -> list[AllowListEntry]:
        """Names first, then identifiers, each in insertion order."""
        names: list[AllowListEntry] = [Name(name) for name in self._names]
        uuids: list[AllowListEntry] = [Identifier(uuid) for uuid in self._uuids]
        return names + uuids

    def format_entries(self) -> str:
        if self.is_empty():
            return "Allowlist is empty."
        return "Allowlist: " + ", ".join(str(entry) for entry in self.entries())

    def load(self, path: Path) -> None:
        """Replace the current entries with the ones stored at `path`.

        Raises `AllowListUnavailableError` when the file cannot be read and
        `AllowListFormatError` when it is not a valid document; in both cases
        the current entries are kept.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AllowListUnavailableError(
                f"cannot read allow-list {path}: {exc.strerror or exc}", path=path
            ) from exc
        except UnicodeDecodeError as exc:
            raise AllowListFormatError(
                f"invalid allow-list {path}: not UTF-8 ({exc.reason})", path=path
            ) from exc
        raw_entries = parse_allowlist_document(text, path=path)

        loaded = AllowList()
        skipped = 0
        for raw in raw_entries:
            if not isinstance(raw, str) or not raw:
                skipped += 1
                continue
            loaded.add(raw)
        self._uuids = loaded._uuids
        self._names = loaded._names
        logger.info(
            "allowlist.loaded",
            path=str(path),
            names=len(self._names),
            uuids=len(self._uuids),
            skipped=skipped,
        )

    def save(self, path: Path) -> None:
        """Write the entries to `path`, keeping other keys and comments there."""
        document = _read_existing_document(path)
        values = tomlkit.array()
        for entry in self.entries():
            values.append(str(entry))
        document[WHITELIST_KEY] = values.multiline(True)

        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(tomlkit.dumps(document), encoding="utf-8")
            os.replace(temp_path, path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise AllowListWriteError(
                f"cannot write allow-list {path}: {exc.strerror or exc}", path=path
            ) from exc
        logger.info("allowlist.saved", path=str(path), entries=len(self))

    def _insert(self, entry: AllowListEntry) -> bool:
        if isinstance(entry, Identifier):
            if entry.value in self._uuids:
                return False
            self._uuids[entry.value] = None
            return True
        if entry.value in self._names:
            return False
        self._names[entry.value] = None
        return True

    def __len__(self) -> int:
        return len(self._uuids) + len(self._names)

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, str):
            return False
        parsed = parse_entry(entry)
        if isinstance(parsed, Identifier):
            return parsed.value in self._uuids
        if isinstance(parsed, Name):
            return parsed.value in self._names
        return False


def parse_allowlist_document(text: str, *, path: Path) -> list[Any]:
    """Return the raw `whitelist` items of a TOML document.

    A missing key is an empty list. Items are returned unvalidated.
    """
    try:
        data = tomlkit.parse(text).unwrap()
    except TOMLKitError as exc:
        raise AllowListFormatError(f"invalid allow-list {path}: {exc}", path=path) from exc
    values = data.get(WHITELIST_KEY)
    if values is None:
        return []
    if not isinstance(values, list):
        raise AllowListFormatError(
            f"invalid allow-list {path}: {WHITELIST_KEY!r} must be an array of strings",
            path=path,
        )
    return values


def _read_existing_document(path: Path) -> tomlkit.TOMLDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return tomlkit.document()
    except UnicodeDecodeError:
        _set_aside_invalid(path)
        return tomlkit.document()
    except OSError as exc:
        raise AllowListWriteError(
            f"cannot read allow-list {path}: {exc.strerror or exc}", path=path
        ) from exc
    try:
        document = tomlkit.parse(text)
    except TOMLKitError:
        _set_aside_invalid(path)
        return tomlkit.document()
    if WHITELIST_KEY in document and not isinstance(document[WHITELIST_KEY], list):
        _set_aside_invalid(path)
        return tomlkit.document()
    return document


def _set_aside_invalid(path: Path) -> Path:
    """Move an unparseable allow-list to `<name>.invalid` so it is not lost."""
    invalid_path = path.with_name(f"{path.name}.invalid")
    try:
        os.replace(path, invalid_path)
    except OSError as exc:
        raise AllowListWriteError(
            f"cannot move invalid allow-list {path} aside: {exc.strerror or exc}",
            path=path,
        ) from exc
    logger.warning(
        "allowlist.save.invalid_document_moved",
        path=str(path),
        moved_to=str(invalid_path),
    )
    return invalid_path

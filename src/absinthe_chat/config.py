"""Settings loaded from an optional TOML file and the environment."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

DEFAULT_PREFIX = "?"
DEFAULT_ADDRESS = "127.0.0.1:25565"
DEFAULT_LOGIN = "absinthe"
DEFAULT_ALLOWLIST_FILENAME = "allowlist.toml"
DEFAULT_TICK_INTERVAL = 0.05


@dataclass(frozen=True, slots=True)
class ChatSettings:
    prefix: str = DEFAULT_PREFIX
    allowlist_path: Path = Path(DEFAULT_ALLOWLIST_FILENAME)
    tick_interval: float = DEFAULT_TICK_INTERVAL
    address: str = DEFAULT_ADDRESS
    login: str = DEFAULT_LOGIN


def _expand_path(s: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(s)))


def _env(name: str) -> str:
    return (os.environ.get(name) or "").strip()


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"invalid config {path}: not UTF-8 ({exc.reason})") from exc
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config {path}: {exc}") from exc


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a table")
    return value


def _string(table: dict[str, Any], key: str, section: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{section}.{key} must be a string")
    return value


def parse_address(address: str) -> tuple[str, int]:
    """Split `host:port`, validating the port."""
    host, sep, port_text = address.rpartition(":")
    if not sep or not host:
        raise ConfigError(f"address must be host:port, got {address!r}")
    try:
        port = int(port_text)
    except ValueError:
        raise ConfigError(f"invalid port in address {address!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"port out of range in address {address!r}")
    return host, port


def load_settings(config_path: Path | None = None) -> ChatSettings:
    """Build settings from `config_path` (if any) and environment overrides.

    Relative `allowlist_path` values are resolved against the config file's
    directory.
    """
    settings = ChatSettings()
    if config_path is not None:
        data = _load_toml(config_path)
        chat = _table(data, "chat")
        connection = _table(data, "connection")

        tick = chat.get("tick_interval", settings.tick_interval)
        if isinstance(tick, bool) or not isinstance(tick, int | float):
            raise ConfigError("chat.tick_interval must be a number")

        allowlist_path = settings.allowlist_path
        raw_allowlist = chat.get("allowlist_path")
        if raw_allowlist is not None:
            if not isinstance(raw_allowlist, str) or not raw_allowlist.strip():
                raise ConfigError("chat.allowlist_path must be a non-empty string")
            allowlist_path = _expand_path(raw_allowlist)
            if not allowlist_path.is_absolute():
                allowlist_path = config_path.parent / allowlist_path

        settings = ChatSettings(
            prefix=_string(chat, "prefix", "chat", settings.prefix),
            allowlist_path=allowlist_path,
            tick_interval=float(tick),
            address=_string(connection, "address", "connection", settings.address),
            login=_string(connection, "login", "connection", settings.login),
        )

    if prefix := _env("ABSINTHE_CHAT_PREFIX"):
        settings = replace(settings, prefix=prefix)
    if allowlist := _env("ABSINTHE_ALLOWLIST_PATH"):
        settings = replace(settings, allowlist_path=_expand_path(allowlist))

    validate_settings(settings)
    return settings


def validate_settings(settings: ChatSettings) -> None:
    if not settings.prefix or settings.prefix != settings.prefix.strip():
        raise ConfigError("chat.prefix must be non-empty without surrounding whitespace")
    if settings.tick_interval <= 0:
        raise ConfigError("chat.tick_interval must be positive")
    parse_address(settings.address)

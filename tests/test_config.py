"""Tests for config.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from absinthe_chat.config import (
    DEFAULT_ADDRESS,
    ChatSettings,
    load_settings,
    parse_address,
)
from absinthe_chat.errors import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ABSINTHE_CHAT_PREFIX", raising=False)
    monkeypatch.delenv("ABSINTHE_ALLOWLIST_PATH", raising=False)


def test_defaults_without_config() -> None:
    settings = load_settings(None)
    assert settings == ChatSettings()
    assert settings.prefix == "?"
    assert settings.address == DEFAULT_ADDRESS


def test_load_settings_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "absinthe.toml"
    config_path.write_text(
        "[chat]\n"
        'prefix = "!bot"\n'
        'allowlist_path = "state/allow.toml"\n'
        "tick_interval = 1\n"
        "[connection]\n"
        'address = "mc.example.org:25566"\n'
        'login = ""\n'
    )
    settings = load_settings(config_path)
    assert settings.prefix == "!bot"
    assert settings.allowlist_path == tmp_path / "state" / "allow.toml"
    assert settings.tick_interval == 1.0
    assert settings.address == "mc.example.org:25566"
    assert settings.login == ""


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ABSINTHE_CHAT_PREFIX", "!")
    monkeypatch.setenv("ABSINTHE_ALLOWLIST_PATH", str(tmp_path / "env.toml"))
    settings = load_settings(None)
    assert settings.prefix == "!"
    assert settings.allowlist_path == tmp_path / "env.toml"


@pytest.mark.parametrize(
    "content",
    [
        "[chat\n",
        'chat = "nope"\n',
        '[chat]\nprefix = ""\n',
        "[chat]\nprefix = 1\n",
        '[chat]\ntick_interval = "fast"\n',
        "[chat]\ntick_interval = 0\n",
        "[chat]\ntick_interval = true\n",
        '[chat]\nallowlist_path = ""\n',
        '[connection]\naddress = "localhost"\n',
    ],
)
def test_invalid_config(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "absinthe.toml"
    config_path.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(config_path)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.toml")


# --- parse_address tests ---


def test_parse_address() -> None:
    assert parse_address("127.0.0.1:25565") == ("127.0.0.1", 25565)


@pytest.mark.parametrize("address", ["", "host", ":25565", "host:port", "host:0", "host:70000"])
def test_parse_address_invalid(address: str) -> None:
    with pytest.raises(ConfigError):
        parse_address(address)


def test_non_utf8_config(tmp_path: Path) -> None:
    config_path = tmp_path / "absinthe.toml"
    config_path.write_bytes(b"[chat]\nprefix = \"\xff\"\n")
    with pytest.raises(ConfigError):
        load_settings(config_path)

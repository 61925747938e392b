"""JSON configuration: accounts, UI preferences, logging, and key bindings.

The file lives under the platform config directory (``config.json``), with
``~/.config/ovhterm.json`` honoured as a fallback. ``--config`` or the
``OVHTERM_CONFIG`` environment variable override both. Unlike persisted UI
preferences, credentials are required, so every problem surfaces as a
``ConfigError`` naming the offending field.
"""

from __future__ import annotations

import json
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_log_dir

from .errors import OvhTermError
from .remote.endpoints import ENDPOINT_URLS
from .ui_theme import available_theme_names

APP_NAME = "ovhterm"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "OVHTERM_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".config" / "ovhterm.json"
DEFAULT_LOG_FILE = str(Path(user_log_dir(APP_NAME, appauthor=False)) / "ovhterm.log")

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")

_NAMED_KEYS = {
    "enter": "ENTER",
    "return": "ENTER",
    "tab": "TAB",
    "esc": "ESC",
    "escape": "ESC",
    "space": " ",
    "up": "UP",
    "down": "DOWN",
    "left": "LEFT",
    "right": "RIGHT",
    "home": "HOME",
    "end": "END",
    "pgup": "PAGE_UP",
    "pageup": "PAGE_UP",
    "pgdown": "PAGE_DOWN",
    "pagedown": "PAGE_DOWN",
    "backspace": "BACKSPACE",
}

# Control bytes the key reader reports under their own names.
_CTRL_ALIASES = {
    "h": "BACKSPACE",
    "i": "TAB",
    "j": "ENTER",
    "m": "ENTER",
}


class ConfigError(OvhTermError):
    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field = field_name
        self.message = message

    def user_message(self) -> str:
        return f"Configuration error in {self.field}: {self.message}"


def normalize_key_name(name: str) -> str:
    """Map a configured key name to the token produced by the key reader.

    ``ctrl+c`` -> ``CTRL_C``, ``f1`` -> ``F1``, ``enter`` -> ``ENTER``.
    ``ctrl+i``, ``ctrl+m``, ``ctrl+j`` and ``ctrl+h`` send the same bytes as
    Tab, Enter and Backspace, so they map to those tokens.
    Single printable characters are kept as-is (``G`` differs from ``g``).
    """
    raw = name if name.isspace() else name.strip()
    if not raw:
        raise ValueError("empty key name")
    if len(raw) == 1:
        return raw
    lowered = raw.lower()
    if lowered.startswith("ctrl+") and len(lowered) == 6:
        letter = lowered[-1]
        if letter in _CTRL_ALIASES:
            return _CTRL_ALIASES[letter]
        if not "a" <= letter <= "z":
            raise ValueError(f"unknown key name: {name!r}")
        return f"CTRL_{letter.upper()}"
    if lowered[0] == "f" and lowered[1:].isdigit() and 1 <= int(lowered[1:]) <= 12:
        return lowered.upper()
    if lowered in _NAMED_KEYS:
        return _NAMED_KEYS[lowered]
    raise ValueError(f"unknown key name: {name!r}")


@dataclass(frozen=True)
class AccountConfig:
    name: str
    endpoint: str
    app_key: str
    app_secret: str
    consumer_key: str
    description: str = ""


@dataclass(frozen=True)
class GeneralConfig:
    default_account: str
    log_level: str = "info"
    log_file: str = DEFAULT_LOG_FILE


@dataclass(frozen=True)
class UIConfig:
    theme: str = "default"
    async_commands: bool = True
    command_timeout: float = 15.0
    accordion: bool = True


@dataclass(frozen=True)
class KeyBindings:
    """Action -> key tokens. Navigation keys are fixed and not listed here."""

    quit: tuple[str, ...] = ("q", "CTRL_C")
    help: tuple[str, ...] = ("?", "F1")
    refresh: tuple[str, ...] = ("r",)
    switch_account: tuple[str, ...] = ("a",)
    toggle_view: tuple[str, ...] = ("v",)

    def actions(self) -> dict[str, tuple[str, ...]]:
        return {
            "quit": self.quit,
            "help": self.help,
            "refresh": self.refresh,
            "switch_account": self.switch_account,
            "toggle_view": self.toggle_view,
        }


@dataclass(frozen=True)
class AppConfig:
    general: GeneralConfig
    accounts: dict[str, AccountConfig]
    ui: UIConfig = field(default_factory=UIConfig)
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    path: Path | None = None

    def account_names(self) -> list[str]:
        return sorted(self.accounts)

    def account(self, name: str | None = None) -> AccountConfig:
        wanted = name or self.general.default_account
        try:
            return self.accounts[wanted]
        except KeyError:
            raise ConfigError("general.default_account" if name is None else "account", f"unknown account {wanted!r}") from None


def resolve_config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    """Return the config file to read, preferring explicit and env overrides."""
    if explicit:
        return Path(explicit).expanduser()
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    if LEGACY_CONFIG_PATH.exists():
        return LEGACY_CONFIG_PATH
    return DEFAULT_CONFIG_PATH


def check_permissions(path: Path) -> None:
    """Reject credential files readable by group or others."""
    if os.name != "posix":
        return
    mode = stat.S_IMODE(path.stat().st_mode)
    if mode & 0o077:
        raise ConfigError(
            "file",
            f"{path} has permissions {mode:04o}; restrict it to the owner (chmod 600 {path})",
        )


def _section(data: dict[str, Any], name: str, *, required: bool) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        if required:
            raise ConfigError(name, "section is missing")
        return {}
    if not isinstance(value, dict):
        raise ConfigError(name, "must be an object")
    return value


def _required_str(section: dict[str, Any], key: str, where: str) -> str:
    value = section.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}.{key}", "is required")
    return value.strip()


def _parse_accounts(raw: dict[str, Any]) -> dict[str, AccountConfig]:
    if not raw:
        raise ConfigError("accounts", "at least one account must be configured")
    accounts: dict[str, AccountConfig] = {}
    for name, body in raw.items():
        where = f"accounts.{name}"
        if not isinstance(body, dict):
            raise ConfigError(where, "must be an object")
        endpoint = _required_str(body, "endpoint", where)
        if endpoint not in ENDPOINT_URLS and not endpoint.startswith("https://"):
            known = ", ".join(sorted(ENDPOINT_URLS))
            raise ConfigError(f"{where}.endpoint", f"unknown endpoint {endpoint!r} (expected one of {known})")
        accounts[name] = AccountConfig(
            name=name,
            endpoint=endpoint,
            app_key=_required_str(body, "app_key", where),
            app_secret=_required_str(body, "app_secret", where),
            consumer_key=_required_str(body, "consumer_key", where),
            description=str(body.get("description") or ""),
        )
    return accounts


def _parse_general(raw: dict[str, Any], accounts: dict[str, AccountConfig]) -> GeneralConfig:
    default_account = raw.get("default_account")
    if default_account is None and len(accounts) == 1:
        default_account = next(iter(accounts))
    if not isinstance(default_account, str) or default_account not in accounts:
        raise ConfigError("general.default_account", f"must name a configured account, got {default_account!r}")
    log_level = str(raw.get("log_level", "info")).lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError("general.log_level", f"must be one of {', '.join(LOG_LEVELS)}")
    log_file = raw.get("log_file", DEFAULT_LOG_FILE)
    if not isinstance(log_file, str) or not log_file:
        raise ConfigError("general.log_file", "must be a path or \"none\"")
    return GeneralConfig(default_account, log_level, log_file)


def _parse_ui(raw: dict[str, Any]) -> UIConfig:
    theme = str(raw.get("theme", "default")).strip().lower()
    if theme not in available_theme_names():
        raise ConfigError("ui.theme", f"unknown theme, expected one of {', '.join(available_theme_names())}")
    timeout = raw.get("command_timeout", 15)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("ui.command_timeout", "must be a positive number of seconds")
    async_commands = raw.get("async_commands", True)
    accordion = raw.get("accordion", True)
    if not isinstance(async_commands, bool):
        raise ConfigError("ui.async_commands", "must be true or false")
    if not isinstance(accordion, bool):
        raise ConfigError("ui.accordion", "must be true or false")
    return UIConfig(theme=theme, async_commands=async_commands, command_timeout=float(timeout), accordion=accordion)


def _parse_keybindings(raw: dict[str, Any]) -> KeyBindings:
    defaults = KeyBindings().actions()
    parsed: dict[str, tuple[str, ...]] = {}
    owner: dict[str, str] = {}
    for action, default_keys in defaults.items():
        value = raw.get(action)
        if value is None:
            keys = default_keys
        else:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not value or not all(isinstance(k, str) for k in value):
                raise ConfigError(f"keybindings.{action}", "must be a key name or a list of key names")
            try:
                keys = tuple(normalize_key_name(k) for k in value)
            except ValueError as exc:
                raise ConfigError(f"keybindings.{action}", str(exc)) from None
        for key in keys:
            if key in owner:
                raise ConfigError(f"keybindings.{action}", f"key {key!r} is already bound to {owner[key]}")
            owner[key] = action
        parsed[action] = keys
    unknown = sorted(set(raw) - set(defaults))
    if unknown:
        raise ConfigError("keybindings", f"unknown action(s): {', '.join(unknown)}")
    return KeyBindings(**parsed)


def parse_config(data: Any, path: Path | None = None) -> AppConfig:
    """Validate decoded JSON into an ``AppConfig``."""
    if not isinstance(data, dict):
        raise ConfigError("file", "top level must be a JSON object")
    accounts = _parse_accounts(_section(data, "accounts", required=True))
    return AppConfig(
        general=_parse_general(_section(data, "general", required=False), accounts),
        accounts=accounts,
        ui=_parse_ui(_section(data, "ui", required=False)),
        keybindings=_parse_keybindings(_section(data, "keybindings", required=False)),
        path=path,
    )


def load_config(path: str | os.PathLike[str] | None = None, *, check_mode: bool = True) -> AppConfig:
    """Read, permission-check, and validate the config file."""
    config_path = resolve_config_path(path)
    if not config_path.exists():
        raise ConfigError("file", f"{config_path} not found")
    if check_mode:
        check_permissions(config_path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError("file", f"{config_path} is not valid JSON: {exc.msg} (line {exc.lineno})") from None
    except OSError as exc:
        raise ConfigError("file", f"cannot read {config_path}: {exc.strerror or exc}") from None
    return parse_config(data, config_path)


__all__ = [
    "AccountConfig",
    "AppConfig",
    "CONFIG_ENV_VAR",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "GeneralConfig",
    "KeyBindings",
    "LEGACY_CONFIG_PATH",
    "UIConfig",
    "check_permissions",
    "load_config",
    "normalize_key_name",
    "parse_config",
    "resolve_config_path",
]

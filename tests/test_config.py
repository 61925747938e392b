from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from ovhterm import config as config_mod
from ovhterm.config import ConfigError, KeyBindings, load_config, normalize_key_name, parse_config
from ovhterm.runtime.keys import normalize_enter, read_key


def _account(**overrides):
    body = {
        "endpoint": "ovh-eu",
        "app_key": "ak",
        "app_secret": "as",
        "consumer_key": "ck",
    }
    body.update(overrides)
    return body


def _minimal(**sections):
    data = {"accounts": {"main": _account()}}
    data.update(sections)
    return data


class ParseConfigTests(unittest.TestCase):
    def test_single_account_becomes_default(self) -> None:
        config = parse_config(_minimal())
        self.assertEqual(config.general.default_account, "main")
        self.assertEqual(config.account().app_key, "ak")
        self.assertEqual(config.ui.command_timeout, 15.0)
        self.assertTrue(config.ui.async_commands)
        self.assertEqual(config.keybindings, KeyBindings())

    def test_multiple_accounts_need_explicit_default(self) -> None:
        data = {"accounts": {"main": _account(), "backup": _account(endpoint="ovh-ca")}}
        with self.assertRaises(ConfigError) as ctx:
            parse_config(data)
        self.assertEqual(ctx.exception.field, "general.default_account")
        data["general"] = {"default_account": "backup"}
        config = parse_config(data)
        self.assertEqual(config.account().endpoint, "ovh-ca")
        self.assertEqual(config.account_names(), ["backup", "main"])

    def test_unknown_account_name(self) -> None:
        config = parse_config(_minimal())
        with self.assertRaises(ConfigError) as ctx:
            config.account("nope")
        self.assertIn("unknown account", ctx.exception.user_message())

    def test_missing_credentials_are_reported_by_field(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            parse_config({"accounts": {"main": _account(app_secret="")}})
        self.assertEqual(ctx.exception.field, "accounts.main.app_secret")
        self.assertEqual(ctx.exception.user_message(), "Configuration error in accounts.main.app_secret: is required")

    def test_endpoint_must_be_known_alias_or_https(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config({"accounts": {"main": _account(endpoint="ovh-mars")}})
        config = parse_config({"accounts": {"main": _account(endpoint="https://api.example.test/1.0")}})
        self.assertEqual(config.account().endpoint, "https://api.example.test/1.0")

    def test_accounts_section_is_required(self) -> None:
        for data in ({}, {"accounts": {}}, {"accounts": []}, []):
            with self.assertRaises(ConfigError):
                parse_config(data)

    def test_ui_options_are_validated(self) -> None:
        config = parse_config(_minimal(ui={"theme": "Ocean", "command_timeout": 5, "async_commands": False, "accordion": False}))
        self.assertEqual(config.ui.theme, "ocean")
        self.assertEqual(config.ui.command_timeout, 5.0)
        self.assertFalse(config.ui.async_commands)
        self.assertFalse(config.ui.accordion)
        for bad in ({"theme": "neon"}, {"command_timeout": 0}, {"command_timeout": True}, {"async_commands": "yes"}):
            with self.assertRaises(ConfigError):
                parse_config(_minimal(ui=bad))

    def test_log_level_is_validated(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config(_minimal(general={"log_level": "loud"}))
        self.assertEqual(parse_config(_minimal(general={"log_level": "DEBUG"})).general.log_level, "debug")

    def test_keybindings_are_normalized(self) -> None:
        config = parse_config(_minimal(keybindings={"quit": ["ctrl+x", "Q"], "help": "f2"}))
        self.assertEqual(config.keybindings.quit, ("CTRL_X", "Q"))
        self.assertEqual(config.keybindings.help, ("F2",))
        self.assertEqual(config.keybindings.refresh, ("r",))

    def test_keybinding_conflicts_and_unknown_actions(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            parse_config(_minimal(keybindings={"refresh": "q"}))
        self.assertIn("already bound", ctx.exception.message)
        with self.assertRaises(ConfigError):
            parse_config(_minimal(keybindings={"launch": "x"}))
        with self.assertRaises(ConfigError):
            parse_config(_minimal(keybindings={"quit": ["hyper+q"]}))
        with self.assertRaises(ConfigError):
            parse_config(_minimal(keybindings={"quit": []}))


class NormalizeKeyNameTests(unittest.TestCase):
    def test_known_names(self) -> None:
        self.assertEqual(normalize_key_name("ctrl+c"), "CTRL_C")
        self.assertEqual(normalize_key_name("F12"), "F12")
        self.assertEqual(normalize_key_name("PgDown"), "PAGE_DOWN")
        self.assertEqual(normalize_key_name("enter"), "ENTER")
        self.assertEqual(normalize_key_name("G"), "G")
        self.assertEqual(normalize_key_name(" "), " ")

    def test_ctrl_names_match_decoded_control_bytes(self) -> None:
        for name, byte in (("ctrl+i", b"\t"), ("ctrl+m", b"\r"), ("ctrl+j", b"\n"), ("ctrl+h", b"\x08"), ("ctrl+x", b"\x18")):
            read_fd, write_fd = os.pipe()
            try:
                os.write(write_fd, byte)
                decoded, _ = normalize_enter(read_key(read_fd, timeout_ms=100), False)
            finally:
                os.close(read_fd)
                os.close(write_fd)
            with self.subTest(name=name):
                self.assertEqual(normalize_key_name(name), decoded)

    def test_rejects_unknown(self) -> None:
        for name in ("", "f13", "meta+x", "nope", "ctrl+1"):
            with self.assertRaises(ValueError):
                normalize_key_name(name)


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, data, mode: int = 0o600, name: str = "config.json") -> Path:
        path = self.dir / name
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        os.chmod(path, mode)
        return path

    def test_loads_explicit_path(self) -> None:
        path = self._write(_minimal())
        config = load_config(path)
        self.assertEqual(config.path, path)
        self.assertEqual(config.account().name, "main")

    def test_missing_file(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.dir / "absent.json")
        self.assertIn("not found", ctx.exception.message)

    def test_invalid_json(self) -> None:
        path = self._write("{not json")
        with self.assertRaises(ConfigError) as ctx:
            load_config(path)
        self.assertIn("not valid JSON", ctx.exception.message)

    @unittest.skipUnless(os.name == "posix", "permission bits are POSIX only")
    def test_world_readable_file_is_rejected(self) -> None:
        path = self._write(_minimal(), mode=0o644)
        with self.assertRaises(ConfigError) as ctx:
            load_config(path)
        self.assertIn("chmod 600", ctx.exception.message)
        self.assertEqual(load_config(path, check_mode=False).account().name, "main")

    def test_environment_variable_overrides_default(self) -> None:
        path = self._write(_minimal(), name="from-env.json")
        with mock.patch.dict(os.environ, {config_mod.CONFIG_ENV_VAR: str(path)}):
            self.assertEqual(config_mod.resolve_config_path(), path)
            self.assertEqual(config_mod.resolve_config_path(self.dir / "explicit.json"), self.dir / "explicit.json")

    def test_legacy_path_used_when_default_missing(self) -> None:
        legacy = self._write(_minimal(), name="legacy.json")
        with mock.patch.dict(os.environ, {}, clear=True), mock.patch.object(
            config_mod, "DEFAULT_CONFIG_PATH", self.dir / "missing" / "config.json"
        ), mock.patch.object(config_mod, "LEGACY_CONFIG_PATH", legacy):
            self.assertEqual(config_mod.resolve_config_path(), legacy)


if __name__ == "__main__":
    unittest.main()

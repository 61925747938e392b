"""Command-line entry point tests.

Covers config errors, the credential check, ``--run`` output, and the hand-off
to the interactive session.
"""

from __future__ import annotations

import io
import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from ovhterm import cli
from ovhterm.remote import AuthError

from fakes import FakeSource, account_routes


class _FakeClient(FakeSource):
    def __init__(self, routes) -> None:
        super().__init__(routes)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def _config(accounts=("main",)) -> dict:
    return {
        "general": {"default_account": accounts[0], "log_file": "none"},
        "accounts": {
            name: {"endpoint": "ovh-eu", "app_key": "ak", "app_secret": "as", "consumer_key": "ck"}
            for name in accounts
        },
        "ui": {"command_timeout": 5},
    }


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"
        self._write(_config())
        self.client = _FakeClient(account_routes())

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, data: dict) -> None:
        self.config_path.write_text(json.dumps(data), encoding="utf-8")
        os.chmod(self.config_path, 0o600)

    def _main(self, *argv: str) -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch("ovhterm.cli.connect", return_value=self.client) as connect_mock, mock.patch(
            "sys.stdout", stdout
        ), mock.patch("sys.stderr", stderr):
            code = cli.main(["--config", str(self.config_path), *argv])
        self.connect_mock = connect_mock
        return code, stdout.getvalue(), stderr.getvalue()

    def test_run_prints_command_output(self) -> None:
        code, out, err = self._main("--run", "My information", "--max-cols", "100")
        self.assertEqual(code, 0, err)
        self.assertIn("NIC Handle:", out)
        self.assertIn("xx1234-ovh", out)
        self.assertTrue(self.client.closed)
        account, timeout = self.connect_mock.call_args.args
        self.assertEqual(account.name, "main")
        self.assertEqual(timeout, 5.0)

    def test_log_file_then_disabled_logging_across_runs(self) -> None:
        log_path = Path(self._tmp.name) / "logs" / "ovhterm.log"
        data = _config()
        data["general"]["log_file"] = str(log_path)
        self._write(data)
        code, _, err = self._main("--run", "My information")
        self.assertEqual(code, 0, err)
        self.assertIn("event='startup'", log_path.read_text(encoding="utf-8"))

        self._write(_config())
        self.client = _FakeClient(account_routes())
        code, out, err = self._main("--run", "My information")
        self.assertEqual(code, 0, err)
        self.assertIn("xx1234-ovh", out)

    def test_run_raw_prints_json(self) -> None:
        code, out, _ = self._main("--run", "My information", "--raw", "--max-cols", "200")
        self.assertEqual(code, 0)
        self.assertIn('"nichandle": "xx1234-ovh"', out)

    def test_run_dynamic_entry(self) -> None:
        code, out, _ = self._main("--run", "Domain names/example.com", "--max-cols", "100")
        self.assertEqual(code, 0)
        self.assertIn("Domain: example.com", out)

    def test_run_unknown_entry(self) -> None:
        code, _, err = self._main("--run", "Nowhere")
        self.assertEqual(code, 2)
        self.assertIn("no runnable menu entry", err)

    def test_run_failure_exit_code(self) -> None:
        self.client.routes["/domain/example.com"] = AuthError("expired token")
        code, out, _ = self._main("--run", "Domain names/example.com", "--max-cols", "100")
        self.assertEqual(code, 1)
        self.assertIn("Failed to execute command: Authentication failed.", out)

    def test_missing_config(self) -> None:
        self.config_path.unlink()
        code, _, err = self._main()
        self.assertEqual(code, 1)
        self.assertIn("Configuration error in file", err)

    def test_invalid_credentials_stop_startup(self) -> None:
        self.client.routes["/me"] = AuthError("Invalid application key")
        code, _, err = self._main("--run", "My information")
        self.assertEqual(code, 1)
        self.assertIn("Authentication failed", err)
        self.assertTrue(self.client.closed)

    def test_dashboard_needs_a_terminal(self) -> None:
        with mock.patch("ovhterm.cli.stdio_is_tty", return_value=False):
            code, _, err = self._main()
        self.assertEqual(code, 1)
        self.assertIn("interactive terminal", err)

    def test_dashboard_session_is_started(self) -> None:
        self._write(_config(("main", "backup")))
        with mock.patch("ovhterm.cli.stdio_is_tty", return_value=True), mock.patch(
            "ovhterm.cli.run_app", return_value=0
        ) as run_app_mock:
            code, _, _ = self._main("--theme", "ocean")
        self.assertEqual(code, 0)
        session = run_app_mock.call_args.args[0]
        self.assertEqual(session.state.account, "main")
        self.assertEqual(session.store.theme.name, "ocean")
        self.assertEqual(session.dispatcher.accounts, ["backup", "main"])
        self.assertTrue(session.dispatcher.async_commands)

    def test_parser_rejects_non_positive_width(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            cli.build_parser().parse_args(["--max-cols", "0"])


if __name__ == "__main__":
    unittest.main()

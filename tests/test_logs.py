from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import structlog

from ovhterm.logs import configure_logging, level_number


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        configure_logging("info", "none")
        structlog.reset_defaults()

    def test_records_go_to_file_as_key_value_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "logs" / "ovhterm.log"
            self.assertEqual(configure_logging("info", str(target)), target)
            logger = structlog.get_logger("test")
            logger.debug("hidden_event")
            logger.info("command_finished", title="My information")
            configure_logging("info", "none")
            text = target.read_text(encoding="utf-8")

        self.assertNotIn("hidden_event", text)
        line = text.strip().splitlines()[-1]
        self.assertTrue(line.startswith("timestamp="))
        self.assertIn("level='info'", line)
        self.assertIn("event='command_finished'", line)
        self.assertIn("title='My information'", line)

    def test_disabled_logging_writes_nothing(self) -> None:
        self.assertIsNone(configure_logging("debug", "none"))
        self.assertIsNone(configure_logging("debug", None))
        structlog.get_logger("test").error("dropped")
        structlog.get_logger("test").critical("also_dropped")

    def test_switching_destinations_keeps_logging_usable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            first = Path(tmp) / "first.log"
            second = Path(tmp) / "second.log"
            configure_logging("info", str(first))
            configure_logging("info", "none")
            structlog.get_logger("test").info("while_disabled")
            configure_logging("info", str(second))
            structlog.get_logger("test").info("after_reopen")
            configure_logging("info", None)
            structlog.get_logger("test").warning("after_close")

            self.assertEqual(first.read_text(encoding="utf-8"), "")
            self.assertIn("event='after_reopen'", second.read_text(encoding="utf-8"))
            self.assertNotIn("while_disabled", second.read_text(encoding="utf-8"))

    def test_bad_level_leaves_previous_file_open(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "ovhterm.log"
            configure_logging("info", str(target))
            with self.assertRaises(ValueError):
                configure_logging("verbose", str(Path(tmp) / "other.log"))
            structlog.get_logger("test").info("still_written")
            configure_logging("info", "none")

            self.assertIn("event='still_written'", target.read_text(encoding="utf-8"))

    def test_level_names(self) -> None:
        self.assertEqual(level_number("WARN"), level_number("warning"))
        with self.assertRaises(ValueError):
            level_number("verbose")


if __name__ == "__main__":
    unittest.main()

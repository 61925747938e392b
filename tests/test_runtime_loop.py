from __future__ import annotations

from contextlib import contextmanager
import unittest

from ovhterm.runtime import build_session
from ovhterm.runtime.loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop

from fakes import FakeSource, account_routes


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _ScriptedKeys:
    """Return queued tokens, then ``q`` so the loop always terminates."""

    def __init__(self, keys: list[object]) -> None:
        self.keys = list(keys)

    def __call__(self, fd: int, timeout_ms: int | None = None) -> str:
        if not self.keys:
            return "q"
        key = self.keys.pop(0)
        if isinstance(key, BaseException):
            raise key
        return key


class RuntimeLoopTests(unittest.TestCase):
    def _run(self, keys: list[object], sizes: list[tuple[int, int]] | None = None):
        session = build_session(FakeSource(account_routes()), async_commands=False, no_color=True)
        terminal = _FakeTerminal()
        size_queue = list(sizes or [(100, 30)])
        frames: list[str] = []

        def terminal_size() -> tuple[int, int]:
            if len(size_queue) > 1:
                return size_queue.pop(0)
            return size_queue[0]

        callbacks = RuntimeLoopCallbacks(
            terminal_size=terminal_size,
            render=lambda: frames.append(session.frame()),
            read_key=_ScriptedKeys(keys),
        )
        run_main_loop(session.dispatcher, terminal, 0, callbacks, RuntimeLoopTiming(input_timeout_ms=1))
        return session, terminal, frames

    def test_quit_leaves_raw_mode(self) -> None:
        session, terminal, frames = self._run([])
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))
        self.assertEqual(len(frames), 1)
        self.assertTrue(session.state.ready)

    def test_renders_only_when_dirty(self) -> None:
        _, _, frames = self._run(["", "", "j", ""])
        self.assertEqual(len(frames), 2)

    def test_crlf_activates_once(self) -> None:
        session, _, _ = self._run(["ENTER_CR", "ENTER_LF"])
        self.assertEqual(session.state.status_message, "Menu Account Information expanded")

    def test_keyboard_interrupt_does_not_end_loop(self) -> None:
        session, terminal, _ = self._run([KeyboardInterrupt(), "j"])
        self.assertEqual(session.menu.selected_item.title, "Bare Metal Cloud")
        self.assertEqual(terminal.exited, 1)

    def test_resize_becomes_event(self) -> None:
        session, _, frames = self._run(["", "j"], sizes=[(60, 10), (100, 30)])
        self.assertIn("Initializing...", frames[0])
        self.assertTrue(session.state.ready)
        self.assertEqual(session.state.terminal_width, 100)

    def test_exit_menu_entry_ends_loop(self) -> None:
        session, terminal, _ = self._run(["G", "ENTER", "j"])
        self.assertEqual(session.menu.selected_item.title, "Exit")
        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()

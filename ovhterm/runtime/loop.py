"""Main interactive loop.

Each tick: turn a size change into a ``ResizeEvent``, drain finished
asynchronous commands, render if anything changed, then wait up to one
input timeout for a key. All state changes happen in the dispatcher.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from .dispatcher import EventDispatcher
from .events import KeyEvent, ResizeEvent
from .keys import normalize_enter
from .terminal import TerminalController

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    input_timeout_ms: int = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected I/O so the loop can be driven from tests."""

    terminal_size: Callable[[], tuple[int, int]]
    render: Callable[[], None]
    read_key: Callable[..., str]


def run_main_loop(
    dispatcher: EventDispatcher,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    timing: RuntimeLoopTiming | None = None,
) -> None:
    """Run until a key or menu action asks to quit."""
    timing = timing or RuntimeLoopTiming()
    state = dispatcher.state
    last_size: tuple[int, int] | None = None
    skip_next_lf = False

    with terminal.raw_mode():
        while True:
            size = callbacks.terminal_size()
            if size != last_size:
                last_size = size
                dispatcher.handle(ResizeEvent(*size))

            for finished in dispatcher.collect_finished():
                dispatcher.handle(finished)

            if state.dirty:
                callbacks.render()
                state.dirty = False

            try:
                key = callbacks.read_key(stdin_fd, timeout_ms=timing.input_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            token, skip_next_lf = normalize_enter(key, skip_next_lf)
            if token is None:
                continue
            if dispatcher.handle(KeyEvent(token)):
                logger.info("session_quit", key=token)
                break


__all__ = ["RuntimeLoopCallbacks", "RuntimeLoopTiming", "run_main_loop"]

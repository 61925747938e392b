"""Events consumed by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..commands import CommandResult


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key token such as ``"UP"``, ``"ENTER"``, ``"CTRL_C"``, or ``"q"``."""

    code: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class CommandFinishedEvent:
    """An asynchronous command delivered its result.

    ``path`` identifies the menu row that started it.
    """

    result: CommandResult
    path: tuple[str, ...] = ()


Event = Union[KeyEvent, ResizeEvent, CommandFinishedEvent]

__all__ = ["CommandFinishedEvent", "Event", "KeyEvent", "ResizeEvent"]

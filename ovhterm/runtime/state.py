"""Mutable UI state owned by the event loop."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..layout import PaneDimensions

WAITING_MESSAGE = "\n  Initializing... (resize window if needed)"
TOO_SMALL_MESSAGE = "Window too small - please resize"


class ActivePane(Enum):
    MENU = "menu"
    CONTENT = "content"


class ViewMode(Enum):
    FORMATTED = "formatted"
    RAW = "raw"


@dataclass
class UIState:
    """Everything the renderer needs beyond the menu model and viewport.

    Only the dispatcher writes these fields. While ``ready`` is false the
    frame is just the waiting message and ``dimensions`` may be stale.
    """

    active_pane: ActivePane = ActivePane.MENU
    terminal_width: int = 0
    terminal_height: int = 0
    ready: bool = False
    status_message: str = ""
    help_visible: bool = False
    content: str = ""
    raw_content: str = ""
    content_title: str = ""
    view_mode: ViewMode = ViewMode.FORMATTED
    dimensions: PaneDimensions | None = None
    account: str = ""
    last_command: tuple[str, ...] | None = None
    dirty: bool = True

    @property
    def menu_active(self) -> bool:
        return self.active_pane is ActivePane.MENU


__all__ = ["ActivePane", "TOO_SMALL_MESSAGE", "UIState", "ViewMode", "WAITING_MESSAGE"]

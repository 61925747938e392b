"""Interactive runtime: state, events, dispatch, rendering, and the main loop."""

from __future__ import annotations

from .app import Session, build_session, locate_menu_item, run_app
from .dispatcher import EventDispatcher
from .events import CommandFinishedEvent, KeyEvent, ResizeEvent
from .state import ActivePane, UIState, ViewMode
from .viewport import ContentViewport

__all__ = [
    "ActivePane",
    "CommandFinishedEvent",
    "ContentViewport",
    "EventDispatcher",
    "KeyEvent",
    "ResizeEvent",
    "Session",
    "UIState",
    "ViewMode",
    "build_session",
    "locate_menu_item",
    "run_app",
]

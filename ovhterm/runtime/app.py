"""Session wiring: builds the model objects and runs the interactive loop."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from ..commands import CommandFacade, CommandOptions, CommandRegistry, RetryPolicy, default_registry
from ..config import KeyBindings, UIConfig
from ..menu import MenuItem, MenuNode, MenuTreeModel, default_menu_nodes
from ..remote.source import RemoteDataSource
from ..ui_theme import ThemeStore, resolve_theme
from .dispatcher import AccountConnector, EventDispatcher
from .keys import read_key
from .loop import RuntimeLoopCallbacks, run_main_loop
from .render import compose_frame, render_frame
from .state import UIState
from .terminal import TerminalController
from .viewport import ContentViewport


@dataclass
class Session:
    state: UIState
    menu: MenuTreeModel
    viewport: ContentViewport
    facade: CommandFacade
    store: ThemeStore
    dispatcher: EventDispatcher

    def frame(self) -> str:
        return compose_frame(self.state, self.menu, self.viewport, self.store, self.dispatcher.keymap)


def build_session(
    source: RemoteDataSource,
    *,
    account: str = "",
    accounts: Sequence[str] = (),
    connect_account: AccountConnector | None = None,
    ui: UIConfig | None = None,
    keybindings: KeyBindings | None = None,
    theme_name: str | None = None,
    no_color: bool = False,
    json_style: str = "monokai",
    registry: CommandRegistry | None = None,
    nodes: Sequence[MenuNode] | None = None,
    async_commands: bool | None = None,
    retry: RetryPolicy | None = None,
) -> Session:
    """Wire one dashboard session around ``source``.

    The remote client already retries transient HTTP failures, so the
    facade retry policy defaults to a single attempt.
    """
    ui = ui or UIConfig()
    facade = CommandFacade(
        source,
        registry or default_registry(),
        CommandOptions(timeout=ui.command_timeout, retry=retry or RetryPolicy()),
    )
    menu = MenuTreeModel(
        default_menu_nodes() if nodes is None else nodes,
        facade.list_resources,
        accordion=ui.accordion,
    )
    viewport = ContentViewport()
    state = UIState(account=account)
    store = ThemeStore(resolve_theme(theme_name or ui.theme, no_color=no_color))
    dispatcher = EventDispatcher(
        state,
        menu,
        viewport,
        facade,
        store,
        keybindings=keybindings,
        async_commands=ui.async_commands if async_commands is None else async_commands,
        accounts=accounts,
        connect_account=connect_account,
        json_style=json_style,
        no_color=no_color,
    )
    return Session(state, menu, viewport, facade, store, dispatcher)


def _static_path(nodes: Sequence[MenuNode], title: str, parent: tuple[str, ...] = ()) -> tuple[str, ...] | None:
    wanted = title.casefold()
    for node in nodes:
        path = parent + (node.title,)
        if node.title.casefold() == wanted:
            return path
        found = _static_path(node.children, title, path)
        if found is not None:
            return found
    return None


def locate_menu_item(menu: MenuTreeModel, target: str) -> MenuItem | None:
    """Find a row by title, expanding headers on the way.

    ``target`` is a menu title (``"My information"``), or a dynamic header
    and a child title joined by ``/`` (``"Domain names/example.com"``).
    """
    head, _, child = target.partition("/")
    path = _static_path(menu.nodes, head.strip())
    if path is None:
        return None
    expand_upto = path if child else path[:-1]
    for depth in range(1, len(expand_upto) + 1):
        menu.expanded.add(expand_upto[:depth])
    menu.rebuild()
    if not child:
        idx = menu.index_of(path)
        return menu.items[idx] if idx is not None else None
    wanted = child.strip().casefold()
    for item in menu.items:
        if item.path[:-1] == path and item.selectable and wanted in {item.title.casefold(), (item.resource_id or "").casefold()}:
            return item
    return None


def run_app(session: Session, *, stdin_fd: int | None = None, stdout_fd: int | None = None) -> int:
    """Take over the terminal until the user quits."""
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    terminal = TerminalController(stdin_fd, stdout_fd)
    callbacks = RuntimeLoopCallbacks(
        terminal_size=terminal.size,
        render=lambda: render_frame(session.frame(), stdout_fd),
        read_key=read_key,
    )
    run_main_loop(session.dispatcher, terminal, stdin_fd, callbacks)
    return 0


def stdio_is_tty() -> bool:
    return os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())


__all__ = ["Session", "build_session", "locate_menu_item", "run_app", "stdio_is_tty"]

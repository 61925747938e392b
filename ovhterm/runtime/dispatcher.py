"""Event dispatcher: the only writer of ``UIState`` and the menu model.

``handle`` takes one event and returns ``True`` when the session should
end. Key tokens are routed through a ``KeyMap``: fixed navigation keys
first, then the configurable actions, which win on conflicts.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog

from ..commands import CommandBusy, CommandFacade, CommandHandle, CommandResult
from ..config import KeyBindings
from ..format import highlight_json
from ..layout import compute_dimensions, validate
from ..menu import MenuItem, MenuTreeModel, failure_reason
from ..remote.source import RemoteDataSource
from ..ui_theme import ThemeStore
from .events import CommandFinishedEvent, Event, KeyEvent, ResizeEvent
from .keymap import KeyAction, KeyMap
from .state import TOO_SMALL_MESSAGE, ActivePane, UIState, ViewMode
from .viewport import ContentViewport

logger = structlog.get_logger(__name__)

EXIT_BINDING = "exit"

AccountConnector = Callable[[str], RemoteDataSource]


class EventDispatcher:
    def __init__(
        self,
        state: UIState,
        menu: MenuTreeModel,
        viewport: ContentViewport,
        facade: CommandFacade,
        theme_store: ThemeStore,
        *,
        keybindings: KeyBindings | None = None,
        async_commands: bool = False,
        accounts: Sequence[str] = (),
        connect_account: AccountConnector | None = None,
        json_style: str = "monokai",
        no_color: bool = False,
    ) -> None:
        self.state = state
        self.menu = menu
        self.viewport = viewport
        self.facade = facade
        self.theme_store = theme_store
        self.keybindings = keybindings or KeyBindings()
        self.async_commands = async_commands
        self.accounts = list(accounts)
        self._connect_account = connect_account
        self.json_style = json_style
        self.no_color = no_color
        self.pending: list[tuple[CommandHandle, tuple[str, ...]]] = []
        self.keymap = self._build_keymap()
        self.theme_store.set_focus(self.state.menu_active)

    def _build_keymap(self) -> KeyMap:
        kb = self.keybindings
        keymap = KeyMap()
        keymap.bind_all(
            [
                KeyAction("toggle_pane", ("TAB",), self.toggle_pane, "Switch between menu and content"),
                KeyAction("activate", ("ENTER",), self.activate, "Select menu item / toggle section"),
                KeyAction("up", ("UP", "k"), lambda: self.navigate(-1), "Move up"),
                KeyAction("down", ("DOWN", "j"), lambda: self.navigate(1), "Move down"),
                KeyAction("top", ("g", "HOME"), self.go_top, "Go to top"),
                KeyAction("bottom", ("G", "END"), self.go_bottom, "Go to bottom"),
                KeyAction("page_up", ("PAGE_UP",), lambda: self.page(-1), "Page up"),
                KeyAction("page_down", ("PAGE_DOWN",), lambda: self.page(1), "Page down"),
                KeyAction("collapse", ("LEFT", "h"), self.collapse, "Collapse section"),
                KeyAction("expand", ("RIGHT", "l"), self.expand, "Expand section"),
                KeyAction("theme", ("t",), self.cycle_theme, "Cycle color theme"),
                KeyAction("back", ("ESC",), self.back, "Close help / back to menu"),
            ]
        )
        keymap.bind_all(
            [
                KeyAction("quit", kb.quit, lambda: True, "Quit application"),
                KeyAction("help", kb.help, self.toggle_help, "Toggle this help screen"),
                KeyAction("refresh", kb.refresh, self.refresh, "Reload lists and re-run the last command"),
                KeyAction("switch_account", kb.switch_account, self.switch_account, "Switch to the next account"),
                KeyAction("toggle_view", kb.toggle_view, self.toggle_view, "Formatted / raw JSON view"),
            ]
        )
        return keymap

    # -- event entry points -------------------------------------------------

    def handle(self, event: Event) -> bool:
        if isinstance(event, KeyEvent):
            should_quit = self._on_key(event.code)
        elif isinstance(event, ResizeEvent):
            self._on_resize(event.width, event.height)
            should_quit = False
        elif isinstance(event, CommandFinishedEvent):
            self._apply_result(event.result, event.path)
            should_quit = False
        else:
            raise TypeError(f"unsupported event: {event!r}")
        self.state.dirty = True
        return should_quit

    def collect_finished(self) -> list[CommandFinishedEvent]:
        """Poll in-flight handles; return events for those that delivered."""
        events: list[CommandFinishedEvent] = []
        still_pending: list[tuple[CommandHandle, tuple[str, ...]]] = []
        for handle, path in self.pending:
            result = handle.poll()
            if result is not None:
                events.append(CommandFinishedEvent(result, path))
            elif not handle.closed:
                still_pending.append((handle, path))
        self.pending = still_pending
        return events

    def _on_key(self, key: str) -> bool:
        action = self.keymap.action_for(key)
        if action is None:
            return False
        if action.name == "quit":
            return True
        if self.state.help_visible:
            if action.name in {"help", "back"}:
                self.state.help_visible = False
            return False
        if not self.state.ready:
            return False
        return bool(self.keymap.dispatch(key))

    def _on_resize(self, width: int, height: int) -> None:
        state = self.state
        state.terminal_width = width
        state.terminal_height = height
        state.ready = validate(width, height)
        if not state.ready:
            state.status_message = TOO_SMALL_MESSAGE
            return
        if state.status_message == TOO_SMALL_MESSAGE:
            state.status_message = ""
        self._relayout()

    def _relayout(self) -> None:
        """Recompute pane sizes and re-clamp both scroll windows."""
        state = self.state
        dims = compute_dimensions(state.terminal_width, state.terminal_height)
        if dims is not None:
            state.dimensions = dims
        if state.dimensions is None:
            return
        self.viewport.resize(state.dimensions.content_width, state.dimensions.content_height)
        self.menu.scroll_into_view(state.dimensions.menu_height)

    def _menu_rows(self) -> int:
        if self.state.dimensions is None:
            return 1
        return self.state.dimensions.menu_height

    # -- actions ------------------------------------------------------------

    def _set_pane(self, pane: ActivePane) -> None:
        self.state.active_pane = pane
        self.theme_store.set_focus(pane is ActivePane.MENU)

    def toggle_pane(self) -> None:
        self._set_pane(ActivePane.CONTENT if self.state.menu_active else ActivePane.MENU)

    def back(self) -> None:
        if not self.state.menu_active:
            self._set_pane(ActivePane.MENU)

    def toggle_help(self) -> None:
        self.state.help_visible = not self.state.help_visible

    def cycle_theme(self) -> None:
        theme = self.theme_store.cycle_theme()
        self.state.status_message = f"Theme: {theme.name}"

    def activate(self) -> bool:
        if not self.state.menu_active:
            return False
        item = self.menu.selected_item
        if item is None or not item.selectable:
            return False
        if item.is_header:
            self._toggle_header(item)
            return False
        if item.binding == EXIT_BINDING:
            return True
        if not self.facade.is_bound(item):
            self.state.status_message = f"Selected: {item.title}"
            return False
        self._run(item)
        return False

    def _toggle_header(self, item: MenuItem) -> None:
        self.menu.toggle_expanded(self.menu.selected_idx)
        self.menu.rebuild()
        idx = self.menu.index_of(item.path)
        if idx is not None:
            self.menu.selected_idx = idx
        self._relayout()
        expanded = item.path in self.menu.expanded
        self.state.status_message = f"Menu {item.title} {'expanded' if expanded else 'collapsed'}"

    def collapse(self) -> None:
        """Collapse the selected header, or jump to the enclosing header."""
        if not self.state.menu_active:
            return
        item = self.menu.selected_item
        if item is None:
            return
        if item.is_header and item.expanded:
            self._toggle_header(item)
            return
        parent = self.menu.index_of(item.path[:-1]) if len(item.path) > 1 else None
        if parent is not None:
            self.menu.selected_idx = parent
            self.menu.scroll_into_view(self._menu_rows())

    def expand(self) -> None:
        if not self.state.menu_active:
            return
        item = self.menu.selected_item
        if item is not None and item.is_header and not item.expanded:
            self._toggle_header(item)

    def navigate(self, delta: int) -> None:
        if self.state.menu_active:
            if self.menu.move_selection(delta):
                self.menu.scroll_into_view(self._menu_rows())
            return
        self.viewport.scroll_by(delta)

    def page(self, direction: int) -> None:
        if self.state.menu_active:
            self.navigate(direction * max(1, self._menu_rows() - 1))
        elif direction < 0:
            self.viewport.page_up()
        else:
            self.viewport.page_down()

    def go_top(self) -> None:
        if self.state.menu_active:
            self.menu.select_first()
            self.menu.scroll_into_view(self._menu_rows())
            return
        self.viewport.scroll_to_top()
        self.state.status_message = "Navigated to top of content"

    def go_bottom(self) -> None:
        if self.state.menu_active:
            self.menu.select_last()
            self.menu.scroll_into_view(self._menu_rows())
            return
        self.viewport.scroll_to_bottom()
        self.state.status_message = "Navigated to bottom of content"

    # -- commands -----------------------------------------------------------

    def _run(self, item: MenuItem) -> None:
        if not self.async_commands:
            self._apply_result(self.facade.execute(item), item.path)
            return
        try:
            handle = self.facade.execute_async(item)
        except CommandBusy:
            self.state.status_message = f"{item.title} is already running"
            return
        self.pending.append((handle, item.path))
        self.state.status_message = f"Running: {item.title}..."

    def _apply_result(self, result: CommandResult, path: tuple[str, ...]) -> None:
        state = self.state
        state.content = result.output
        state.content_title = result.title
        state.raw_content = (
            highlight_json(result.payload, style=self.json_style, no_color=self.no_color)
            if result.payload is not None
            else ""
        )
        state.last_command = path
        if result.ok:
            state.status_message = f"Executed: {result.title}"
            self._set_pane(ActivePane.CONTENT)
        else:
            reason = failure_reason(result.error) if result.error is not None else "unknown error"
            state.status_message = f"Error: {reason}"
            state.view_mode = ViewMode.FORMATTED
        self._show_content()
        logger.debug("result_applied", title=result.title, state=result.state.value, duration=round(result.duration, 3))

    def _show_content(self, *, keep_position: bool = False) -> None:
        text = self.state.content
        if self.state.view_mode is ViewMode.RAW and self.state.raw_content:
            text = self.state.raw_content
        self.viewport.set_content(text, keep_position=keep_position)

    def toggle_view(self) -> None:
        state = self.state
        if not state.raw_content:
            state.status_message = "No raw data for the current content"
            return
        state.view_mode = ViewMode.RAW if state.view_mode is ViewMode.FORMATTED else ViewMode.FORMATTED
        self._show_content()
        state.status_message = f"View: {state.view_mode.value}"

    def refresh(self) -> None:
        """Reload dynamic children and re-run the last command if its row still exists."""
        self.menu.invalidate()
        self.menu.rebuild()
        self._relayout()
        self.state.status_message = "Refreshed"
        if self.state.last_command is None:
            return
        idx = self.menu.index_of(self.state.last_command)
        if idx is None:
            return
        item = self.menu.items[idx]
        if self.facade.is_bound(item):
            self._run(item)

    def switch_account(self) -> None:
        state = self.state
        if len(self.accounts) < 2 or self._connect_account is None:
            state.status_message = "Only one account configured"
            return
        current = self.accounts.index(state.account) if state.account in self.accounts else -1
        name = self.accounts[(current + 1) % len(self.accounts)]
        try:
            source = self._connect_account(name)
        except Exception as exc:
            logger.error("account_switch_failed", account=name, error=str(exc))
            state.status_message = f"Error: {failure_reason(exc)}"
            return
        self.facade.set_source(source)
        self.pending.clear()
        state.account = name
        state.content = ""
        state.raw_content = ""
        state.content_title = ""
        state.view_mode = ViewMode.FORMATTED
        state.last_command = None
        self.viewport.set_content("")
        self.menu.invalidate()
        self.menu.rebuild()
        self._relayout()
        self._set_pane(ActivePane.MENU)
        state.status_message = f"Switched to account {name}"
        logger.info("account_switched", account=name)


__all__ = ["EXIT_BINDING", "EventDispatcher"]

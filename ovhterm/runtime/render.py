"""Frame composition for the two-pane dashboard.

``compose_frame`` is pure: it turns UI state, the menu model, and the
viewport into one string of ANSI text. ``render_frame`` writes it to the
terminal in a single ``os.write``.
"""

from __future__ import annotations

import os
import sys

from ..ansi import display_width, fit_ansi_line
from ..layout import PaneDimensions
from ..menu import MenuTreeModel, format_menu_row
from ..ui_theme import ThemeStore
from .help import help_lines
from .keymap import KeyMap, key_label
from .state import WAITING_MESSAGE, UIState, ViewMode
from .viewport import ContentViewport

CLEAR_SCREEN = "\033[H\033[J"


def _keys(keymap: KeyMap | None, name: str, fallback: str) -> str:
    if keymap is None:
        return fallback
    keys = keymap.keys_for(name)
    return key_label(keys[0]) if keys else fallback


def status_hint(state: UIState, keymap: KeyMap | None = None) -> str:
    """Key reminder shown when no status message is pending."""
    hint = f"↑/k up • ↓/j down • g/G top/bottom • {_keys(keymap, 'help', '?')} help"
    if state.menu_active:
        return hint
    return f"{hint} • Tab to menu"


def build_status_line(left_text: str, right_text: str, width: int) -> str:
    """Left-aligned message and right-aligned info in exactly ``width`` cells."""
    if width <= 0:
        return ""
    right_w = display_width(right_text)
    if right_w >= width:
        return fit_ansi_line(right_text, width, reset="")
    left_limit = max(0, width - right_w - 1)
    left = fit_ansi_line(left_text, left_limit, reset="").rstrip()
    gap = " " * (width - display_width(left) - right_w)
    return f"{left}{gap}{right_text}"


def _box_top(title: str, inner_width: int, border: str, title_style: str, reset: str) -> str:
    """``╭─ Title ───╮`` spanning ``inner_width + 2`` columns."""
    label = f" {title} " if title else ""
    label = fit_ansi_line(label, max(0, inner_width - 2), reset="").rstrip(" ") + (" " if title else "")
    fill = "─" * max(0, inner_width - 1 - display_width(label))
    return f"{border}╭─{reset}{title_style}{label}{reset}{border}{fill}╮{reset}"


def _box_bottom(inner_width: int, border: str, reset: str) -> str:
    return f"{border}╰{'─' * inner_width}╯{reset}"


def _content_title(state: UIState, viewport: ContentViewport) -> str:
    title = state.content_title or "Content"
    if state.view_mode is ViewMode.RAW and state.raw_content:
        title = f"{title} [raw]"
    if len(viewport.lines) > viewport.height:
        title = f"{title} {viewport.scroll_percent()}%"
    return title


def compose_frame(
    state: UIState,
    menu: MenuTreeModel,
    viewport: ContentViewport,
    store: ThemeStore,
    keymap: KeyMap | None = None,
) -> str:
    """Build the complete screen for the current state."""
    if not state.ready or state.dimensions is None:
        return CLEAR_SCREEN + WAITING_MESSAGE

    dims: PaneDimensions = state.dimensions
    theme = store.theme
    reset = theme.reset
    menu_border = store.menu_border
    content_border = store.content_border
    menu_inner = dims.menu_width - 2
    content_inner = dims.content_width + 2

    menu_rows: list[str] = []
    for offset, item in enumerate(menu.visible_items(dims.menu_height)):
        selected = menu.start + offset == menu.selected_idx
        menu_rows.append(format_menu_row(item, dims.menu_text_width, selected=selected, theme=theme))
    menu_rows.extend([" " * dims.menu_text_width] * (dims.menu_height - len(menu_rows)))

    if state.help_visible:
        content_rows = help_lines(keymap, theme) if keymap is not None else []
        content_rows = content_rows[: dims.content_height]
        content_rows.extend([""] * (dims.content_height - len(content_rows)))
        content_title = "Help"
    else:
        content_rows = viewport.visible_lines()
        content_title = _content_title(state, viewport)

    out: list[str] = [CLEAR_SCREEN]
    out.append(
        " "
        + _box_top("Menu", menu_inner, menu_border, theme.title, reset)
        + "  "
        + _box_top(content_title, content_inner, content_border, theme.title, reset)
        + "\r\n"
    )
    text_style = theme.content_text
    for row in range(dims.content_height):
        menu_cell = menu_rows[row] if row < len(menu_rows) else " " * dims.menu_text_width
        content_cell = fit_ansi_line(f"{text_style}{content_rows[row]}", dims.content_width, reset=reset)
        out.append(
            f" {menu_border}│{reset} {menu_cell} {menu_border}│{reset}"
            f"  {content_border}│{reset} {content_cell} {content_border}│{reset}\r\n"
        )
    out.append(
        " "
        + _box_bottom(menu_inner, menu_border, reset)
        + "  "
        + _box_bottom(content_inner, content_border, reset)
        + "\r\n"
    )

    status_inner = dims.status_bar_width - 2
    message = state.status_message or status_hint(state, keymap)
    right = state.account
    status = build_status_line(message, right, status_inner - 2)
    border = theme.border_inactive
    out.append(f" {border}╭{'─' * status_inner}╮{reset}\r\n")
    out.append(f" {border}│{reset} {theme.status_text}{status}{reset} {border}│{reset}\r\n")
    out.append(f" {border}╰{'─' * status_inner}╯{reset}")
    return "".join(out)


def render_frame(frame: str, fd: int | None = None) -> None:
    """Write one composed frame to the terminal."""
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, frame.encode("utf-8", errors="replace"))


__all__ = ["CLEAR_SCREEN", "build_status_line", "compose_frame", "render_frame", "status_hint"]

"""Formatting helpers for menu rows."""

from __future__ import annotations

from ..ansi import clip_ansi_line, display_width
from ..ui_theme import DEFAULT_THEME, UITheme
from .types import ItemKind, MenuItem

INDENT = "  "


def row_prefix(item: MenuItem) -> str:
    """Return the indentation plus branch/expander marker for ``item``."""
    if item.kind is ItemKind.HEADER:
        return INDENT * item.indent_level + ("[-] " if item.expanded else "[+] ")
    if item.kind is ItemKind.TREE_ITEM:
        return INDENT * max(0, item.indent_level - 1) + "├─ "
    if item.kind is ItemKind.TREE_LAST_ITEM:
        return INDENT * max(0, item.indent_level - 1) + "└─ "
    if item.kind is ItemKind.NORMAL:
        return INDENT * item.indent_level
    raise ValueError(f"unhandled menu item kind: {item.kind}")


def format_menu_row(
    item: MenuItem,
    width: int,
    *,
    selected: bool = False,
    theme: UITheme | None = None,
) -> str:
    """Render one menu row as ANSI-styled text exactly ``width`` cells wide."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    prefix = row_prefix(item)
    plain = clip_ansi_line(prefix + item.title, width)
    pad = " " * max(0, width - display_width(plain))

    if selected and item.selectable:
        return f"{active_theme.menu_selected}{plain}{pad}{reset}"

    if item.error:
        color = active_theme.menu_error
    elif item.kind is ItemKind.HEADER:
        color = active_theme.menu_header
    else:
        color = active_theme.menu_item
    branch_len = len(prefix)
    head, tail = plain[:branch_len], plain[branch_len:]
    if item.kind in {ItemKind.TREE_ITEM, ItemKind.TREE_LAST_ITEM} and not item.error:
        return f"{active_theme.menu_branch}{head}{reset}{color}{tail}{reset}{pad}"
    return f"{color}{plain}{reset}{pad}"

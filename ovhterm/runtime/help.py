"""Help overlay content built from the live key map."""

from __future__ import annotations

from ..ui_theme import UITheme
from .keymap import KeyMap, key_label

HELP_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Navigation", ("up", "down", "top", "bottom", "page_up", "page_down", "toggle_pane")),
    ("Menu Actions", ("activate", "collapse", "expand")),
    ("Content", ("toggle_view", "refresh")),
    ("General", ("help", "switch_account", "theme", "back", "quit")),
)


def help_lines(keymap: KeyMap, theme: UITheme) -> list[str]:
    """Return styled help rows; actions with no remaining keys are omitted."""
    reset = theme.reset
    rows: list[tuple[str, str]] = []
    lines: list[str] = []
    for title, names in HELP_SECTIONS:
        entries = []
        for name in names:
            keys = keymap.keys_for(name)
            action = keymap.action(name)
            if not keys or action is None:
                continue
            entries.append(("/".join(key_label(k) for k in keys), action.description))
        if entries:
            rows.append((title, ""))
            rows.extend(entries)
            rows.append(("", ""))
    key_width = max((len(k) for k, d in rows if d), default=0)
    for key, desc in rows:
        if not desc:
            lines.append(f"{theme.help_heading}{key}{reset}" if key else "")
            continue
        lines.append(f"  {theme.help_key}{key.ljust(key_width)}{reset}  {desc}")
    lines.append(f"{theme.help_dim}Press {'/'.join(key_label(k) for k in keymap.keys_for('help'))} or Esc to close{reset}")
    return lines


__all__ = ["HELP_SECTIONS", "help_lines"]

"""UI theme palettes and the theme store used by the renderer.

Palettes are plain ANSI SGR prefixes. ``ThemeStore`` owns the active palette
and the focus-dependent border styles derived from it; the runtime loop is
its only writer.
"""

from __future__ import annotations

from dataclasses import dataclass

RESET = "\033[0m"
REVERSE = "\033[7m"


def _sgr(*parts: str) -> str:
    return "\033[" + ";".join(parts) + "m"


def _hex(color: str) -> str:
    """Truecolor foreground parameter for ``#rrggbb``."""
    red, green, blue = (int(color[i : i + 2], 16) for i in (1, 3, 5))
    return f"38;2;{red};{green};{blue}"


def _bg_hex(color: str) -> str:
    return "4" + _hex(color)[1:]


def _xterm(index: int) -> str:
    return f"38;5;{index}"


@dataclass(frozen=True)
class UITheme:
    """Named set of SGR prefixes, one per screen element."""

    name: str
    reset: str
    reverse: str
    title: str
    border_active: str
    border_inactive: str
    menu_header: str
    menu_item: str
    menu_branch: str
    menu_selected: str
    menu_error: str
    content_text: str
    content_error: str
    status_text: str
    help_heading: str
    help_key: str
    help_dim: str
    help_border: str


# Dashboard colors: green titles, grey text, yellow-on-blue selection.
_GREEN = "#7CE38B"
_ACTIVE_GREY = "#888888"
_INACTIVE_GREY = "#444444"

DEFAULT_THEME = UITheme(
    name="default",
    reset=RESET,
    reverse=REVERSE,
    title=_sgr("1", _hex(_GREEN)),
    border_active=_sgr(_hex(_ACTIVE_GREY)),
    border_inactive=_sgr(_hex(_INACTIVE_GREY)),
    menu_header=_sgr("1", _xterm(252)),
    menu_item=_sgr(_xterm(245)),
    menu_branch=_sgr(_xterm(241)),
    menu_selected=_sgr("1", _hex("#FFFF22"), _bg_hex("#2D79C7")),
    menu_error=_sgr(_xterm(203)),
    content_text=_sgr(_xterm(252)),
    content_error=_sgr("31"),
    status_text=_sgr(_xterm(245)),
    help_heading=_sgr("1", _hex(_GREEN)),
    help_key=_sgr(_xterm(229)),
    help_dim=_sgr("2", _xterm(250)),
    help_border=_sgr(_hex(_ACTIVE_GREY)),
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset=RESET,
    reverse=REVERSE,
    title=_sgr("1", _xterm(45)),
    border_active=_sgr(_xterm(39)),
    border_inactive=_sgr("2", _xterm(31)),
    menu_header=_sgr("1", _xterm(117)),
    menu_item=_sgr(_xterm(153)),
    menu_branch=_sgr(_xterm(73)),
    menu_selected=_sgr("1", "38;5;16", "48;5;45"),
    menu_error=_sgr(_xterm(215)),
    content_text=_sgr(_xterm(252)),
    content_error=_sgr(_xterm(215)),
    status_text=_sgr("2", _xterm(110)),
    help_heading=_sgr("1", _xterm(45)),
    help_key=_sgr(_xterm(153)),
    help_dim=_sgr("2", _xterm(110)),
    help_border=_sgr(_xterm(39)),
)

# Only reverse video survives --no-color, so the cursor row stays visible.
PLAIN_THEME = UITheme(
    "plain", "", REVERSE, "", "", "", "", "", "", REVERSE, "", "", "", "", "", "", "", ""
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME)}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and ``ui.theme``, sorted."""
    return tuple(sorted(_THEMES))


def normalize_theme_name(name: str | None) -> str:
    """Case-insensitive lookup; unknown or empty names mean ``default``."""
    key = (name or "").strip().lower()
    return key if key in _THEMES else DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    return PLAIN_THEME if no_color else _THEMES[normalize_theme_name(name)]


class ThemeStore:
    """Active palette plus styles derived from which pane has focus.

    Instances are passed to the renderer explicitly so tests never share
    style state.
    """

    def __init__(self, theme: UITheme, *, menu_focused: bool = True) -> None:
        self._theme = theme
        self._menu_focused = menu_focused
        self.menu_border = ""
        self.content_border = ""
        self.recompute()

    @property
    def theme(self) -> UITheme:
        return self._theme

    @property
    def menu_focused(self) -> bool:
        return self._menu_focused

    def recompute(self) -> None:
        """Re-derive border emphasis from the palette and focus."""
        if self._menu_focused:
            self.menu_border = self._theme.border_active
            self.content_border = self._theme.border_inactive
        else:
            self.menu_border = self._theme.border_inactive
            self.content_border = self._theme.border_active

    def set_focus(self, menu_focused: bool) -> None:
        if menu_focused == self._menu_focused:
            return
        self._menu_focused = menu_focused
        self.recompute()

    def switch_theme(self, theme: UITheme) -> None:
        self._theme = theme
        self.recompute()

    def cycle_theme(self) -> UITheme:
        """Advance to the next selectable palette and return it.

        The plain palette is sticky: ``--no-color`` sessions never cycle.
        """
        if self._theme.name == PLAIN_THEME.name:
            return self._theme
        names = available_theme_names()
        try:
            idx = names.index(self._theme.name)
        except ValueError:
            idx = -1
        self.switch_theme(_THEMES[names[(idx + 1) % len(names)]])
        return self._theme


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "ThemeStore",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]

from __future__ import annotations

import unittest

from ovhterm.ui_theme import (
    DEFAULT_THEME,
    OCEAN_THEME,
    PLAIN_THEME,
    ThemeStore,
    available_theme_names,
    normalize_theme_name,
    resolve_theme,
)


class ThemeResolutionTests(unittest.TestCase):
    def test_names(self) -> None:
        self.assertEqual(available_theme_names(), ("default", "ocean"))
        self.assertEqual(normalize_theme_name(" OCEAN "), "ocean")
        self.assertEqual(normalize_theme_name("missing"), "default")
        self.assertEqual(normalize_theme_name(None), "default")

    def test_no_color_always_plain(self) -> None:
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)
        self.assertIs(resolve_theme("ocean"), OCEAN_THEME)


class ThemeStoreTests(unittest.TestCase):
    def test_focus_moves_border_emphasis(self) -> None:
        store = ThemeStore(DEFAULT_THEME)
        self.assertEqual(store.menu_border, DEFAULT_THEME.border_active)
        self.assertEqual(store.content_border, DEFAULT_THEME.border_inactive)
        store.set_focus(False)
        self.assertFalse(store.menu_focused)
        self.assertEqual(store.menu_border, DEFAULT_THEME.border_inactive)
        self.assertEqual(store.content_border, DEFAULT_THEME.border_active)

    def test_switch_keeps_focus(self) -> None:
        store = ThemeStore(DEFAULT_THEME, menu_focused=False)
        store.switch_theme(OCEAN_THEME)
        self.assertEqual(store.content_border, OCEAN_THEME.border_active)

    def test_cycle_wraps_and_plain_is_sticky(self) -> None:
        store = ThemeStore(OCEAN_THEME)
        self.assertIs(store.cycle_theme(), DEFAULT_THEME)
        self.assertIs(store.cycle_theme(), OCEAN_THEME)
        plain = ThemeStore(PLAIN_THEME)
        self.assertIs(plain.cycle_theme(), PLAIN_THEME)


if __name__ == "__main__":
    unittest.main()

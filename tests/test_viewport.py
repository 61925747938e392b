from __future__ import annotations

import unittest

from ovhterm.runtime import ContentViewport


def _text(count: int) -> str:
    return "\n".join(f"row {n}" for n in range(count))


class ContentViewportTests(unittest.TestCase):
    def test_scrolling_is_clamped(self) -> None:
        viewport = ContentViewport(20, 5)
        viewport.set_content(_text(12))
        self.assertEqual(viewport.max_start, 7)
        self.assertFalse(viewport.scroll_by(-1))
        self.assertTrue(viewport.scroll_by(100))
        self.assertEqual(viewport.start, 7)
        self.assertEqual(viewport.visible_lines()[-1], "row 11")
        self.assertTrue(viewport.scroll_to_top())
        self.assertEqual(viewport.start, 0)

    def test_paging_overlaps_one_row(self) -> None:
        viewport = ContentViewport(20, 5)
        viewport.set_content(_text(30))
        viewport.page_down()
        self.assertEqual(viewport.start, 4)
        viewport.page_up()
        self.assertEqual(viewport.start, 0)

    def test_short_content_is_padded(self) -> None:
        viewport = ContentViewport(20, 4)
        viewport.set_content("only")
        self.assertEqual(viewport.visible_lines(), ["only", "", "", ""])
        self.assertEqual(viewport.scroll_percent(), 100)

    def test_width_change_rewraps(self) -> None:
        viewport = ContentViewport(10, 3)
        viewport.set_content("x" * 25)
        self.assertEqual(len(viewport.lines), 3)
        self.assertTrue(viewport.resize(5, 3))
        self.assertEqual(len(viewport.lines), 5)
        self.assertFalse(viewport.resize(5, 3))

    def test_shrinking_content_reclamps_offset(self) -> None:
        viewport = ContentViewport(20, 5)
        viewport.set_content(_text(30))
        viewport.scroll_to_bottom()
        viewport.set_content(_text(7), keep_position=True)
        self.assertEqual(viewport.start, 2)
        viewport.set_content(_text(30))
        self.assertEqual(viewport.start, 0)


if __name__ == "__main__":
    unittest.main()

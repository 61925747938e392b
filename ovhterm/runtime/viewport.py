"""Scrollable content pane."""

from __future__ import annotations

from ..ansi import build_screen_lines


class ContentViewport:
    """Wrapped display rows of the current content plus a scroll offset.

    Text is re-wrapped whenever the width changes; the offset is always
    clamped so the last page stays full.
    """

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.text = ""
        self.lines: list[str] = [""]
        self.start = 0

    @property
    def max_start(self) -> int:
        return max(0, len(self.lines) - self.height)

    def set_content(self, text: str, *, keep_position: bool = False) -> None:
        self.text = text
        self.lines = build_screen_lines(text, self.width)
        if not keep_position:
            self.start = 0
        self.start = min(self.start, self.max_start)

    def resize(self, width: int, height: int) -> bool:
        """Apply new pane dimensions; return whether anything changed."""
        width = max(1, width)
        height = max(1, height)
        if (width, height) == (self.width, self.height):
            return False
        rewrap = width != self.width
        self.width = width
        self.height = height
        if rewrap:
            self.lines = build_screen_lines(self.text, self.width)
        self.start = min(self.start, self.max_start)
        return True

    def scroll_by(self, delta: int) -> bool:
        target = max(0, min(self.start + delta, self.max_start))
        if target == self.start:
            return False
        self.start = target
        return True

    def scroll_to_top(self) -> bool:
        return self.scroll_by(-self.start)

    def scroll_to_bottom(self) -> bool:
        return self.scroll_by(self.max_start - self.start)

    def page_down(self) -> bool:
        return self.scroll_by(max(1, self.height - 1))

    def page_up(self) -> bool:
        return self.scroll_by(-max(1, self.height - 1))

    def visible_lines(self) -> list[str]:
        window = self.lines[self.start : self.start + self.height]
        return window + [""] * (self.height - len(window))

    def scroll_percent(self) -> int:
        if self.max_start == 0:
            return 100
        return int(round(100 * self.start / self.max_start))


__all__ = ["ContentViewport"]

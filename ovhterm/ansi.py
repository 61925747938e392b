"""ANSI-aware helpers for fitting styled text into fixed-width cells.

Every helper walks the text as a stream of segments: an escape sequence
(zero columns, always kept) or one printable character whose width depends
on the column it lands in.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
SGR_RESET = "\x1b[0m"
TAB_STOP = 8


def cell_width(ch: str, col: int) -> int:
    """Columns ``ch`` occupies when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(chunk, is_escape)`` pairs covering ``text`` in order."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos : match.start()]:
            yield ch, False
        yield match.group(0), True
        pos = match.end()
    for ch in text[pos:]:
        yield ch, False


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += cell_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Longest prefix of ``text`` fitting in ``max_cols`` columns.

    Escapes up to the cut are kept. Tabs become spaces so the result
    measures the same everywhere.
    """
    if max_cols <= 0:
        return ""
    kept: list[str] = []
    col = 0
    for chunk, is_escape in _segments(text):
        if is_escape:
            kept.append(chunk)
            continue
        width = cell_width(chunk, col)
        if col + width > max_cols:
            break
        kept.append(" " * width if chunk == "\t" else chunk)
        col += width
    return "".join(kept)


def fit_ansi_line(text: str, width: int, reset: str = SGR_RESET) -> str:
    """Clip ``text`` to ``width`` columns, then pad it out with spaces.

    Styled text gets ``reset`` before the padding.
    """
    if width <= 0:
        return ""
    clipped = clip_ansi_line(text, width)
    padding = " " * (width - display_width(clipped))
    if reset and "\x1b" in clipped:
        return clipped + reset + padding
    return clipped + padding


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Break one styled line into rows no wider than ``width``.

    Each continuation row starts with the SGR state in effect at the break.
    """
    if width <= 0 or not text:
        return [""]
    rows: list[str] = []
    row: list[str] = []
    col = 0
    style = ""
    for chunk, is_escape in _segments(text):
        if is_escape:
            row.append(chunk)
            if chunk.endswith("m"):
                style = "" if chunk in (SGR_RESET, "\x1b[m") else style + chunk
            continue
        cells = cell_width(chunk, col)
        if col and col + cells > width:
            rows.append("".join(row))
            row = [style] if style else []
            col = 0
            cells = cell_width(chunk, col)
        row.append(" " * cells if chunk == "\t" else chunk)
        col += cells
    rows.append("".join(row))
    return rows


def build_screen_lines(text: str, width: int, wrap: bool = True) -> list[str]:
    """Display rows for ``text`` in a pane ``width`` columns wide."""
    source = text.splitlines() or [""]
    if not wrap:
        return source
    return [row for line in source for row in wrap_ansi_line(line, width)]

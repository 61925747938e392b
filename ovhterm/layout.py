"""Pane geometry derived from terminal size.

Frame layout, left to right: one margin column, the menu box, a two-column
gap, the bordered and padded content box, two margin columns. Top to bottom:
the pane boxes (title/border rows around the panes) and a three-row status
bar box.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

MIN_WIDTH = 80
MIN_HEIGHT = 20

MENU_BASE_WIDTH = 32
HORIZONTAL_SPACE = 9
STATUS_BAR_SPACE = 3
UI_ELEMENTS_SPACE = 2


@dataclass(frozen=True)
class PaneDimensions:
    """Sizes for every pane, all strictly positive.

    ``menu_width`` and ``status_bar_width`` are outer box widths;
    ``content_width`` and the heights are inner text areas.
    """

    menu_width: int
    menu_height: int
    content_width: int
    content_height: int
    status_bar_width: int

    @property
    def menu_text_width(self) -> int:
        """Menu box width minus borders and one padding column each side."""
        return self.menu_width - 4


def validate(width: int, height: int) -> bool:
    """Return whether the terminal is big enough to lay out panes."""
    return width >= MIN_WIDTH and height >= MIN_HEIGHT


def compute_dimensions(width: int, height: int) -> PaneDimensions | None:
    """Compute pane sizes, or ``None`` when the content area would be empty.

    Callers keep their previous dimensions on ``None``.
    """
    content_width = width - MENU_BASE_WIDTH - HORIZONTAL_SPACE
    content_height = height - STATUS_BAR_SPACE - UI_ELEMENTS_SPACE
    logger.debug(
        "layout_recomputed",
        width=width,
        height=height,
        content_width=content_width,
        content_height=content_height,
    )
    if content_width <= 0 or content_height <= 0:
        return None
    return PaneDimensions(
        menu_width=MENU_BASE_WIDTH,
        menu_height=content_height,
        content_width=content_width,
        content_height=content_height,
        # Spans both pane boxes and the gap between them.
        status_bar_width=MENU_BASE_WIDTH + 2 + content_width + 4,
    )


__all__ = [
    "HORIZONTAL_SPACE",
    "MENU_BASE_WIDTH",
    "MIN_HEIGHT",
    "MIN_WIDTH",
    "PaneDimensions",
    "STATUS_BAR_SPACE",
    "UI_ELEMENTS_SPACE",
    "compute_dimensions",
    "validate",
]

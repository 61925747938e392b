"""Expandable menu tree with a flattened, cursor-addressable row list.

``MenuTreeModel`` is the only owner of the flattened rows. Expansion state
is a set of header paths; ``rebuild`` re-derives the rows from it, loading
dynamic children on first expansion and caching them until the header
collapses or ``invalidate`` is called.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog

from .build import build_menu_entries
from .types import MenuItem, MenuNode, ResourceEntry

logger = structlog.get_logger(__name__)

ChildrenLoader = Callable[[str], list[ResourceEntry]]


def _is_within(path: tuple[str, ...], ancestor: tuple[str, ...]) -> bool:
    return path[: len(ancestor)] == ancestor


class MenuTreeModel:
    """Menu rows, expansion state, and the selection cursor.

    With ``accordion`` enabled, expanding a top-level header collapses every
    other top-level header. Nested headers always toggle independently.
    """

    def __init__(
        self,
        nodes: Sequence[MenuNode],
        load_children: ChildrenLoader | None = None,
        *,
        accordion: bool = True,
    ) -> None:
        self.nodes = tuple(nodes)
        self.accordion = accordion
        self._load_children = load_children
        self.expanded: set[tuple[str, ...]] = set()
        self._children_cache: dict[tuple[str, ...], list[ResourceEntry] | Exception] = {}
        self.items: list[MenuItem] = []
        self.selected_idx = 0
        self.start = 0
        self.rebuild()

    @property
    def selected_item(self) -> MenuItem | None:
        if 0 <= self.selected_idx < len(self.items):
            return self.items[self.selected_idx]
        return None

    def index_of(self, path: tuple[str, ...]) -> int | None:
        for idx, item in enumerate(self.items):
            if item.path == path:
                return idx
        return None

    def toggle_expanded(self, index: int) -> None:
        """Flip expansion of the header at ``index``; callers then ``rebuild``.

        Out-of-range indexes and non-header rows are ignored.
        """
        if index < 0 or index >= len(self.items):
            return
        item = self.items[index]
        if not item.is_header:
            return
        if item.path in self.expanded:
            self._collapse(item.path)
            return
        if self.accordion and len(item.path) == 1:
            for other in [p for p in self.expanded if len(p) == 1 and p != item.path]:
                self._collapse(other)
        self.expanded.add(item.path)

    def _collapse(self, path: tuple[str, ...]) -> None:
        """Collapse ``path`` and drop its subtree's expansion and children."""
        self.expanded = {p for p in self.expanded if not _is_within(p, path)}
        for cached in [p for p in self._children_cache if _is_within(p, path)]:
            del self._children_cache[cached]

    def invalidate(self, path: tuple[str, ...] | None = None) -> None:
        """Forget loaded children (all, or under ``path``) so the next rebuild refetches."""
        if path is None:
            self._children_cache.clear()
            return
        for cached in [p for p in self._children_cache if _is_within(p, path)]:
            del self._children_cache[cached]

    def _children_for(self, node: MenuNode, path: tuple[str, ...]) -> list[ResourceEntry] | Exception:
        cached = self._children_cache.get(path)
        if cached is not None:
            return cached
        if self._load_children is None or node.loader is None:
            loaded: list[ResourceEntry] | Exception = []
        else:
            try:
                loaded = list(self._load_children(node.loader))
            except Exception as exc:
                logger.warning("menu_children_failed", header=node.title, loader=node.loader, error=str(exc))
                loaded = exc
            else:
                logger.debug("menu_children_loaded", header=node.title, count=len(loaded))
        self._children_cache[path] = loaded
        return loaded

    def rebuild(self) -> None:
        """Recompute rows from expansion state, keeping the selection if possible.

        The selection is matched by path, then by title; otherwise the cursor
        clamps to the last valid index.
        """
        previous = self.selected_item
        previous_idx = self.selected_idx
        self.items = build_menu_entries(self.nodes, self.expanded, self._children_for)

        target: int | None = None
        if previous is not None:
            target = self.index_of(previous.path)
            if target is None:
                target = next((i for i, item in enumerate(self.items) if item.title == previous.title), None)
        if target is None:
            target = max(0, min(previous_idx, len(self.items) - 1))
        self.selected_idx = target
        if self.items and not self.items[target].selectable:
            self._settle_on_selectable()

    def _settle_on_selectable(self) -> None:
        for step in (-1, 1):
            idx = self.selected_idx
            while 0 <= idx < len(self.items):
                if self.items[idx].selectable:
                    self.selected_idx = idx
                    return
                idx += step

    def move_selection(self, delta: int) -> bool:
        """Move the cursor ``delta`` selectable rows; return whether it moved."""
        if not self.items or delta == 0:
            return False
        step = 1 if delta > 0 else -1
        idx = self.selected_idx
        remaining = abs(delta)
        landed = idx
        while remaining > 0:
            idx += step
            if idx < 0 or idx >= len(self.items):
                break
            if self.items[idx].selectable:
                landed = idx
                remaining -= 1
        if landed == self.selected_idx:
            return False
        self.selected_idx = landed
        return True

    def select_first(self) -> bool:
        return self._select_edge(range(len(self.items)))

    def select_last(self) -> bool:
        return self._select_edge(range(len(self.items) - 1, -1, -1))

    def _select_edge(self, indexes: range) -> bool:
        for idx in indexes:
            if self.items[idx].selectable:
                changed = idx != self.selected_idx
                self.selected_idx = idx
                return changed
        return False

    def scroll_into_view(self, visible_rows: int) -> bool:
        """Adjust the first visible row so the cursor stays on screen."""
        rows = max(1, visible_rows)
        prev_start = self.start
        if self.selected_idx < self.start:
            self.start = self.selected_idx
        elif self.selected_idx >= self.start + rows:
            self.start = self.selected_idx - rows + 1
        self.start = max(0, min(self.start, max(0, len(self.items) - rows)))
        return self.start != prev_start

    def visible_items(self, visible_rows: int) -> list[MenuItem]:
        return self.items[self.start : self.start + max(0, visible_rows)]

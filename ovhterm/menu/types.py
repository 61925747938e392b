"""Menu datatypes shared across the tree model, renderer, and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ItemKind(Enum):
    """Row variant; decides the row prefix and how activation behaves."""

    NORMAL = "normal"
    HEADER = "header"
    TREE_ITEM = "tree_item"
    TREE_LAST_ITEM = "tree_last_item"


class Selectable(Protocol):
    @property
    def title(self) -> str: ...

    @property
    def selectable(self) -> bool: ...


class Expandable(Protocol):
    @property
    def expanded(self) -> bool: ...

    @property
    def is_header(self) -> bool: ...


class Scrollable(Protocol):
    def scroll_by(self, delta: int) -> bool: ...

    def scroll_to_top(self) -> bool: ...

    def scroll_to_bottom(self) -> bool: ...


@dataclass(frozen=True)
class MenuItem:
    """One row of the flattened menu list.

    ``path`` holds the titles from the top level down to this row and is
    the identity used for expansion state and selection restore.
    """

    title: str
    kind: ItemKind
    path: tuple[str, ...]
    description: str = ""
    expanded: bool = False
    indent_level: int = 0
    selectable: bool = True
    binding: str | None = None
    resource_id: str | None = None
    error: bool = False

    @property
    def is_header(self) -> bool:
        return self.kind is ItemKind.HEADER

    @property
    def is_leaf(self) -> bool:
        return self.kind is not ItemKind.HEADER


@dataclass(frozen=True)
class MenuNode:
    """Declarative menu entry.

    A node is a header when it has static ``children`` or a ``loader`` key
    naming a dynamic list operation; otherwise it is a leaf whose
    ``binding`` (default: its title) selects the bound operation.
    """

    title: str
    description: str = ""
    children: tuple[MenuNode, ...] = ()
    loader: str | None = None
    binding: str | None = None

    @property
    def is_header(self) -> bool:
        return bool(self.children) or self.loader is not None


@dataclass(frozen=True)
class ResourceEntry:
    """One dynamically listed remote resource."""

    resource_id: str
    display_name: str
    binding: str
    description: str = ""

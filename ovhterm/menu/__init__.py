"""Menu tree model: declarative nodes, flattened rows, and row formatting."""

from __future__ import annotations

from .build import (
    EMPTY_CHILDREN_TITLE,
    build_menu_entries,
    default_menu_nodes,
    failure_reason,
    sort_resources,
)
from .model import MenuTreeModel
from .rendering import format_menu_row, row_prefix
from .types import (
    Expandable,
    ItemKind,
    MenuItem,
    MenuNode,
    ResourceEntry,
    Scrollable,
    Selectable,
)

__all__ = [
    "EMPTY_CHILDREN_TITLE",
    "Expandable",
    "ItemKind",
    "MenuItem",
    "MenuNode",
    "MenuTreeModel",
    "ResourceEntry",
    "Scrollable",
    "Selectable",
    "build_menu_entries",
    "default_menu_nodes",
    "failure_reason",
    "format_menu_row",
    "row_prefix",
    "sort_resources",
]

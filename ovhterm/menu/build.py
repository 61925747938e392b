"""Menu-entry construction from declarative nodes and expansion state."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence

from ..errors import OvhTermError
from .types import ItemKind, MenuItem, MenuNode, ResourceEntry

EMPTY_CHILDREN_TITLE = "(no entries)"
ERROR_ROW_MARKER = "<error>"

ChildrenProvider = Callable[[MenuNode, tuple[str, ...]], "list[ResourceEntry] | Exception"]


def default_menu_nodes() -> tuple[MenuNode, ...]:
    """Return the static top-level menu."""
    return (
        MenuNode(
            "Account Information",
            children=(
                MenuNode("My information", "View and manage my current information"),
                MenuNode("API information", "Information about applications and credentials"),
            ),
        ),
        MenuNode(
            "Bare Metal Cloud",
            children=(
                MenuNode("Dedicated Servers", "View and manage servers", loader="dedicated_servers"),
                MenuNode("Virtual Private Servers", "View VPS instances", loader="vps"),
            ),
        ),
        MenuNode(
            "Web Cloud",
            children=(
                MenuNode("Domain names", "View and manage domain names", loader="domains"),
                MenuNode("Hosting plans", "View web hosting plans", loader="hosting"),
            ),
        ),
        MenuNode("Exit", "Exit the application", binding="exit"),
    )


def sort_resources(entries: Sequence[ResourceEntry]) -> list[ResourceEntry]:
    """Order by display name, ties broken by remote identifier."""
    return sorted(entries, key=lambda entry: (entry.display_name.casefold(), entry.display_name, entry.resource_id))


def failure_reason(exc: Exception) -> str:
    if isinstance(exc, OvhTermError):
        return exc.user_message()
    return str(exc) or exc.__class__.__name__


def _leaf_kind(depth: int, is_last: bool) -> ItemKind:
    if depth == 0:
        return ItemKind.NORMAL
    return ItemKind.TREE_LAST_ITEM if is_last else ItemKind.TREE_ITEM


def build_menu_entries(
    nodes: Sequence[MenuNode],
    expanded: set[tuple[str, ...]],
    children_for: ChildrenProvider,
) -> list[MenuItem]:
    """Flatten ``nodes`` in pre-order, descending only into expanded headers.

    ``children_for`` returns the dynamic children of a loader header, or
    the exception that loading raised; a failure becomes one synthetic,
    non-selectable error row.
    """
    entries: list[MenuItem] = []

    def walk(level: Sequence[MenuNode], parent: tuple[str, ...], depth: int) -> None:
        """Depth-first traversal appending visible rows."""
        for idx, node in enumerate(level):
            path = parent + (node.title,)
            is_last = idx == len(level) - 1
            if not node.is_header:
                entries.append(
                    MenuItem(
                        node.title,
                        _leaf_kind(depth, is_last),
                        path,
                        description=node.description,
                        indent_level=depth,
                        binding=node.binding or node.title,
                    )
                )
                continue

            is_expanded = path in expanded
            entries.append(
                MenuItem(
                    node.title,
                    ItemKind.HEADER,
                    path,
                    description=node.description,
                    expanded=is_expanded,
                    indent_level=depth,
                )
            )
            if not is_expanded:
                continue
            if node.children:
                walk(node.children, path, depth + 1)
            if node.loader is not None:
                append_dynamic(node, path, depth + 1)

    def append_dynamic(node: MenuNode, path: tuple[str, ...], depth: int) -> None:
        loaded = children_for(node, path)
        if isinstance(loaded, Exception):
            entries.append(
                MenuItem(
                    f"Error: {failure_reason(loaded)}",
                    ItemKind.TREE_LAST_ITEM,
                    path + (ERROR_ROW_MARKER,),
                    indent_level=depth,
                    selectable=False,
                    error=True,
                )
            )
            return
        if not loaded:
            entries.append(
                MenuItem(
                    EMPTY_CHILDREN_TITLE,
                    ItemKind.TREE_LAST_ITEM,
                    path + (EMPTY_CHILDREN_TITLE,),
                    indent_level=depth,
                    selectable=False,
                )
            )
            return
        ordered = sort_resources(loaded)
        name_counts = Counter(resource.display_name for resource in ordered)
        for idx, resource in enumerate(ordered):
            title = resource.display_name
            if name_counts[title] > 1:
                title = f"{title} ({resource.resource_id})"
            entries.append(
                MenuItem(
                    title,
                    ItemKind.TREE_LAST_ITEM if idx == len(ordered) - 1 else ItemKind.TREE_ITEM,
                    path + (resource.resource_id,),
                    description=resource.description,
                    indent_level=depth,
                    binding=resource.binding,
                    resource_id=resource.resource_id,
                )
            )

    walk(nodes, (), 0)
    return entries

"""Binding tables mapping menu keys to remote operations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..menu.types import ResourceEntry
from ..remote.source import RemoteDataSource


@dataclass(frozen=True)
class CommandOutput:
    """What a bound operation returns: display text plus the decoded payload."""

    text: str
    payload: Any = None


@dataclass(frozen=True)
class BoundOperation:
    """Operation behind one binding key.

    ``run`` receives the active data source and the selected row's
    ``resource_id`` (``None`` for static leaves).
    """

    name: str
    run: Callable[[RemoteDataSource, str | None], CommandOutput]
    read_only: bool = True


@dataclass(frozen=True)
class ListOperation:
    """Read-only operation producing dynamic menu children."""

    name: str
    run: Callable[[RemoteDataSource], list[ResourceEntry]]


class CommandRegistry:
    """Binding key -> operation tables for leaves and dynamic headers.

    Leaf keys default to the menu title; list keys name a header's loader.
    """

    def __init__(self) -> None:
        self._operations: dict[str, BoundOperation] = {}
        self._lists: dict[str, ListOperation] = {}

    def register(self, key: str, operation: BoundOperation) -> CommandRegistry:
        if key in self._operations:
            raise ValueError(f"binding already registered: {key}")
        self._operations[key] = operation
        return self

    def register_list(self, key: str, operation: ListOperation) -> CommandRegistry:
        if key in self._lists:
            raise ValueError(f"list operation already registered: {key}")
        self._lists[key] = operation
        return self

    def resolve(self, key: str | None) -> BoundOperation | None:
        if key is None:
            return None
        return self._operations.get(key)

    def resolve_list(self, key: str) -> ListOperation | None:
        return self._lists.get(key)

    def keys(self) -> list[str]:
        return sorted(self._operations)

    def __contains__(self, key: object) -> bool:
        return key in self._operations


__all__ = [
    "BoundOperation",
    "CommandOutput",
    "CommandRegistry",
    "ListOperation",
]

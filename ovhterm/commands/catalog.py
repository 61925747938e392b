"""Default bindings from menu entries to operations."""

from __future__ import annotations

from .account import ACCOUNT_OPERATION
from .api_info import API_INFO_OPERATION
from .registry import CommandRegistry
from .resources import RESOURCE_KINDS, detail_operation, list_operation


def default_registry() -> CommandRegistry:
    """Register the account commands and every resource family.

    Static leaves bind by menu title; dynamic rows bind by ``<kind>:detail``.
    """
    registry = CommandRegistry()
    registry.register("My information", ACCOUNT_OPERATION)
    registry.register("API information", API_INFO_OPERATION)
    for kind in RESOURCE_KINDS:
        registry.register(kind.binding, detail_operation(kind))
        registry.register_list(kind.key, list_operation(kind))
    return registry


__all__ = ["default_registry"]

"""Command layer: binding registry, execution facade, and bound operations."""

from __future__ import annotations

from .catalog import default_registry
from .facade import (
    CommandBusy,
    CommandError,
    CommandFacade,
    CommandHandle,
    CommandOptions,
    CommandResult,
    CommandState,
    CommandTimeout,
    RetryPolicy,
    UnboundCommandError,
)
from .registry import BoundOperation, CommandOutput, CommandRegistry, ListOperation

__all__ = [
    "BoundOperation",
    "CommandBusy",
    "CommandError",
    "CommandFacade",
    "CommandHandle",
    "CommandOptions",
    "CommandOutput",
    "CommandRegistry",
    "CommandResult",
    "CommandState",
    "CommandTimeout",
    "ListOperation",
    "RetryPolicy",
    "UnboundCommandError",
    "default_registry",
]

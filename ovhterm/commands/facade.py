"""Bridge from menu selection to deadline-bounded remote operations.

Every invocation runs on a daemon worker thread. The synchronous path waits
on a one-slot queue up to the configured deadline; the asynchronous path
hands the caller a ``CommandHandle`` that yields exactly one result. Workers
never touch UI state, and a late result after a timeout is dropped.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from ..errors import OvhTermError
from ..menu.build import failure_reason
from ..menu.types import MenuItem, ResourceEntry
from ..remote.source import RemoteDataSource
from .registry import BoundOperation, CommandRegistry

logger = structlog.get_logger(__name__)

MAX_TIMEOUT_SECONDS = 30.0
DEFAULT_TIMEOUT_SECONDS = 15.0


class CommandState(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class CommandError(OvhTermError):
    """A bound operation could not produce a result."""


class CommandTimeout(CommandError):
    def __init__(self, title: str, timeout: float) -> None:
        super().__init__(f"{title} timed out after {timeout:g}s")
        self.title = title
        self.timeout = timeout

    def user_message(self) -> str:
        return f"Command timed out after {self.timeout:g} seconds"


class UnboundCommandError(CommandError):
    def __init__(self, key: str | None) -> None:
        super().__init__(f"no operation bound to {key!r}")
        self.key = key


class CommandBusy(CommandError):
    def __init__(self, title: str) -> None:
        super().__init__(f"{title} is already running")
        self.title = title


@dataclass(frozen=True)
class RetryPolicy:
    """Retry schedule for read-only operations.

    ``attempts`` counts the first try. With ``backoff`` the delay doubles per
    retry, capped at ``max_delay``.
    """

    attempts: int = 1
    delay: float = 0.5
    backoff: bool = True
    max_delay: float = 5.0

    def delay_for(self, retry_number: int) -> float:
        if not self.backoff:
            return min(self.delay, self.max_delay)
        return min(self.max_delay, self.delay * (2 ** max(0, retry_number - 1)))


@dataclass(frozen=True)
class CommandOptions:
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @property
    def effective_timeout(self) -> float:
        """Timeout clamped to ``(0, MAX_TIMEOUT_SECONDS]``."""
        if self.timeout <= 0:
            return MAX_TIMEOUT_SECONDS
        return min(self.timeout, MAX_TIMEOUT_SECONDS)


@dataclass(frozen=True)
class CommandResult:
    title: str
    output: str
    error: Exception | None
    duration: float
    state: CommandState
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.state is CommandState.COMPLETED


class CommandHandle:
    """One-shot receiver for an asynchronous invocation."""

    def __init__(self, title: str, binding_key: tuple[str, str | None]) -> None:
        self.title = title
        self.binding_key = binding_key
        self._queue: queue.Queue[CommandResult] = queue.Queue(maxsize=1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, result: CommandResult) -> None:
        """Called once by the worker; a second delivery is dropped."""
        try:
            self._queue.put_nowait(result)
        except queue.Full:
            logger.warning("command_duplicate_delivery", title=self.title)

    def poll(self) -> CommandResult | None:
        """Return the result if it has arrived; ``None`` before and after."""
        return self.wait(timeout=0)

    def wait(self, timeout: float | None = None) -> CommandResult | None:
        if self._closed:
            return None
        try:
            if timeout == 0:
                result = self._queue.get_nowait()
            else:
                result = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        self._closed = True
        return result


def _run_with_deadline(fn: Callable[[], Any], timeout: float, title: str) -> Any:
    """Run ``fn`` on a daemon thread; raise ``CommandTimeout`` past ``timeout``.

    The worker is abandoned on timeout; whatever it finishes with is dropped.
    """
    box: queue.Queue[tuple[bool, Any]] = queue.Queue(maxsize=1)

    def worker() -> None:
        try:
            value = fn()
        except Exception as exc:
            box.put((False, exc))
        else:
            box.put((True, value))

    threading.Thread(target=worker, name=f"ovhterm-cmd-{title}", daemon=True).start()
    try:
        ok, value = box.get(timeout=timeout)
    except queue.Empty:
        raise CommandTimeout(title, timeout) from None
    if not ok:
        raise value
    return value


class CommandFacade:
    """Executes bound operations against the active remote source."""

    def __init__(
        self,
        source: RemoteDataSource,
        registry: CommandRegistry,
        options: CommandOptions | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = source
        self.registry = registry
        self.options = options or CommandOptions()
        self._sleep = sleep
        self._in_flight: set[tuple[str, str | None]] = set()
        self._lock = threading.Lock()

    @property
    def source(self) -> RemoteDataSource:
        return self._source

    def set_source(self, source: RemoteDataSource) -> None:
        """Swap the data source; running workers keep the one they started with."""
        self._source = source

    def is_bound(self, item: MenuItem) -> bool:
        return item.is_leaf and self.registry.resolve(item.binding) is not None

    def in_flight(self, item: MenuItem) -> bool:
        with self._lock:
            return (item.binding or item.title, item.resource_id) in self._in_flight

    def _operation_for(self, item: MenuItem) -> BoundOperation:
        operation = self.registry.resolve(item.binding) if item.is_leaf else None
        if operation is None:
            raise UnboundCommandError(item.binding)
        return operation

    def _retrying(self, name: str, fn: Callable[[], Any], *, read_only: bool) -> Any:
        """Call ``fn``, retrying retryable errors when the operation is read-only."""
        policy = self.options.retry
        attempts = max(1, policy.attempts) if read_only else 1
        attempt = 1
        while True:
            try:
                return fn()
            except Exception as exc:
                if attempt >= attempts or not getattr(exc, "retryable", False):
                    raise
                delay = policy.delay_for(attempt)
                logger.info("command_retry", operation=name, attempt=attempt, delay=delay, error=str(exc))
                self._sleep(delay)
                attempt += 1

    def execute(self, item: MenuItem) -> CommandResult:
        """Run the operation bound to ``item`` and wait for it.

        Blocks for at most the clamped timeout. Raises
        ``UnboundCommandError`` when nothing is bound to ``item``.
        """
        operation = self._operation_for(item)
        source = self._source
        timeout = self.options.effective_timeout
        started = time.monotonic()
        try:
            output = _run_with_deadline(
                lambda: self._retrying(
                    operation.name,
                    lambda: operation.run(source, item.resource_id),
                    read_only=operation.read_only,
                ),
                timeout,
                item.title,
            )
        except Exception as exc:
            duration = time.monotonic() - started
            if isinstance(exc, CommandTimeout):
                logger.warning("command_timeout", title=item.title, timeout=timeout)
            else:
                logger.error("command_failed", title=item.title, error=str(exc), error_type=type(exc).__name__)
            return CommandResult(
                title=item.title,
                output=f"Failed to execute command: {failure_reason(exc)}",
                error=exc,
                duration=duration,
                state=CommandState.FAILED,
            )
        duration = time.monotonic() - started
        logger.info("command_finished", title=item.title, duration=round(duration, 3))
        return CommandResult(
            title=item.title,
            output=output.text,
            error=None,
            duration=duration,
            state=CommandState.COMPLETED,
            payload=output.payload,
        )

    def execute_async(self, item: MenuItem) -> CommandHandle:
        """Start the bound operation and return a handle for its one result.

        Raises ``CommandBusy`` while the same binding (and resource) is
        still running.
        """
        self._operation_for(item)
        key = (item.binding or item.title, item.resource_id)
        with self._lock:
            if key in self._in_flight:
                raise CommandBusy(item.title)
            self._in_flight.add(key)
        handle = CommandHandle(item.title, key)

        def worker() -> None:
            try:
                result = self.execute(item)
            finally:
                with self._lock:
                    self._in_flight.discard(key)
            handle.deliver(result)

        threading.Thread(target=worker, name=f"ovhterm-async-{item.title}", daemon=True).start()
        return handle

    def list_resources(self, loader_key: str) -> list[ResourceEntry]:
        """Fetch dynamic menu children; failures propagate to the caller."""
        operation = self.registry.resolve_list(loader_key)
        if operation is None:
            raise UnboundCommandError(loader_key)
        source = self._source
        started = time.monotonic()
        entries = _run_with_deadline(
            lambda: self._retrying(operation.name, lambda: list(operation.run(source)), read_only=True),
            self.options.effective_timeout,
            operation.name,
        )
        logger.debug("resources_listed", loader=loader_key, count=len(entries), duration=round(time.monotonic() - started, 3))
        return entries


__all__ = [
    "CommandBusy",
    "CommandError",
    "CommandFacade",
    "CommandHandle",
    "CommandOptions",
    "CommandResult",
    "CommandState",
    "CommandTimeout",
    "DEFAULT_TIMEOUT_SECONDS",
    "MAX_TIMEOUT_SECONDS",
    "RetryPolicy",
    "UnboundCommandError",
]

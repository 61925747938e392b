"""Capability interface the runtime uses to reach remote data."""

from __future__ import annotations

from typing import Any, Protocol


class RemoteDataSource(Protocol):
    """Anything that can GET and POST API paths and return decoded JSON.

    Implementations raise ``RemoteError`` subclasses on failure.
    """

    def get(self, path: str) -> Any: ...

    def post(self, path: str, payload: Any = None) -> Any: ...

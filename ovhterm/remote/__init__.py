"""Remote data access: the source protocol, error taxonomy, and API client."""

from __future__ import annotations

from .client import ClientRetry, OvhClient, sign_request
from .errors import ApiError, AuthError, NetworkError, RemoteError
from .source import RemoteDataSource

__all__ = [
    "RemoteDataSource",
    "OvhClient",
    "ClientRetry",
    "sign_request",
    "RemoteError",
    "AuthError",
    "ApiError",
    "NetworkError",
]

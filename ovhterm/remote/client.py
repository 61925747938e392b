"""Signed HTTP client for the OVHcloud API built on ``httpx``.

Requests carry the application signature headers, transient failures are
retried with capped exponential backoff, and every failure surfaces as a
``RemoteError`` subclass.
"""

from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from .endpoints import resolve_endpoint_url
from .errors import ApiError, AuthError, NetworkError, RemoteError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
USER_AGENT = "ovhterm"


@dataclass(frozen=True)
class ClientRetry:
    """Transport-level retry settings for transient API failures."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0

    def delay_for(self, attempt: int) -> float:
        """Backoff before ``attempt`` (1-based retry number)."""
        return min(self.max_delay, self.base_delay * (2 ** attempt))


def sign_request(
    app_secret: str,
    consumer_key: str,
    method: str,
    url: str,
    body: str,
    timestamp: int,
) -> str:
    """Return the ``X-Ovh-Signature`` value for one request."""
    material = "+".join([app_secret, consumer_key, method.upper(), url, body, str(timestamp)])
    return "$1$" + hashlib.sha1(material.encode("utf-8")).hexdigest()


class OvhClient:
    """``RemoteDataSource`` implementation talking to one API account."""

    def __init__(
        self,
        endpoint: str,
        app_key: str,
        app_secret: str,
        consumer_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry: ClientRetry | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = resolve_endpoint_url(endpoint)
        self.app_key = app_key
        self._app_secret = app_secret
        self._consumer_key = consumer_key
        self.retry = retry or ClientRetry()
        self._clock = clock
        self._sleep = sleep
        self._time_delta: int | None = None
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> OvhClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def get(self, path: str) -> Any:
        return self.call("GET", path)

    def post(self, path: str, payload: Any = None) -> Any:
        return self.call("POST", path, payload)

    def time_delta(self) -> int:
        """Seconds between API server time and local time, fetched once."""
        if self._time_delta is None:
            server_time = self._request("GET", "/auth/time", None, need_auth=False)
            self._time_delta = int(server_time) - int(self._clock())
        return self._time_delta

    def call(self, method: str, path: str, payload: Any = None) -> Any:
        """Run one API call with retry on transient failures."""
        last_error: RemoteError | None = None
        for attempt in range(self.retry.max_attempts):
            if attempt > 0:
                delay = self.retry.delay_for(attempt)
                logger.debug("request_retry", method=method, path=path, attempt=attempt + 1, delay=delay)
                self._sleep(delay)
            try:
                return self._request(method, path, payload, need_auth=True)
            except RemoteError as exc:
                last_error = exc
                if not exc.retryable:
                    break
        assert last_error is not None
        logger.warning("request_failed", method=method, path=path, error=str(last_error))
        raise last_error

    def _request(self, method: str, path: str, payload: Any, *, need_auth: bool) -> Any:
        url = self.base_url + path
        body = "" if payload is None else json.dumps(payload, separators=(",", ":"))
        headers = {"X-Ovh-Application": self.app_key}
        if body:
            headers["Content-Type"] = "application/json"
        if need_auth:
            timestamp = int(self._clock()) + self.time_delta()
            headers["X-Ovh-Consumer"] = self._consumer_key
            headers["X-Ovh-Timestamp"] = str(timestamp)
            headers["X-Ovh-Signature"] = sign_request(
                self._app_secret,
                self._consumer_key,
                method,
                url,
                body,
                timestamp,
            )

        logger.debug("request", method=method, path=path)
        try:
            response = self._http.request(method, url, content=body or None, headers=headers)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"request to {path} timed out") from exc
        except httpx.TransportError as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            raise _error_for_response(response, method, path)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("response is not valid JSON", status=response.status_code, method=method, path=path) from exc


def _error_for_response(response: httpx.Response, method: str, path: str) -> RemoteError:
    message = response.reason_phrase or "request failed"
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        message = data["message"]
    if response.status_code in {401, 403}:
        return AuthError(message)
    return ApiError(message, status=response.status_code, method=method, path=path)


__all__ = ["ClientRetry", "OvhClient", "sign_request"]

"""Remote failure taxonomy with user-facing messages."""

from __future__ import annotations

from ..errors import OvhTermError

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class RemoteError(OvhTermError):
    """A remote call failed; ``retryable`` says whether trying again may help."""

    base_message = "An unknown error occurred."

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.retryable = retryable

    def user_message(self) -> str:
        return self.base_message


class AuthError(RemoteError):
    base_message = "Authentication failed. Please check your API credentials in the configuration file."

    def user_message(self) -> str:
        lowered = self.message.lower()
        if "invalid" in lowered:
            return f"{self.base_message}\nThe credentials appear to be invalid."
        if "expired" in lowered:
            return f"{self.base_message}\nYour authentication token may have expired."
        return self.base_message


class ApiError(RemoteError):
    base_message = "The OVH API reported an error."

    def __init__(self, message: str, *, status: int | None = None, method: str = "", path: str = "") -> None:
        super().__init__(message, retryable=status in RETRYABLE_STATUS_CODES)
        self.status = status
        self.method = method
        self.path = path

    def user_message(self) -> str:
        if self.status is None:
            return f"{self.base_message} {self.message}"
        return f"{self.base_message} (Status: {self.status}) {self.message}"


class NetworkError(RemoteError):
    base_message = "Could not connect to OVH API. Please check your internet connection."

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


__all__ = [
    "RETRYABLE_STATUS_CODES",
    "RemoteError",
    "AuthError",
    "ApiError",
    "NetworkError",
]

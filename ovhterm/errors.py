"""Root of the ovhterm exception hierarchy."""

from __future__ import annotations


class OvhTermError(Exception):
    """Base class for every error raised by ovhterm itself."""

    def user_message(self) -> str:
        """Return text safe to show in the status bar or content pane."""
        return str(self)

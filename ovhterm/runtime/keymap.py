"""Named key actions with a token -> handler lookup table."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

KEY_LABELS = {
    "UP": "↑",
    "DOWN": "↓",
    "LEFT": "←",
    "RIGHT": "→",
    "ENTER": "Enter",
    "TAB": "Tab",
    "ESC": "Esc",
    "HOME": "Home",
    "END": "End",
    "PAGE_UP": "PgUp",
    "PAGE_DOWN": "PgDn",
    " ": "Space",
}


def key_label(token: str) -> str:
    """Human-readable name for a key token (``CTRL_C`` -> ``Ctrl+C``)."""
    if token in KEY_LABELS:
        return KEY_LABELS[token]
    if token.startswith("CTRL_") and len(token) == 6:
        return f"Ctrl+{token[-1]}"
    return token


@dataclass(frozen=True)
class KeyAction:
    """One action, the tokens that trigger it, and its handler.

    Handlers return ``True`` when the action should end the session.
    """

    name: str
    keys: tuple[str, ...]
    handler: Callable[[], bool | None]
    description: str = ""


class KeyMap:
    """Dispatch table from key tokens to ``KeyAction`` handlers.

    Later bindings for the same token replace earlier ones, so configured
    actions registered after the fixed navigation keys take precedence.
    """

    def __init__(self) -> None:
        self._actions: dict[str, KeyAction] = {}
        self._by_key: dict[str, KeyAction] = {}

    def bind(self, action: KeyAction) -> KeyMap:
        self._actions[action.name] = action
        for key in action.keys:
            self._by_key[key] = action
        return self

    def bind_all(self, actions: Iterable[KeyAction]) -> KeyMap:
        for action in actions:
            self.bind(action)
        return self

    def action_for(self, key: str) -> KeyAction | None:
        return self._by_key.get(key)

    def action(self, name: str) -> KeyAction | None:
        return self._actions.get(name)

    def keys_for(self, name: str) -> tuple[str, ...]:
        """Tokens that still trigger ``name`` after any later rebinding."""
        action = self._actions.get(name)
        if action is None:
            return ()
        return tuple(key for key in action.keys if self._by_key.get(key) is action)

    def dispatch(self, key: str) -> bool | None:
        """Run the handler bound to ``key``; ``None`` when nothing is bound."""
        action = self._by_key.get(key)
        if action is None:
            return None
        return bool(action.handler())


__all__ = ["KEY_LABELS", "KeyAction", "KeyMap", "key_label"]

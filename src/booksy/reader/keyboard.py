"""Keyboard event dispatch for reader views."""

from enum import Enum
from typing import Callable, Optional, Union


class Key(str, Enum):
    """Keys the reader responds to."""

    RIGHT = "right"
    LEFT = "left"
    ESCAPE = "escape"


KEY_NAMES = {
    "arrowright": Key.RIGHT,
    "right": Key.RIGHT,
    "arrowleft": Key.LEFT,
    "left": Key.LEFT,
    "escape": Key.ESCAPE,
    "esc": Key.ESCAPE,
}

KeyListener = Callable[[Key], bool]


def normalize_key(key: Union[str, Key]) -> Optional[Key]:
    """Map a key name (``ArrowRight``, ``esc``...) to a Key, or None if unknown."""
    if isinstance(key, Key):
        return key
    return KEY_NAMES.get(key.strip().lower())


class KeyboardDispatcher:
    """Registry of key listeners.

    Listeners are called in subscription order. Each returns whether it
    handled the key.
    """

    def __init__(self):
        self._listeners: list[KeyListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: KeyListener) -> None:
        """Remove a listener.

        Raises:
            ValueError: If the listener is not subscribed
        """
        self._listeners.remove(listener)

    def dispatch(self, key: Union[str, Key]) -> bool:
        """Send a key to every listener.

        Returns:
            True if any listener handled it
        """
        normalized = normalize_key(key)
        if normalized is None:
            return False

        handled = False
        for listener in list(self._listeners):
            handled = listener(normalized) or handled
        return handled

"""Key/value persistence port for cart sessions.

A cart session only needs three string operations; anything that can
provide them (process memory, Redis, a browser bridge) can back a cart.
"""

from threading import Lock
from typing import Protocol, runtime_checkable


@runtime_checkable
class CartStorage(Protocol):
    """Persistence port used by CartSession."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class InMemoryCartStorage:
    """Process-local CartStorage backed by a dict.

    Values do not survive a restart and are not shared between workers.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

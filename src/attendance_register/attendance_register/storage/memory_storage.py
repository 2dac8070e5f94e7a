from __future__ import annotations

from typing import Optional

from .repository import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """Process-local storage. Nothing survives a restart."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

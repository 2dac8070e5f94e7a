from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Key-value storage interface for the roster and register blobs.

    Note (DIP): ``RegisterStore`` depends on this interface, never on a concrete medium.
    Values are opaque strings; the store owns their serialization.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> bool:
        """Write ``value``; return False when the medium rejected the write."""

        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

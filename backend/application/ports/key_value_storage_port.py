from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStoragePort(Protocol):
    """Local durable string storage (the browser's localStorage, on disk)."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

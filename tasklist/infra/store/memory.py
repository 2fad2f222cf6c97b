from __future__ import annotations

from typing import Optional

from tasklist.domain.todo.ports import Store


class MemoryStore(Store):
    """Process-local key/value store. Nothing survives a restart."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tasklist.domain.todo.models import VisualNode


class Store(ABC):
    """Opaque string key/value persistence."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def write(self, key: str, value: str) -> None: ...


class VisualSurface(ABC):
    """
    Where a TaskList puts its visual tree.

    The list only ever clears it and appends fresh nodes; it never patches
    an existing node in place.
    """

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def append(self, node: "VisualNode") -> None: ...

    @abstractmethod
    def set_bulk_actions_enabled(self, enabled: bool) -> None: ...

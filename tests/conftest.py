from __future__ import annotations

import pytest

from tasklist.domain.todo.models import TaskList
from .fakes import SpyStore, SpySurface


@pytest.fixture
def surface() -> SpySurface:
    return SpySurface()


@pytest.fixture
def store() -> SpyStore:
    return SpyStore()


@pytest.fixture
def task_list(surface: SpySurface, store: SpyStore) -> TaskList:
    return TaskList(surface, store)

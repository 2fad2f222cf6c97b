# -*- coding: utf-8 -*-
"""Store implementations for the task list snapshot."""

from tasklist.infra.store.kv_sqlite import SqliteKeyValueStore
from tasklist.infra.store.memory import MemoryStore

__all__ = ["SqliteKeyValueStore", "MemoryStore"]

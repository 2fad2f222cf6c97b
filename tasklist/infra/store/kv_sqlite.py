# -*- coding: utf-8 -*-
"""SQLite-backed key/value store (kv_store table)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import aiosqlite

from tasklist.domain.todo.ports import Store
from tasklist.infra.db.connection import Database

logger = logging.getLogger(__name__)


class SqliteKeyValueStore(Store):
    """
    read()/write() are synchronous and served from an in-memory cache, so the
    domain never waits on the database. load() fills the cache, flush() writes
    the keys changed since the last flush.

    A failed flush leaves the key dirty; the next flush retries it.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._cache: dict[str, str] = {}
        self._dirty: set[str] = set()

    def _now_iso(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._dirty)

    async def load(self, *keys: str) -> None:
        for key in keys:
            row = await self._db.fetchone("SELECT value FROM kv_store WHERE key = ?;", (key,))
            if row is None:
                self._cache.pop(key, None)
            else:
                self._cache[key] = row["value"]
            self._dirty.discard(key)

    def read(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def write(self, key: str, value: str) -> None:
        self._cache[key] = value
        self._dirty.add(key)

    async def flush(self) -> int:
        """Write dirty keys to the database. Returns the number written."""
        written = 0
        for key in sorted(self._dirty):
            value = self._cache[key]
            try:
                await self._db.execute(
                    """
                    INSERT INTO kv_store(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at;
                    """,
                    (key, value, self._now_iso()),
                )
            except aiosqlite.Error:
                logger.exception("Flush of key %r failed, will retry", key)
                continue

            # a write that landed while we awaited stays dirty
            if self._cache.get(key) == value:
                self._dirty.discard(key)
            written += 1

        if written:
            logger.debug("kv_store flushed %d key(s)", written)
        return written

from __future__ import annotations

import logging
from typing import Sequence

from tasklist.constants import STORE_KEY_ITEMS
from tasklist.domain.common.errors import MalformedSnapshotError
from tasklist.domain.todo.models import Task, TaskList
from tasklist.domain.todo.ports import Store, VisualSurface
from tasklist.domain.todo.serialization import TaskSnapshot, parse_items

logger = logging.getLogger(__name__)


DEFAULT_SEED: tuple[TaskSnapshot, ...] = (
    TaskSnapshot(id=1, status=True, text="save the world"),
    TaskSnapshot(id=2, status=True, text="hijack some sessions"),
    TaskSnapshot(id=3, status=False, text="create a todo app"),
)


def read_snapshots(
    store: Store,
    seed: Sequence[TaskSnapshot] = DEFAULT_SEED,
    store_key: str = STORE_KEY_ITEMS,
) -> list[TaskSnapshot]:
    """Stored snapshots, or `seed` when nothing usable is stored."""
    raw = store.read(store_key)
    if raw is None or not raw.strip():
        logger.info("No stored tasks under %r, using %d seed tasks", store_key, len(seed))
        return list(seed)

    try:
        snapshots = parse_items(raw)
    except MalformedSnapshotError as e:
        logger.warning("Stored tasks under %r unreadable (%s), using seed", store_key, e)
        return list(seed)

    logger.info("Loaded %d tasks from store", len(snapshots))
    return snapshots


def load_task_list(
    store: Store,
    surface: VisualSurface,
    seed: Sequence[TaskSnapshot] = DEFAULT_SEED,
    store_key: str = STORE_KEY_ITEMS,
) -> TaskList:
    """
    Build the session's TaskList from the store (or the seed) and render it once.
    """
    snapshots = read_snapshots(store, seed=seed, store_key=store_key)

    task_list = TaskList(surface, store, store_key=store_key)
    with task_list.batch():
        for snap in snapshots:
            task_list.add(Task.from_snapshot(snap))
        # an empty snapshot still gets its single render
        task_list.notify_changed()
    return task_list

# -*- coding: utf-8 -*-
"""
Snapshot codec for the task list.

Only TaskSnapshot ever crosses this boundary, so the owning-list reference of a
live Task can never end up in the store.

Written form is a compact JSON array:
    [{"id":1,"status":true,"text":"buy milk"}]
Older data was written as comma-joined objects without the brackets; the reader
accepts both.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from tasklist.domain.common.errors import MalformedSnapshotError


@dataclass(frozen=True)
class TaskSnapshot:
    id: int
    status: bool
    text: str

    def to_dict(self) -> dict[str, Any]:
        # key order is part of the stored format
        return {"id": self.id, "status": self.status, "text": self.text}


def dump_items(snapshots: Iterable[TaskSnapshot]) -> str:
    return json.dumps(
        [s.to_dict() for s in snapshots],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _snapshot_from_obj(obj: Any, index: int) -> TaskSnapshot:
    if not isinstance(obj, dict):
        raise MalformedSnapshotError(f"entry {index} is not an object")

    task_id = obj.get("id")
    status = obj.get("status")
    text = obj.get("text")

    # bool is an int subclass; an id of true/false is not an id
    if not isinstance(task_id, int) or isinstance(task_id, bool):
        raise MalformedSnapshotError(f"entry {index} has invalid id: {task_id!r}")
    if not isinstance(status, bool):
        raise MalformedSnapshotError(f"entry {index} has invalid status: {status!r}")
    if not isinstance(text, str):
        raise MalformedSnapshotError(f"entry {index} has invalid text: {text!r}")

    return TaskSnapshot(id=task_id, status=status, text=text)


def parse_items(raw: str) -> list[TaskSnapshot]:
    """Parse a stored value back into snapshots. Raises MalformedSnapshotError."""
    text = raw.strip()
    if not text.startswith("["):
        text = f"[{text}]"

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized ints and absurd nesting alike
        raise MalformedSnapshotError(f"stored items are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedSnapshotError("stored items are not a list")

    return [_snapshot_from_obj(obj, i) for i, obj in enumerate(data)]

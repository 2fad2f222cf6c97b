from __future__ import annotations

import logging
import weakref
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from tasklist.constants import STATUS_CLASS_DONE, STATUS_CLASS_PENDING, STORE_KEY_ITEMS
from tasklist.domain.todo.ports import Store, VisualSurface
from tasklist.domain.todo.serialization import TaskSnapshot, dump_items

if TYPE_CHECKING:
    from tasklist.domain.todo.draft import TaskDraft

logger = logging.getLogger(__name__)


def _index_of(seq: Sequence["Task"], task: "Task") -> int:
    """Position of `task` in `seq` by identity, -1 if absent."""
    for i, candidate in enumerate(seq):
        if candidate is task:
            return i
    return -1


class SelectionToggle:
    """Checkbox of a rendered task. Talks to the owning list, never to the surface."""

    def __init__(self, task: "Task") -> None:
        self._task = task

    @property
    def checked(self) -> bool:
        owner = self._task.owning_list
        return owner is not None and owner.is_selected(self._task)

    def set(self, checked: bool) -> None:
        owner = self._task.owning_list
        if owner is None:
            logger.debug("Selection toggle on detached task id=%s ignored", self._task.id)
            return
        if checked:
            owner.add_selected(self._task)
        else:
            owner.remove_selected(self._task)

    def flip(self) -> bool:
        new_value = not self.checked
        self.set(new_value)
        return new_value


@dataclass(eq=False)
class VisualNode:
    """One rendered task. Fresh instance per render; never reused across rebuilds."""
    task_id: int
    label: str
    style_class: str  # STATUS_CLASS_PENDING | STATUS_CLASS_DONE
    toggle: SelectionToggle
    editable: bool = False

    @property
    def selected(self) -> bool:
        return self.toggle.checked

    def structure(self) -> tuple:
        """Comparable shape of the node (two renders of the same state are equal)."""
        return (self.task_id, self.label, self.style_class, self.selected, self.editable)


class Task:
    """
    A single to-do entry.

    status: True = open/pending, False = done.
    The owning list is held through a weak reference and is never serialized;
    use snapshot() for anything leaving the session.
    """

    def __init__(self, id: int, text: str, status: bool = True) -> None:
        self.id = id
        self.text = text
        self.status = status
        self._owner_ref: Optional[weakref.ReferenceType[TaskList]] = None

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, text={self.text!r}, status={self.status!r})"

    @classmethod
    def from_snapshot(cls, snapshot: TaskSnapshot) -> "Task":
        return cls(snapshot.id, snapshot.text, snapshot.status)

    @property
    def owning_list(self) -> Optional["TaskList"]:
        if self._owner_ref is None:
            return None
        return self._owner_ref()

    @property
    def is_done(self) -> bool:
        return not self.status

    def _attach(self, task_list: "TaskList") -> None:
        self._owner_ref = weakref.ref(task_list)

    def _detach(self) -> None:
        self._owner_ref = None

    def complete(self) -> bool:
        """
        Mark done and let the owning list rebuild and persist.

        A detached task is rejected: nothing changes and False is returned.
        """
        owner = self.owning_list
        if owner is None:
            logger.warning("complete() on detached task id=%s rejected", self.id)
            return False
        self.status = False
        owner.notify_changed()
        return True

    def to_visual_element(self) -> VisualNode:
        return VisualNode(
            task_id=self.id,
            label=self.text,
            style_class=STATUS_CLASS_PENDING if self.status else STATUS_CLASS_DONE,
            toggle=SelectionToggle(self),
        )

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(id=self.id, status=self.status, text=self.text)


class TaskList:
    """
    Ordered tasks plus the transient selection used by bulk actions.

    Every structural change (add, remove, completion) rebuilds the whole visual
    tree and then writes the snapshot to the store. Selection changes only touch
    the bulk-action affordances and are never persisted.
    """

    def __init__(self, surface: VisualSurface, store: Store, store_key: str = STORE_KEY_ITEMS) -> None:
        self._surface = surface
        self._store = store
        self._store_key = store_key
        self._items: List[Task] = []
        self._selected: List[Task] = []
        self._last_issued_id = 0
        self._batch_depth = 0
        self._dirty = False

    # -------------------- read access --------------------
    @property
    def items(self) -> tuple[Task, ...]:
        return tuple(self._items)

    @property
    def selected(self) -> tuple[Task, ...]:
        return tuple(self._selected)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._items))

    def __contains__(self, task: object) -> bool:
        return isinstance(task, Task) and _index_of(self._items, task) >= 0

    def is_selected(self, task: Task) -> bool:
        return _index_of(self._selected, task) >= 0

    def next_id(self) -> int:
        """Fresh id: one past the largest id in the list or handed out before."""
        current_max = max((t.id for t in self._items), default=0)
        self._last_issued_id = max(current_max, self._last_issued_id) + 1
        return self._last_issued_id

    # -------------------- mutation hook --------------------
    def notify_changed(self) -> None:
        """Rebuild and persist now, or once at the end of the enclosing batch."""
        if self._batch_depth:
            self._dirty = True
            return
        self.rebuild_visual_tree()
        self.persist()

    @contextmanager
    def batch(self) -> Iterator["TaskList"]:
        """Defer notify_changed() so a bulk operation rebuilds and persists once."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self.rebuild_visual_tree()
                self.persist()

    def _selection_changed(self) -> None:
        self._surface.set_bulk_actions_enabled(bool(self._selected))

    # -------------------- structure --------------------
    def add(self, task: Task) -> bool:
        """Append `task` and take ownership. A task already in this list is left alone."""
        if task in self:
            logger.debug("Task id=%s already in list, add ignored", task.id)
            return False

        previous = task.owning_list
        if previous is not None:
            previous.remove(task)

        task._attach(self)
        self._items.append(task)
        self.notify_changed()
        return True

    def remove(self, task: Task) -> list[Task]:
        """Remove `task` by identity. Returns [task], or [] when it was not in the list."""
        idx = _index_of(self._items, task)
        if idx < 0:
            return []

        removed = self._items.pop(idx)
        removed._detach()

        sel_idx = _index_of(self._selected, removed)
        if sel_idx >= 0:
            del self._selected[sel_idx]
            self._selection_changed()

        self.notify_changed()
        return [removed]

    # -------------------- selection --------------------
    def add_selected(self, task: Task) -> bool:
        if task not in self:
            logger.debug("Selection of foreign task id=%s ignored", task.id)
            return False
        if self.is_selected(task):
            return False
        self._selected.append(task)
        logger.debug("Selection added: id=%s (%d selected)", task.id, len(self._selected))
        self._selection_changed()
        return True

    def remove_selected(self, task: Task) -> bool:
        idx = _index_of(self._selected, task)
        if idx < 0:
            return False
        del self._selected[idx]
        logger.debug("Selection removed: id=%s (%d selected)", task.id, len(self._selected))
        self._selection_changed()
        return True

    def remove_selected_items(self) -> int:
        """Remove every selected task from the list and empty the selection."""
        pending = list(self._selected)
        self._selected.clear()

        removed = 0
        with self.batch():
            for task in pending:
                removed += len(self.remove(task))

        self._selection_changed()
        return removed

    def complete_selected(self) -> int:
        """Mark every selected task done with a single rebuild and persist."""
        completed = 0
        with self.batch():
            for task in list(self._selected):
                if task in self and task.complete():
                    completed += 1
        return completed

    # -------------------- rendering / persistence --------------------
    def rebuild_visual_tree(self) -> None:
        self._surface.clear()
        for task in self._items:
            self._surface.append(task.to_visual_element())
        self._selection_changed()
        logger.debug("Visual tree rebuilt (%d tasks)", len(self._items))

    def persist(self) -> None:
        self._store.write(self._store_key, dump_items(t.snapshot() for t in self._items))
        logger.debug("Store updated: key=%s (%d tasks)", self._store_key, len(self._items))

    def prompt_new_task(self) -> "TaskDraft":
        """Put an empty editable task on the surface; it joins the list on commit."""
        from tasklist.domain.todo.draft import TaskDraft

        draft = TaskDraft(self, self.next_id())
        self._surface.append(draft.node)
        return draft

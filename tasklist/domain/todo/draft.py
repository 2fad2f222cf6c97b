from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from tasklist.constants import ACCEPT_KEY
from tasklist.domain.todo.models import Task, VisualNode

if TYPE_CHECKING:
    from tasklist.domain.todo.models import TaskList

logger = logging.getLogger(__name__)


class TaskDraft:
    """
    Editable placeholder shown while the user types a new task.

    The draft is not part of the list. Both ways of finishing the edit
    (accept key, blur) go through commit(), which adds exactly one task;
    every later commit is a no-op.
    """

    def __init__(self, task_list: "TaskList", task_id: int) -> None:
        self._list = task_list
        self._task_id = task_id
        self._closed = False
        self.node: VisualNode = Task(task_id, "", True).to_visual_element()
        self.node.editable = True

    @property
    def task_id(self) -> int:
        return self._task_id

    @property
    def is_open(self) -> bool:
        return not self._closed

    def key_pressed(self, key: str, text: str) -> bool:
        """Returns True when the key was consumed (accept key commits, no line break)."""
        if key != ACCEPT_KEY:
            return False
        self.blur(text)
        return True

    def blur(self, text: str) -> Optional[Task]:
        return self.commit(text)

    def commit(self, text: str) -> Optional[Task]:
        if self._closed:
            return None
        self._closed = True

        task = Task(self._task_id, text, True)
        self._list.add(task)
        logger.debug("Draft committed as task id=%s", task.id)
        return task

    def discard(self) -> None:
        """Drop the draft; the rebuild takes its placeholder off the surface."""
        if self._closed:
            return
        self._closed = True
        self._list.rebuild_visual_tree()

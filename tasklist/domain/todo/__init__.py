# -*- coding: utf-8 -*-
"""Task list domain. No aiogram. No sqlite."""

from tasklist.domain.todo.bootstrap import DEFAULT_SEED, load_task_list
from tasklist.domain.todo.draft import TaskDraft
from tasklist.domain.todo.models import SelectionToggle, Task, TaskList, VisualNode
from tasklist.domain.todo.ports import Store, VisualSurface
from tasklist.domain.todo.serialization import TaskSnapshot, dump_items, parse_items

__all__ = [
    "DEFAULT_SEED",
    "load_task_list",
    "TaskDraft",
    "SelectionToggle",
    "Task",
    "TaskList",
    "VisualNode",
    "Store",
    "VisualSurface",
    "TaskSnapshot",
    "dump_items",
    "parse_items",
]

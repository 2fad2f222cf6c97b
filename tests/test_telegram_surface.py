"""
Tests for the Telegram surface: keyboard layout, callback data and the list text.
"""
from __future__ import annotations

from tasklist.callbacks import (
    LIST_ADD,
    LIST_COMPLETE_SELECTED,
    LIST_REFRESH,
    LIST_REMOVE_SELECTED,
    NOOP,
    PREFIX_SELECT,
    parse_position,
)
from tasklist.domain.todo.models import Task, TaskList
from tasklist.ui.telegram.render import TelegramSurface

from .fakes import SpyStore


def _list_with(*tasks: Task) -> tuple[TaskList, TelegramSurface]:
    surface = TelegramSurface()
    task_list = TaskList(surface, SpyStore())
    for t in tasks:
        task_list.add(t)
    return task_list, surface


def _callback_rows(markup) -> list[list[str]]:
    return [[b.callback_data for b in row] for row in markup.inline_keyboard]


def test_one_row_per_task_then_commands():
    _, surface = _list_with(Task(1, "a"), Task(2, "b", False))

    text, markup = surface.render()

    assert _callback_rows(markup) == [
        [f"{PREFIX_SELECT}0"],
        [f"{PREFIX_SELECT}1"],
        [LIST_ADD, LIST_REFRESH],
    ]
    assert text == "Tasks: 1 open, 1 done."


def test_button_text_reflects_status_and_selection():
    task_list, surface = _list_with(Task(1, "open one"), Task(2, "done one", False))
    task_list.add_selected(task_list.items[1])

    _, markup = surface.render()
    labels = [row[0].text for row in markup.inline_keyboard[:2]]

    assert labels == ["☐ ⬜ open one", "☑ ✅ done one"]


def test_bulk_actions_only_while_something_is_selected():
    task_list, surface = _list_with(Task(1, "a"))
    task_list.add_selected(task_list.items[0])

    text, markup = surface.render()

    assert _callback_rows(markup)[-1] == [LIST_REMOVE_SELECTED, LIST_COMPLETE_SELECTED]
    assert "Selected: 1" in text

    task_list.remove_selected(task_list.items[0])
    _, markup = surface.render()
    assert LIST_REMOVE_SELECTED not in sum(_callback_rows(markup), [])


def test_draft_placeholder_is_not_selectable():
    task_list, surface = _list_with(Task(1, "a"))
    task_list.prompt_new_task()

    _, markup = surface.render()

    assert _callback_rows(markup)[1] == [NOOP]
    assert surface.node_at(1).editable is True


def test_empty_list_text():
    _, surface = _list_with()
    text, markup = surface.render()

    assert text.startswith("No tasks")
    assert _callback_rows(markup) == [[LIST_ADD, LIST_REFRESH]]


def test_node_at_out_of_range():
    _, surface = _list_with(Task(1, "a"))
    assert surface.node_at(1) is None
    assert surface.node_at(-1) is None


def test_parse_position():
    assert parse_position(f"{PREFIX_SELECT}3") == 3
    assert parse_position(f"{PREFIX_SELECT}x") is None
    assert parse_position(f"{PREFIX_SELECT}-1") is None
    assert parse_position("tl:sel") is None

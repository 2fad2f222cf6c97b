"""
Tests for TaskList: ownership, selection consistency and the rebuild+persist contract.
Run with: python -m pytest tests/test_task_list.py -v
"""
from __future__ import annotations

import json

from tasklist.constants import STATUS_CLASS_DONE, STATUS_CLASS_PENDING, STORE_KEY_ITEMS
from tasklist.domain.todo.models import Task, TaskList

from .fakes import SpyStore, SpySurface


def _assert_owned(task_list: TaskList) -> None:
    items = task_list.items
    assert len({id(t) for t in items}) == len(items), "items must not hold the same task twice"
    for t in items:
        assert t.owning_list is task_list


def test_add_single_task_persists_export_view(task_list, store, surface):
    task = Task(1, "buy milk", True)
    task_list.add(task)

    assert len(task_list.items) == 1
    assert task.owning_list is task_list
    assert store.read(STORE_KEY_ITEMS) == '[{"id":1,"status":true,"text":"buy milk"}]'
    assert surface.clear_calls == 1
    assert [n.label for n in surface.nodes] == ["buy milk"]


def test_add_keeps_insertion_order_and_allows_duplicate_ids(task_list):
    a, b, c = Task(1, "a"), Task(1, "b"), Task(2, "c")
    for t in (a, b, c):
        task_list.add(t)

    assert task_list.items == (a, b, c)
    _assert_owned(task_list)


def test_add_same_task_twice_is_ignored(task_list, store):
    task = Task(1, "a")
    assert task_list.add(task) is True
    writes_before = len(store.writes)

    assert task_list.add(task) is False
    assert task_list.items == (task,)
    assert len(store.writes) == writes_before


def test_add_moves_task_out_of_previous_list():
    first = TaskList(SpySurface(), SpyStore())
    second = TaskList(SpySurface(), SpyStore())
    task = Task(1, "a")
    first.add(task)
    first.add_selected(task)

    second.add(task)

    assert task not in first
    assert first.selected == ()
    assert second.items == (task,)
    _assert_owned(first)
    _assert_owned(second)


def test_remove_detaches_and_rebuilds(task_list, surface, store):
    a, b = Task(1, "a"), Task(2, "b")
    task_list.add(a)
    task_list.add(b)

    assert task_list.remove(a) == [a]
    assert task_list.items == (b,)
    assert a.owning_list is None
    assert [n.task_id for n in surface.nodes] == [2]
    assert json.loads(store.read(STORE_KEY_ITEMS)) == [{"id": 2, "status": True, "text": "b"}]


def test_remove_missing_task_is_noop(task_list, surface, store):
    a = Task(1, "a")
    task_list.add(a)
    clears, writes = surface.clear_calls, len(store.writes)

    assert task_list.remove(Task(1, "a")) == []
    assert task_list.items == (a,)
    assert surface.clear_calls == clears
    assert len(store.writes) == writes


def test_remove_matches_by_identity_not_value(task_list):
    a, twin = Task(1, "same"), Task(1, "same")
    task_list.add(a)
    task_list.add(twin)

    task_list.remove(twin)

    assert task_list.items == (a,)


def test_remove_drops_task_from_selection(task_list, surface):
    a, b = Task(1, "a"), Task(2, "b")
    task_list.add(a)
    task_list.add(b)
    task_list.add_selected(a)
    task_list.add_selected(b)

    task_list.remove(a)

    assert task_list.selected == (b,)
    assert surface.bulk_enabled is True


def test_add_selected_has_no_duplicates(task_list):
    a = Task(1, "a")
    task_list.add(a)

    assert task_list.add_selected(a) is True
    assert task_list.add_selected(a) is False
    assert task_list.add_selected(a) is False

    assert task_list.selected == (a,)


def test_add_selected_rejects_task_not_in_list(task_list):
    assert task_list.add_selected(Task(9, "stranger")) is False
    assert task_list.selected == ()


def test_selection_is_neither_rendered_nor_persisted(task_list, surface, store):
    a = Task(1, "a")
    task_list.add(a)
    clears, writes = surface.clear_calls, len(store.writes)

    task_list.add_selected(a)
    assert surface.bulk_enabled is True
    task_list.remove_selected(a)
    assert surface.bulk_enabled is False

    assert surface.clear_calls == clears
    assert len(store.writes) == writes


def test_remove_selected_of_unselected_task_is_noop(task_list, surface):
    a = Task(1, "a")
    task_list.add(a)
    calls = len(surface.bulk_calls)

    assert task_list.remove_selected(a) is False
    assert len(surface.bulk_calls) == calls


def test_remove_selected_items(task_list, surface):
    t1, t2 = Task(1, "a"), Task(2, "b")
    task_list.add(t1)
    task_list.add(t2)
    task_list.add_selected(t2)

    assert task_list.remove_selected_items() == 1

    assert task_list.items == (t1,)
    assert task_list.selected == ()
    assert t2.owning_list is None
    assert surface.bulk_enabled is False


def test_remove_selected_items_rebuilds_once(task_list, surface, store):
    tasks = [Task(i, str(i)) for i in range(5)]
    for t in tasks:
        task_list.add(t)
    for t in tasks[1:4]:
        task_list.add_selected(t)
    clears, writes = surface.clear_calls, len(store.writes)

    task_list.remove_selected_items()

    assert task_list.items == (tasks[0], tasks[4])
    assert surface.clear_calls == clears + 1
    assert len(store.writes) == writes + 1


def test_remove_selected_items_skips_tasks_no_longer_in_list(task_list):
    a, b = Task(1, "a"), Task(2, "b")
    task_list.add(a)
    task_list.add(b)
    task_list.add_selected(b)
    # stale selection entry, as left behind by an external collaborator
    task_list._selected.append(Task(3, "gone"))

    assert task_list.remove_selected_items() == 1
    assert task_list.items == (a,)
    assert task_list.selected == ()


def test_remove_selected_items_with_empty_selection_changes_nothing(task_list, surface, store):
    task_list.add(Task(1, "a"))
    clears, writes = surface.clear_calls, len(store.writes)

    assert task_list.remove_selected_items() == 0
    assert surface.clear_calls == clears
    assert len(store.writes) == writes


def test_complete_selected_batches_rebuild_and_persist(task_list, surface, store):
    t5 = Task(5, "x", True)
    task_list.add(t5)
    task_list.add_selected(t5)
    clears, writes = surface.clear_calls, len(store.writes)

    assert task_list.complete_selected() == 1

    assert t5.status is False
    assert surface.clear_calls == clears + 1
    assert len(store.writes) == writes + 1
    assert json.loads(store.read(STORE_KEY_ITEMS)) == [{"id": 5, "status": False, "text": "x"}]


def test_complete_selected_many_tasks_single_cycle(task_list, surface, store):
    tasks = [Task(i, f"t{i}") for i in range(1, 7)]
    for t in tasks:
        task_list.add(t)
        task_list.add_selected(t)
    clears, writes = surface.clear_calls, len(store.writes)

    task_list.complete_selected()

    assert all(t.is_done for t in tasks)
    assert surface.clear_calls == clears + 1
    assert len(store.writes) == writes + 1
    # selection survives completion
    assert task_list.selected == tuple(tasks)


def test_complete_single_task_rebuilds_and_persists(task_list, surface, store):
    t = Task(1, "a")
    task_list.add(t)
    clears, writes = surface.clear_calls, len(store.writes)

    assert t.complete() is True

    assert surface.clear_calls == clears + 1
    assert len(store.writes) == writes + 1
    assert surface.nodes[0].style_class == STATUS_CLASS_DONE


def test_complete_detached_task_is_rejected():
    t = Task(1, "a", True)

    assert t.complete() is False
    assert t.status is True


def test_rebuild_twice_gives_equivalent_fresh_trees(task_list, surface):
    task_list.add(Task(1, "a"))
    task_list.add(Task(2, "b", False))
    task_list.add_selected(task_list.items[0])

    task_list.rebuild_visual_tree()
    first_nodes, first = list(surface.nodes), surface.structure()
    task_list.rebuild_visual_tree()

    assert surface.structure() == first
    assert all(a is not b for a, b in zip(first_nodes, surface.nodes))
    assert [n.style_class for n in surface.nodes] == [STATUS_CLASS_PENDING, STATUS_CLASS_DONE]


def test_node_toggle_drives_selection(task_list, surface):
    a = Task(1, "a")
    task_list.add(a)
    node = surface.nodes[0]

    node.toggle.set(True)
    assert task_list.selected == (a,)
    assert node.selected is True

    assert node.toggle.flip() is False
    assert task_list.selected == ()
    assert node.selected is False


def test_toggle_of_removed_task_does_nothing(task_list, surface):
    a = Task(1, "a")
    task_list.add(a)
    node = surface.nodes[0]
    task_list.remove(a)

    node.toggle.set(True)

    assert task_list.selected == ()


def test_next_id_is_fresh(task_list):
    assert task_list.next_id() == 1
    task_list.add(Task(7, "a"))
    assert task_list.next_id() == 8
    # handed-out ids are not reused even before they are added
    assert task_list.next_id() == 9


def test_owning_list_is_not_a_strong_reference():
    task = Task(1, "a")
    task_list = TaskList(SpySurface(), SpyStore())
    task_list.add(task)
    assert task.owning_list is task_list

    del task_list

    assert task.owning_list is None


def test_invariants_hold_over_mixed_sequence(task_list):
    tasks = [Task(i % 3, f"t{i}") for i in range(8)]
    for t in tasks:
        task_list.add(t)
        _assert_owned(task_list)
    for t in tasks[::2]:
        task_list.add_selected(t)
    for t in tasks[:5]:
        task_list.remove(t)
        _assert_owned(task_list)
        assert all(s in task_list for s in task_list.selected)
        assert t not in task_list.selected
    task_list.add(tasks[0])
    _assert_owned(task_list)
    assert len(task_list.items) == 4

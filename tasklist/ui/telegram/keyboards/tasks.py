from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from tasklist.callbacks import (
    LIST_ADD,
    LIST_COMPLETE_SELECTED,
    LIST_REFRESH,
    LIST_REMOVE_SELECTED,
    NOOP,
    PREFIX_SELECT,
)
from tasklist.constants import STATUS_CLASS_DONE
from tasklist.domain.todo.models import VisualNode

EMPTY_LABEL = "(empty)"


def node_button_text(node: VisualNode) -> str:
    if node.editable:
        return "✏️ (type the new task…)"
    check = "☑" if node.selected else "☐"
    status = "✅" if node.style_class == STATUS_CLASS_DONE else "⬜"
    return f"{check} {status} {node.label or EMPTY_LABEL}"


def task_list_kb(nodes: Sequence[VisualNode], bulk_enabled: bool) -> InlineKeyboardMarkup:
    """
    One row per rendered task (tapping toggles selection), then the command row.
    Bulk actions are only offered while something is selected.
    """
    kb = InlineKeyboardBuilder()
    for pos, node in enumerate(nodes):
        callback_data = NOOP if node.editable else f"{PREFIX_SELECT}{pos}"
        kb.button(text=node_button_text(node), callback_data=callback_data)

    kb.button(text="➕ Add", callback_data=LIST_ADD)
    kb.button(text="🔄", callback_data=LIST_REFRESH)
    if bulk_enabled:
        kb.button(text="🗑️ Remove selected", callback_data=LIST_REMOVE_SELECTED)
        kb.button(text="✔️ Complete selected", callback_data=LIST_COMPLETE_SELECTED)

    widths = [1] * len(nodes) + [2]
    if bulk_enabled:
        widths.append(2)
    kb.adjust(*widths)
    return kb.as_markup()

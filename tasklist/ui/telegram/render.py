# -*- coding: utf-8 -*-
"""
Telegram visual surface: the list message and its inline keyboard.
"""
from __future__ import annotations

from typing import Optional

from aiogram.types import InlineKeyboardMarkup

from tasklist.constants import STATUS_CLASS_DONE
from tasklist.domain.todo.models import VisualNode
from tasklist.domain.todo.ports import VisualSurface
from tasklist.ui.telegram.keyboards.tasks import task_list_kb


class TelegramSurface(VisualSurface):
    """Collects the nodes a TaskList renders and turns them into (text, keyboard)."""

    def __init__(self) -> None:
        self._nodes: list[VisualNode] = []
        self._bulk_enabled = False

    @property
    def nodes(self) -> tuple[VisualNode, ...]:
        return tuple(self._nodes)

    @property
    def bulk_actions_enabled(self) -> bool:
        return self._bulk_enabled

    def clear(self) -> None:
        self._nodes.clear()

    def append(self, node: VisualNode) -> None:
        self._nodes.append(node)

    def set_bulk_actions_enabled(self, enabled: bool) -> None:
        self._bulk_enabled = enabled

    def node_at(self, position: int) -> Optional[VisualNode]:
        if 0 <= position < len(self._nodes):
            return self._nodes[position]
        return None

    def render_text(self) -> str:
        tasks = [n for n in self._nodes if not n.editable]
        if not tasks:
            return "No tasks. Tap ➕ Add to create one."
        done = sum(1 for n in tasks if n.style_class == STATUS_CLASS_DONE)
        selected = sum(1 for n in tasks if n.selected)
        text = f"Tasks: {len(tasks) - done} open, {done} done."
        if selected:
            text += f"\nSelected: {selected}"
        return text

    def render(self) -> tuple[str, InlineKeyboardMarkup]:
        return self.render_text(), task_list_kb(self._nodes, self._bulk_enabled)

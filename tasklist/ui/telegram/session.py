from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from tasklist.domain.todo.draft import TaskDraft
from tasklist.domain.todo.models import TaskList
from tasklist.infra.store.kv_sqlite import SqliteKeyValueStore
from tasklist.ui.telegram.render import TelegramSurface

logger = logging.getLogger(__name__)


@dataclass
class TodoSession:
    """Everything the handlers share: the live list, its surface, its store and the open draft."""
    task_list: TaskList
    surface: TelegramSurface
    store: SqliteKeyValueStore
    draft: Optional[TaskDraft] = field(default=None)
    # positions in select callbacks are only valid for the newest list message
    list_message_id: Optional[int] = field(default=None)

    def open_draft(self) -> TaskDraft:
        if self.draft is not None and self.draft.is_open:
            return self.draft
        self.draft = self.task_list.prompt_new_task()
        return self.draft

    def mark_list_message(self, message_id: int) -> None:
        self.list_message_id = message_id

    def is_current_list(self, message_id: int) -> bool:
        return self.list_message_id is None or self.list_message_id == message_id

    def discard_draft(self) -> None:
        if self.draft is not None:
            self.draft.discard()
        self.draft = None

    async def sync(self) -> None:
        """Push pending store writes to the database."""
        if self.store.has_pending_writes:
            await self.store.flush()

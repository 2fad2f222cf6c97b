from __future__ import annotations

from typing import Callable, Dict, Any, Awaitable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from tasklist.ui.telegram.session import TodoSession


class DIMiddleware(BaseMiddleware):
    """
    Inject dependencies to handlers via `data` dict.

    Handlers can request args by name, e.g.
      async def handler(message: Message, session: TodoSession): ...
    """

    def __init__(self, session: TodoSession) -> None:
        self._session = session

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        # keep names stable across the project
        data["session"] = self._session

        return await handler(event, data)

from __future__ import annotations

import logging

from aiogram import BaseMiddleware
from aiogram.types import Message, CallbackQuery
from typing import Callable, Dict, Any

logger = logging.getLogger(__name__)


class OwnerOnlyMiddleware(BaseMiddleware):
    """The list belongs to one owner; everyone else is turned away."""

    def __init__(self, owner_id: int):
        self._owner_id = owner_id

    async def __call__(self, handler: Callable, event, data: Dict[str, Any]):
        user_id = None
        chat_id = None

        if isinstance(event, Message):
            user_id = event.from_user.id if event.from_user else None
            chat_id = event.chat.id
        elif isinstance(event, CallbackQuery):
            user_id = event.from_user.id
            chat_id = event.message.chat.id if event.message else None

        if user_id != self._owner_id:
            logger.warning("Blocked user_id=%s chat_id=%s", user_id, chat_id)
            if isinstance(event, Message):
                await event.answer("Not authorized.")
            elif isinstance(event, CallbackQuery):
                await event.answer("Not authorized.", show_alert=True)
            return

        return await handler(event, data)

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from tasklist.ui.telegram.session import TodoSession

router = Router()


# Only the command cancels: while adding, any plain text (even "stop") is the task title.
@router.message(Command("cancel"))
async def cancel_cmd(message: Message, state: FSMContext, session: TodoSession):
    await state.clear()
    session.discard_draft()
    text, markup = session.surface.render()
    await message.answer("Cancelled.")
    sent = await message.answer(text, reply_markup=markup)
    session.mark_list_message(sent.message_id)

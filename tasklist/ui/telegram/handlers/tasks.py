from __future__ import annotations

import logging

from aiogram import Router, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery

from tasklist.callbacks import (
    LIST_ADD,
    LIST_COMPLETE_SELECTED,
    LIST_REFRESH,
    LIST_REMOVE_SELECTED,
    NOOP,
    PREFIX_SELECT,
    parse_position,
)
from tasklist.constants import ACCEPT_KEY
from tasklist.ui.telegram.session import TodoSession
from tasklist.ui.telegram.states.tasks import TasksFlow

logger = logging.getLogger(__name__)

router = Router()


def _command_args(message: Message) -> str:
    text = (message.text or "").strip()
    if not text:
        return ""
    parts = text.split(maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


async def _send_or_edit_list_message(
    *,
    target_message: Message,
    session: TodoSession,
    prefer_edit: bool,
) -> None:
    """
    prefer_edit=True: edit target_message in place (callback UX).
    prefer_edit=False: send a fresh list message (command / add UX).
    """
    text, markup = session.surface.render()

    if not prefer_edit:
        sent = await target_message.answer(text, reply_markup=markup)
        session.mark_list_message(sent.message_id)
        return

    try:
        await target_message.edit_text(text, reply_markup=markup)
    except TelegramBadRequest as e:
        if "message is not modified" in str(e).lower():
            session.mark_list_message(target_message.message_id)
            return
        # old message, deleted message etc: fall back to a new one
        logger.debug("Edit of list message failed (%s), sending new one", e)
        sent = await target_message.answer(text, reply_markup=markup)
        session.mark_list_message(sent.message_id)
        return
    session.mark_list_message(target_message.message_id)


async def _commit_draft(session: TodoSession, text: str) -> None:
    draft = session.open_draft()
    # sending the message is the accept key: commit, no line break
    draft.key_pressed(ACCEPT_KEY, text)
    session.draft = None
    await session.sync()


@router.message(CommandStart())
@router.message(Command(commands=["list", "td"]))
async def list_cmd(message: Message, state: FSMContext, session: TodoSession):
    await state.clear()
    session.discard_draft()
    await _send_or_edit_list_message(target_message=message, session=session, prefer_edit=False)


@router.message(Command("add"))
async def add_cmd(message: Message, state: FSMContext, session: TodoSession):
    args = _command_args(message)

    # /add <text> -> commit directly
    if args:
        await state.clear()
        await _commit_draft(session, args)
        await message.answer("Task added.")
        await _send_or_edit_list_message(target_message=message, session=session, prefer_edit=False)
        return

    # /add -> FSM
    session.open_draft()
    await state.set_state(TasksFlow.add_title)
    await _send_or_edit_list_message(target_message=message, session=session, prefer_edit=False)
    await message.answer("Write the task (one message). /cancel to stop.")


@router.callback_query(F.data == LIST_ADD)
async def add_cb(cb: CallbackQuery, state: FSMContext, session: TodoSession):
    await cb.answer()
    session.open_draft()
    await state.set_state(TasksFlow.add_title)
    await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)
    await cb.message.answer("Write the task (one message). /cancel to stop.")


@router.message(TasksFlow.add_title)
async def add_title(message: Message, state: FSMContext, session: TodoSession):
    title = (message.text or "").strip()
    if not title:
        await message.answer("An empty task is not accepted. Write the task.")
        return

    await _commit_draft(session, title)
    await state.clear()

    await message.answer("Task added.")
    await _send_or_edit_list_message(target_message=message, session=session, prefer_edit=False)


@router.callback_query(F.data.startswith(PREFIX_SELECT))
async def select_toggle(cb: CallbackQuery, session: TodoSession):
    if not session.is_current_list(cb.message.message_id):
        # positions of an older list message may point at other tasks now
        await cb.answer("This list is outdated, here is the current one.")
        await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=False)
        return

    pos = parse_position(cb.data)
    node = session.surface.node_at(pos) if pos is not None else None
    if node is None or node.editable:
        await cb.answer("Task not found, list refreshed.")
        await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)
        return

    checked = node.toggle.flip()
    await cb.answer("Selected" if checked else "Unselected")
    await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)


@router.callback_query(F.data == LIST_REMOVE_SELECTED)
async def remove_selected(cb: CallbackQuery, session: TodoSession):
    removed = session.task_list.remove_selected_items()
    await session.sync()

    await cb.answer(f"Removed {removed} 🗑️" if removed else "Nothing selected.")
    await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)


@router.callback_query(F.data == LIST_COMPLETE_SELECTED)
async def complete_selected(cb: CallbackQuery, session: TodoSession):
    completed = session.task_list.complete_selected()
    await session.sync()

    await cb.answer(f"Marked done ✅ ({completed})" if completed else "Nothing selected.")
    await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)


@router.callback_query(F.data == LIST_REFRESH)
async def refresh(cb: CallbackQuery, state: FSMContext, session: TodoSession):
    await cb.answer()
    await state.clear()
    if session.draft is not None:
        session.discard_draft()  # discard rebuilds
    else:
        session.task_list.rebuild_visual_tree()
    await _send_or_edit_list_message(target_message=cb.message, session=session, prefer_edit=True)


@router.callback_query(F.data == NOOP)
async def noop(cb: CallbackQuery):
    await cb.answer()

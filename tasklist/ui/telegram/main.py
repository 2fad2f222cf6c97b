from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import ExceptionTypeFilter
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import ErrorEvent

from tasklist.config import Settings, load_settings
from tasklist.domain.todo.bootstrap import load_task_list
from tasklist.infra.db.connection import Database
from tasklist.infra.db.schema_version import apply_migrations
from tasklist.infra.store.kv_sqlite import SqliteKeyValueStore
from tasklist.ui.telegram.handlers.cancel import router as cancel_router
from tasklist.ui.telegram.handlers.tasks import router as tasks_router
from tasklist.ui.telegram.middlewares.auth import OwnerOnlyMiddleware
from tasklist.ui.telegram.middlewares.di import DIMiddleware
from tasklist.ui.telegram.render import TelegramSurface
from tasklist.ui.telegram.session import TodoSession

logger = logging.getLogger(__name__)


def _resolve_db_path(settings: Settings) -> Path:
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


async def build_session(db: Database, store_key: str) -> TodoSession:
    """Migrate, read the stored snapshot and build the one TaskList of this process."""
    await apply_migrations(db, now_iso=datetime.now(timezone.utc).isoformat())

    store = SqliteKeyValueStore(db)
    await store.load(store_key)

    surface = TelegramSurface()
    task_list = load_task_list(store, surface, store_key=store_key)

    session = TodoSession(task_list=task_list, surface=surface, store=store)
    # the first render may have written the seed
    await session.sync()
    return session


async def main() -> None:
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )

    pid = os.getpid()
    logger.info("Bot starting - PID: %s", pid)

    db_path = _resolve_db_path(settings)
    logger.info("DB_PATH: %s", db_path)

    session = await build_session(Database(str(db_path)), settings.store_key)
    logger.info("Task list ready: %d tasks", len(session.task_list))

    bot = Bot(token=settings.bot_token)
    dp = Dispatcher(storage=MemoryStorage())

    dp.message.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))
    dp.callback_query.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))

    dp.message.middleware(DIMiddleware(session))
    dp.callback_query.middleware(DIMiddleware(session))

    # cancel first so /cancel wins over the add-task state handler
    dp.include_router(cancel_router)
    dp.include_router(tasks_router)

    @dp.error(ExceptionTypeFilter(TelegramBadRequest))
    async def handle_old_callback_query(event: ErrorEvent) -> None:
        """Ignore TelegramBadRequest for old/invalid callback queries (e.g. after bot restart)."""
        msg = str(event.exception).lower()
        if "query is too old" in msg or "query id is invalid" in msg or "response timeout expired" in msg:
            logger.debug("Ignoring old/invalid callback query: %s", event.exception)
            return
        raise event.exception

    try:
        logger.info("Starting polling - PID: %s", pid)
        await dp.start_polling(bot)
    except Exception:
        logger.error("Bot crashed - PID: %s", pid, exc_info=True)
        raise
    finally:
        await session.sync()
        await bot.session.close()
        logger.info("Bot shutdown complete - PID: %s", pid)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

from dataclasses import dataclass
import os
from pathlib import Path

try:
    from dotenv import load_dotenv
    load_dotenv()
except Exception:
    pass

from tasklist.constants import STORE_KEY_ITEMS


@dataclass(frozen=True)
class Settings:
    bot_token: str
    owner_telegram_id: int
    db_path: Path
    store_key: str
    log_level: str


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN", "").strip()
    owner_raw = os.getenv("OWNER_TELEGRAM_ID", "0").strip()
    db_raw = os.getenv("DB_PATH", "data/tasklist.db").strip()
    store_key = os.getenv("STORE_KEY", STORE_KEY_ITEMS).strip() or STORE_KEY_ITEMS
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    if not bot_token:
        raise RuntimeError("BOT_TOKEN missing in .env")
    try:
        owner_id = int(owner_raw)
    except ValueError:
        owner_id = 0
    if owner_id <= 0:
        raise RuntimeError("OWNER_TELEGRAM_ID missing/invalid in .env")

    # db_path may still be relative; the entry point resolves it
    return Settings(
        bot_token=bot_token,
        owner_telegram_id=owner_id,
        db_path=Path(db_raw),
        store_key=store_key,
        log_level=log_level,
    )

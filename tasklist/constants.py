"""
Constants shared by the domain and the Telegram UI.
"""
from __future__ import annotations

# Store key the task list snapshot lives under
STORE_KEY_ITEMS = "items"

# Style classes of a rendered task (status True -> pending, False -> done)
STATUS_CLASS_PENDING = "pending"
STATUS_CLASS_DONE = "done"

# Key that commits an edited draft instead of inserting a line break
ACCEPT_KEY = "Enter"

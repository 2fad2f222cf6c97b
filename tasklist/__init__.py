"""Telegram task list: tasks, bulk selection, full re-render and key/value persistence."""

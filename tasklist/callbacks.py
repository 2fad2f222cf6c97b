# -*- coding: utf-8 -*-
"""
Callback data for the task list keyboard.
Use these instead of hardcoded strings in handlers.
"""
from __future__ import annotations

from typing import Optional


def parse_callback(data: str, expected_parts: int = 3) -> Optional[tuple[str, ...]]:
    """Parse callback data into parts by ':'. Returns None if fewer than expected_parts."""
    parts = data.split(":", expected_parts - 1)
    return tuple(parts) if len(parts) >= expected_parts else None


def parse_position(data: str) -> Optional[int]:
    """Position from 'tl:sel:<pos>', None when missing or not a number."""
    parts = parse_callback(data)
    if parts is None:
        return None
    try:
        pos = int(parts[2])
    except ValueError:
        return None
    return pos if pos >= 0 else None


# ---------------------------------------------------------------------------
# Prefixes (for F.data.startswith(...))
# ---------------------------------------------------------------------------
PREFIX_SELECT = "tl:sel:"  # toggle selection of the task at <pos>


# ---------------------------------------------------------------------------
# Exact actions (for F.data == X)
# ---------------------------------------------------------------------------
LIST_ADD = "tl:add"
LIST_REMOVE_SELECTED = "tl:rm"
LIST_COMPLETE_SELECTED = "tl:done"
LIST_REFRESH = "tl:refresh"

NOOP = "noop"

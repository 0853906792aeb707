"""Shared constants and globals for backend modules."""

from __future__ import annotations

from core import (
    DEFAULT_SETS_PER_EXERCISE,
    DEFAULT_DB_PATH,
    DEFAULT_WEEKLY_TARGET,
    UNGROUPED,
)

__all__ = [
    "DEFAULT_SETS_PER_EXERCISE",
    "DEFAULT_DB_PATH",
    "DEFAULT_WEEKLY_TARGET",
    "UNGROUPED",
]

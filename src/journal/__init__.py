"""
Journal module: entry persistence and analytics.

This module provides:
- JournalEntry model and mood scale
- EntryStore over a swappable storage slot
- weekly stats, streaks, mood trend and achievements
"""

from .analytics import (
    ACHIEVEMENT_CATALOG,
    Achievement,
    Dashboard,
    MoodTrendPoint,
    TagCount,
    WeeklyStats,
    achievements,
    calculate_streak,
    dashboard,
    mood_percentages,
    mood_trend,
    weekly_stats,
)
from .exceptions import ImportFormatError, JournalError, PersistenceError
from .models import JournalEntry, Mood, normalize_tags, parse_entry_date
from .queries import all_tags, filter_entries, sort_newest_first
from .storage import FileSlot, MemorySlot, SqliteSlot, StorageSlot, create_slot
from .store import EntryStore, backup_filename

__all__ = [
    "ACHIEVEMENT_CATALOG",
    "Achievement",
    "Dashboard",
    "EntryStore",
    "FileSlot",
    "ImportFormatError",
    "JournalEntry",
    "JournalError",
    "MemorySlot",
    "Mood",
    "MoodTrendPoint",
    "PersistenceError",
    "SqliteSlot",
    "StorageSlot",
    "TagCount",
    "WeeklyStats",
    "achievements",
    "all_tags",
    "backup_filename",
    "calculate_streak",
    "create_slot",
    "dashboard",
    "filter_entries",
    "mood_percentages",
    "mood_trend",
    "normalize_tags",
    "parse_entry_date",
    "sort_newest_first",
    "weekly_stats",
]

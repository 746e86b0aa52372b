"""Entry list queries: search, tag and mood filters, ordering."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import JournalEntry, Mood, parse_entry_date


def filter_entries(
    entries: Sequence[JournalEntry],
    search: Optional[str] = None,
    tag: Optional[str] = None,
    mood: Optional[Mood | str] = None,
) -> List[JournalEntry]:
    """Entries matching every given filter.

    `search` is a case-insensitive substring match over the text fields.
    """
    needle = search.lower() if search else ""
    wanted_mood = Mood(mood) if mood else None

    def matches(entry: JournalEntry) -> bool:
        if needle and not any(
            needle in text.lower()
            for text in (entry.highlights, entry.challenges, entry.gratitude, entry.free_text)
        ):
            return False
        if tag and tag not in entry.tags:
            return False
        if wanted_mood and entry.mood is not wanted_mood:
            return False
        return True

    return [entry for entry in entries if matches(entry)]


def sort_newest_first(entries: Sequence[JournalEntry]) -> List[JournalEntry]:
    return sorted(entries, key=lambda entry: parse_entry_date(entry.date), reverse=True)


def all_tags(entries: Sequence[JournalEntry]) -> List[str]:
    """Distinct tags across all entries, sorted."""
    return sorted({tag for entry in entries for tag in entry.tags})

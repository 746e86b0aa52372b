"""Journal analytics

Pure functions over an in-memory entry collection:
- day streak walking back from today
- weekly stats (Sunday..Saturday window containing "now")
- per-day mood trend
- achievements, re-evaluated on every call (deleting entries can revoke them)

Every function is total over valid entries, including the empty collection,
and takes an optional `now` so results are deterministic.

Design Reference: DESIGN.md (Analytics Engine)
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .models import JournalEntry, Mood, as_local, parse_entry_date, to_epoch_ms

logger = logging.getLogger(__name__)

TOP_TAGS = 5
NO_DATA_SCORE = 0.0


@dataclass
class TagCount:
    tag: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"tag": self.tag, "count": self.count}


@dataclass
class WeeklyStats:
    """Snapshot of the current week. Never persisted."""

    total_entries: int = 0
    mood_distribution: Dict[Mood, int] = field(
        default_factory=lambda: {mood: 0 for mood in Mood}
    )
    common_tags: List[TagCount] = field(default_factory=list)
    streak: int = 0
    week_start: str = ""
    week_end: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEntries": self.total_entries,
            "moodDistribution": {
                mood.value: count for mood, count in self.mood_distribution.items()
            },
            "commonTags": [tag.to_dict() for tag in self.common_tags],
            "streak": self.streak,
            "weekStart": self.week_start,
            "weekEnd": self.week_end,
        }


@dataclass
class MoodTrendPoint:
    """Average mood for one day; mood_score 0 means no entries that day."""

    date: str
    mood_score: float

    @property
    def has_data(self) -> bool:
        return self.mood_score != NO_DATA_SCORE

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "moodScore": self.mood_score}


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    icon: str
    metric: str  # "entries" | "streak"
    threshold: int


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    unlocked_at: int  # evaluation instant, epoch ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "unlockedAt": self.unlocked_at,
        }


ACHIEVEMENT_CATALOG: Sequence[AchievementDefinition] = (
    AchievementDefinition("first_entry", "First Step", "Wrote your first journal entry", "✨", "entries", 1),
    AchievementDefinition("week_streak", "Week Warrior", "Maintained a 7-day streak", "🔥", "streak", 7),
    AchievementDefinition("month_streak", "Month Master", "Maintained a 30-day streak", "💪", "streak", 30),
    AchievementDefinition("entries_10", "Getting Started", "Wrote 10 journal entries", "📝", "entries", 10),
    AchievementDefinition("entries_50", "Dedicated Writer", "Wrote 50 journal entries", "📚", "entries", 50),
    AchievementDefinition("entries_100", "Journaling Pro", "Wrote 100 journal entries", "🏆", "entries", 100),
)


@dataclass
class Dashboard:
    """Everything the insights view shows, computed in one pass."""

    weekly: WeeklyStats
    achievements: List[Achievement]
    trend: List[MoodTrendPoint]
    total_entries: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weeklyStats": self.weekly.to_dict(),
            "achievements": [achievement.to_dict() for achievement in self.achievements],
            "moodTrend": [point.to_dict() for point in self.trend],
            "totalEntries": self.total_entries,
            "moodPercentages": {
                mood.value: share
                for mood, share in mood_percentages(self.weekly.mood_distribution).items()
            },
        }


def _resolve_now(now: Optional[datetime]) -> datetime:
    return as_local(now) if now is not None else datetime.now()


def _midnight(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def calculate_streak(entries: Sequence[JournalEntry], now: Optional[datetime] = None) -> int:
    """Consecutive days with at least one entry, counting back from today.

    A day without entries ends the streak; several entries on one day count once.
    """
    if not entries:
        return 0

    days = {entry.day for entry in entries}
    cursor = _midnight(_resolve_now(now))
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def week_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Sunday 00:00:00.000 .. Saturday 23:59:59.999 around `now`."""
    current = _resolve_now(now)
    days_since_sunday = (current.weekday() + 1) % 7
    week_start = _midnight(current) - timedelta(days=days_since_sunday)
    week_end = week_start + timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)
    return week_start, week_end


def weekly_stats(entries: Sequence[JournalEntry], now: Optional[datetime] = None) -> WeeklyStats:
    """Counts for the current week; the streak uses the full collection."""
    week_start, week_end = week_window(now)
    week_entries = [
        entry for entry in entries if week_start <= parse_entry_date(entry.date) <= week_end
    ]

    mood_distribution = {mood: 0 for mood in Mood}
    tag_counts: Counter[str] = Counter()
    for entry in week_entries:
        mood_distribution[entry.mood] += 1
        tag_counts.update(entry.tags)

    # most_common keeps first-encountered order between equal counts
    common_tags = [TagCount(tag, count) for tag, count in tag_counts.most_common(TOP_TAGS)]

    return WeeklyStats(
        total_entries=len(week_entries),
        mood_distribution=mood_distribution,
        common_tags=common_tags,
        streak=calculate_streak(entries, now),
        week_start=week_start.isoformat(timespec="milliseconds"),
        week_end=week_end.isoformat(timespec="milliseconds"),
    )


def mood_trend(
    entries: Sequence[JournalEntry], days: int = 7, now: Optional[datetime] = None
) -> List[MoodTrendPoint]:
    """Average mood score per day for the last `days` days, oldest first.

    Entries are matched by the YYYY-MM-DD prefix of their date string.
    """
    if days <= 0:
        return []

    scores_by_day: Dict[str, List[int]] = defaultdict(list)
    for entry in entries:
        scores_by_day[entry.date[:10]].append(entry.mood.score)

    today = _midnight(_resolve_now(now))
    trend: List[MoodTrendPoint] = []
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).strftime("%Y-%m-%d")
        scores = scores_by_day.get(day)
        if scores:
            trend.append(MoodTrendPoint(date=day, mood_score=sum(scores) / len(scores)))
        else:
            trend.append(MoodTrendPoint(date=day, mood_score=NO_DATA_SCORE))
    return trend


def achievements(entries: Sequence[JournalEntry], now: Optional[datetime] = None) -> List[Achievement]:
    """Catalog entries whose metric currently meets the threshold, in catalog order."""
    metrics = {
        "entries": len(entries),
        "streak": calculate_streak(entries, now),
    }
    unlocked_at = to_epoch_ms(_resolve_now(now))
    return [
        Achievement(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            unlocked_at=unlocked_at,
        )
        for definition in ACHIEVEMENT_CATALOG
        if metrics[definition.metric] >= definition.threshold
    ]


def mood_percentages(distribution: Dict[Mood, int]) -> Dict[Mood, float]:
    """Share of each mood in percent; all zero when there are no entries."""
    total = sum(distribution.values())
    return {
        mood: (count / total) * 100 if total > 0 else 0.0
        for mood, count in distribution.items()
    }


def dashboard(
    entries: Sequence[JournalEntry], now: Optional[datetime] = None, trend_days: int = 7
) -> Dashboard:
    now = _resolve_now(now)
    logger.debug("Computing dashboard for %d entries", len(entries))
    return Dashboard(
        weekly=weekly_stats(entries, now),
        achievements=achievements(entries, now),
        trend=mood_trend(entries, trend_days, now),
        total_entries=len(entries),
    )

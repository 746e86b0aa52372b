"""Journal entry model

One JournalEntry is one reflection. Python attributes are snake_case, the
persisted/exported JSON uses the camelCase keys clients already store
(freeText, createdAt, updatedAt).

Design Reference: DESIGN.md (Data model)
Related Classes: EntryStore (store.py), analytics functions (analytics.py)
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Mood(str, Enum):
    """Closed five-value mood scale."""

    AMAZING = "amazing"
    GOOD = "good"
    OKAY = "okay"
    DIFFICULT = "difficult"
    CHALLENGING = "challenging"

    @property
    def score(self) -> int:
        """1 (challenging) .. 5 (amazing)"""
        return MOOD_SCORES[self]

    @classmethod
    def ordered(cls) -> List["Mood"]:
        """Worst to best."""
        return sorted(cls, key=lambda mood: mood.score)


MOOD_SCORES: Dict[Mood, int] = {
    Mood.AMAZING: 5,
    Mood.GOOD: 4,
    Mood.OKAY: 3,
    Mood.DIFFICULT: 2,
    Mood.CHALLENGING: 1,
}

MOOD_EMOJIS: Dict[Mood, str] = {
    Mood.AMAZING: "✨",
    Mood.GOOD: "😊",
    Mood.OKAY: "😌",
    Mood.DIFFICULT: "😔",
    Mood.CHALLENGING: "💙",
}


def as_local(value: datetime) -> datetime:
    """Drop timezone info after converting aware datetimes to local time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_entry_date(value: str) -> datetime:
    """Parse an ISO 8601 entry date into a naive local datetime.

    Raises:
        ValueError: the string is not ISO 8601
    """
    return as_local(datetime.fromisoformat(value))


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim, drop blanks and duplicates, keep first-seen order."""
    seen: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class JournalEntry(BaseModel):
    """A single journal reflection"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Opaque identifier, stable for the entry's lifetime")
    date: str = Field(..., description="ISO 8601 timestamp the entry is about")
    mood: Mood
    highlights: str = ""
    challenges: str = ""
    gratitude: str = ""
    free_text: str = Field(default="", alias="freeText")
    tags: List[str] = Field(default_factory=list)
    emoji: Optional[str] = None
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds")
    updated_at: int = Field(..., alias="updatedAt", description="Epoch milliseconds")

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_entry_date(value)
        return value

    @classmethod
    def new(
        cls,
        mood: Mood | str,
        highlights: str = "",
        challenges: str = "",
        gratitude: str = "",
        free_text: str = "",
        tags: Optional[Iterable[str]] = None,
        emoji: Optional[str] = None,
        date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "JournalEntry":
        """Build a fresh entry dated now (unless `date` is given)."""
        now = now or datetime.now()
        stamp = to_epoch_ms(now)
        return cls(
            id=str(uuid.uuid4()),
            date=date or now.isoformat(timespec="milliseconds"),
            mood=Mood(mood),
            highlights=highlights,
            challenges=challenges,
            gratitude=gratitude,
            free_text=free_text,
            tags=normalize_tags(tags or []),
            emoji=emoji or None,
            created_at=stamp,
            updated_at=stamp,
        )

    def revised(self, **changes: Any) -> "JournalEntry":
        """Copy with `changes` applied; id and created_at never change.

        Raises:
            ValueError: an immutable field was passed
            pydantic.ValidationError: a changed value is invalid
        """
        frozen = {"id", "created_at"} & changes.keys()
        if frozen:
            raise ValueError(f"cannot revise {', '.join(sorted(frozen))}")
        data = self.model_dump()
        data.update(changes)
        return JournalEntry.model_validate(data)

    @property
    def day(self) -> datetime:
        """The entry date truncated to local midnight."""
        return parse_entry_date(self.date).replace(hour=0, minute=0, second=0, microsecond=0)

    def to_dict(self) -> Dict[str, Any]:
        """The persisted camelCase shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

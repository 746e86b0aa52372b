"""Prompt templates for the weekly summary."""

from __future__ import annotations

import json
from typing import Sequence

from src.journal.models import JournalEntry

SUMMARY_KEYS = (
    "weekly_summary",
    "emotional_patterns",
    "weekly_themes",
    "limiting_beliefs",
    "strengths_and_progress",
    "coaching_insights",
    "reflection_questions",
    "next_week_focus",
)

SUMMARY_SYSTEM_PROMPT = """You are a Weekly Journal Insight Coach. You ALWAYS respond in a fixed structured JSON format. Never change the structure. Output only the JSON.

Response format:
{
  "weekly_summary": "",
  "emotional_patterns": [],
  "weekly_themes": [],
  "limiting_beliefs": [],
  "strengths_and_progress": [],
  "coaching_insights": [],
  "reflection_questions": [],
  "next_week_focus": []
}"""


def build_summary_prompt(entries: Sequence[JournalEntry]) -> str:
    """User prompt carrying the serialized entries."""
    keys = ", ".join(SUMMARY_KEYS)
    payload = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
    return (
        "Analyze the following journal entries and provide a structured summary in JSON "
        f"format with keys: {keys}. Each key should be an array of strings except "
        "weekly_summary which is a string.\n\n"
        f"Entries: {payload}"
    )

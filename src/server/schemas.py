"""Pydantic schemas for the relay API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request body for the chat endpoint."""

    message: str = Field(..., min_length=1, description="User message for the assistant")


class ChatResponse(BaseModel):
    """Response body for the chat endpoint."""

    reply: str


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class ErrorResponse(BaseModel):
    """Every failure is returned as {"error": "..."}."""

    error: str


class WeeklySummaryResponse(BaseModel):
    """Documented shape of a summary; the model's JSON is relayed as produced."""

    weekly_summary: str = ""
    emotional_patterns: List[str] = Field(default_factory=list)
    weekly_themes: List[str] = Field(default_factory=list)
    limiting_beliefs: List[str] = Field(default_factory=list)
    strengths_and_progress: List[str] = Field(default_factory=list)
    coaching_insights: List[str] = Field(default_factory=list)
    reflection_questions: List[str] = Field(default_factory=list)
    next_week_focus: List[str] = Field(default_factory=list)

"""LLM provider interface used by the summary relay."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """A remote (or local) text-generation backend."""

    name: str = "base"

    @abstractmethod
    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        """Return the raw model reply, expected to hold one JSON object."""

    @abstractmethod
    async def converse(self, message: str) -> str:
        """Single-turn conversation; returns the model's reply text."""

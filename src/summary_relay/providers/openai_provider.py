"""
OpenAI provider

- weekly summary: one chat completion
- chat: an assistant thread whose run is polled to completion with
  poll_until (bounded attempts, exponential backoff, overall timeout)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from ..exceptions import RelayError
from ..polling import PollPolicy, poll_until
from .base import LLMProvider

logger = logging.getLogger(__name__)

RUN_FAILED_STATUSES = {"failed", "cancelled", "expired", "incomplete", "requires_action"}
NO_RESPONSE = "No response generated"


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions + assistants"""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        assistant_id: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        poll_policy: Optional[PollPolicy] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.assistant_id = assistant_id
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.poll_policy = poll_policy or PollPolicy()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """Created on first use so a missing key only fails the request."""
        if self._client is None:
            if not self.api_key:
                raise RelayError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(api_key=self.api_key)
            logger.info("OpenAI client initialized")
        return self._client

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def converse(self, message: str) -> str:
        if not self.assistant_id:
            raise RelayError("OPENAI_ASSISTANT_ID is not configured")
        client = self.client

        thread = await client.beta.threads.create()
        await client.beta.threads.messages.create(thread.id, role="user", content=message)
        run = await client.beta.threads.runs.create(thread.id, assistant_id=self.assistant_id)
        logger.debug("Started assistant run %s on thread %s", run.id, thread.id)

        await poll_until(
            lambda: client.beta.threads.runs.retrieve(run.id, thread_id=thread.id),
            is_done=lambda state: state.status == "completed",
            is_failed=lambda state: state.status in RUN_FAILED_STATUSES,
            policy=self.poll_policy,
        )

        messages = await client.beta.threads.messages.list(thread.id)
        assistant_message = next(
            (msg for msg in messages.data if msg.role == "assistant"), None
        )
        if assistant_message is None:
            raise RelayError("No assistant response found")
        return _first_text(assistant_message) or NO_RESPONSE


def _first_text(message: Any) -> Optional[str]:
    if not message.content:
        return None
    text = getattr(message.content[0], "text", None)
    return getattr(text, "value", None)

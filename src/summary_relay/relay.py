"""
Summary relay

Stateless bridge between journal clients and a text-generation model:
forwards the entries (or a chat message), returns the model's structured
reply. The only checks are on shape: a non-empty batch in, one parseable JSON
object out.

Design Reference: DESIGN.md (Summary Relay)
Related Classes:
  - providers.LLMProvider: the remote model
  - client.SummaryRelayClient: the HTTP caller side
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, Optional, Sequence, TypeVar

from src.journal.models import JournalEntry

from .exceptions import InvalidRequestError, RelayError, RelayTimeoutError
from .prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from .providers import LLMProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_summary(reply: str) -> Dict[str, Any]:
    """Parse the model reply into a JSON object.

    Raises:
        RelayError: the reply is not a JSON object
    """
    text = reply.strip()
    if text.startswith("```"):
        # ```json ... ``` fences
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON: {e}")
        raise RelayError("Invalid JSON response from AI") from e
    if not isinstance(parsed, dict):
        raise RelayError("Invalid JSON response from AI: expected an object")
    return parsed


class SummaryRelay:
    """Weekly summary and single-turn chat over an LLMProvider."""

    def __init__(self, provider: LLMProvider, timeout: Optional[float] = 120.0):
        """
        Args:
            provider: model backend
            timeout: ceiling in seconds for one upstream call (None = unbounded)
        """
        self.provider = provider
        self.timeout = timeout

    async def summarize(self, entries: Sequence[JournalEntry]) -> Dict[str, Any]:
        """Structured weekly summary of `entries`.

        Raises:
            InvalidRequestError: no entries
            RelayTimeoutError: the model did not answer in time
            RelayError: the model call failed or returned non-JSON
        """
        if not entries:
            raise InvalidRequestError("Invalid or empty journal data", status_code=400)

        logger.info(
            "Generating AI summary for %d entries using %s", len(entries), self.provider.name
        )
        reply = await self._call(
            self.provider.complete_json(SUMMARY_SYSTEM_PROMPT, build_summary_prompt(entries)),
            "Failed to generate summary",
        )
        logger.debug("Assistant reply: %s", reply)
        return parse_summary(reply)

    async def chat(self, message: str) -> str:
        """Single-turn reply to `message`.

        Raises:
            InvalidRequestError: blank or non-string message
            RelayTimeoutError: the model did not answer in time
            RelayError: the model call failed
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidRequestError("Invalid message format", status_code=400)
        return await self._call(self.provider.converse(message), "Failed to generate response")

    async def _call(self, call: Awaitable[T], failure_message: str) -> T:
        try:
            if self.timeout is None:
                return await call
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("%s: no reply within %ss", failure_message, self.timeout)
            raise RelayTimeoutError(f"{failure_message}: model timed out") from exc
        except RelayError:
            raise
        except Exception as exc:
            logger.exception("%s: %s", failure_message, exc)
            raise RelayError(f"{failure_message}: {exc}") from exc

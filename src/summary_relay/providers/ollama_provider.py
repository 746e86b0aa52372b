"""
Ollama provider

Runs the summary against a local Ollama model. The ollama client is
synchronous, so calls are pushed to a worker thread.

Related Classes:
  - config.OllamaConfig: host/model settings
  - relay.SummaryRelay: the caller
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

import ollama

from .base import LLMProvider

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Ollama API provider"""

    name = "ollama"

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        client: Optional[ollama.Client] = None,
    ):
        """
        Args:
            host: Ollama server URL
            model: model name
            temperature: sampling temperature (0.0-1.0)
            max_tokens: maximum tokens to generate
            client: pre-built client (tests)
        """
        self.host = host
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or ollama.Client(host=host)

    def _chat(self, messages: List[Dict[str, str]], return_json: bool) -> str:
        try:
            response = self.client.chat(
                model=self.model,
                messages=messages,
                format="json" if return_json else "",
                options={
                    "temperature": self.temperature,
                    "num_predict": self.max_tokens,
                },
            )
        except Exception as e:
            logger.error(f"Ollama chat error: {e}")
            raise
        return response["message"]["content"]

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return await asyncio.to_thread(self._chat, messages, True)

    async def converse(self, message: str) -> str:
        messages = [{"role": "user", "content": message}]
        return await asyncio.to_thread(self._chat, messages, False)

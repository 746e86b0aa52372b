"""LLM providers for the summary relay."""

from src.mindful_journal.config import Config

from ..polling import PollPolicy
from .base import LLMProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider

__all__ = ["LLMProvider", "OllamaProvider", "OpenAIProvider", "create_provider"]


def create_provider(config: Config) -> LLMProvider:
    """
    Build the provider named by `config.relay.provider`

    Raises:
        ValueError: unknown provider name
    """
    provider = config.relay.provider.lower()
    if provider == "openai":
        return OpenAIProvider(
            api_key=config.openai.api_key,
            assistant_id=config.openai.assistant_id,
            model=config.relay.model,
            temperature=config.relay.temperature,
            max_tokens=config.relay.max_tokens,
            poll_policy=PollPolicy.from_config(config.relay),
        )
    if provider == "ollama":
        return OllamaProvider(
            host=config.ollama.host,
            model=config.ollama.model,
            temperature=config.relay.temperature,
            max_tokens=config.relay.max_tokens,
        )
    raise ValueError(f"Unknown relay provider: {config.relay.provider}")

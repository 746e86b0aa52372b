"""Summary relay: forwards journal entries to a text-generation model.

Design Reference: DESIGN.md (Summary Relay)
"""

from .client import SummaryRelayClient
from .exceptions import InvalidRequestError, RelayBusyError, RelayError, RelayTimeoutError
from .polling import PollPolicy, poll_until
from .prompts import SUMMARY_KEYS, SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from .providers import LLMProvider, OllamaProvider, OpenAIProvider, create_provider
from .relay import SummaryRelay, parse_summary

__all__ = [
    "InvalidRequestError",
    "LLMProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "PollPolicy",
    "RelayBusyError",
    "RelayError",
    "RelayTimeoutError",
    "SUMMARY_KEYS",
    "SUMMARY_SYSTEM_PROMPT",
    "SummaryRelay",
    "SummaryRelayClient",
    "build_summary_prompt",
    "create_provider",
    "parse_summary",
    "poll_until",
]

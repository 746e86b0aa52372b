"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Request

from src.mindful_journal.config import Config
from src.mindful_journal.logger import setup_logger
from src.summary_relay import SummaryRelay, create_provider

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_relay() -> SummaryRelay:
    """Lazily create a singleton SummaryRelay instance."""
    provider = create_provider(config)
    return SummaryRelay(provider, timeout=config.relay.poll_timeout)


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, or None when the body is missing or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None

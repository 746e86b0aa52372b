"""Bounded polling of remote jobs

Remote model runs are polled until they finish, with exponential backoff
between polls, a maximum number of polls and an overall timeout. The wait is
an ordinary coroutine: cancelling the awaiting task abandons it (the remote
job itself keeps running).

Design Reference: DESIGN.md (Summary Relay)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator, Optional, TypeVar

from src.mindful_journal.config import RelayConfig

from .exceptions import RelayError, RelayTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PollPolicy:
    """Backoff and ceilings for one polling loop."""

    initial_interval: float = 1.0
    max_interval: float = 8.0
    backoff_factor: float = 2.0
    max_attempts: int = 30
    timeout: Optional[float] = 120.0

    @classmethod
    def from_config(cls, config: RelayConfig) -> "PollPolicy":
        return cls(
            initial_interval=config.poll_initial_interval,
            max_interval=config.poll_max_interval,
            backoff_factor=config.poll_backoff_factor,
            max_attempts=config.poll_max_attempts,
            timeout=config.poll_timeout,
        )

    def delays(self) -> Iterator[float]:
        """initial, initial*factor, ... capped at max_interval"""
        delay = self.initial_interval
        while True:
            yield delay
            delay = min(delay * self.backoff_factor, self.max_interval)


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    is_failed: Callable[[T], bool] = lambda _: False,
    policy: Optional[PollPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call `fetch` until `is_done` holds for its result.

    Returns:
        the first state for which is_done() is true

    Raises:
        RelayError: is_failed() held for a fetched state
        RelayTimeoutError: max_attempts or timeout was reached first
    """
    policy = policy or PollPolicy()

    async def _poll() -> T:
        delays = policy.delays()
        for attempt in range(1, policy.max_attempts + 1):
            state = await fetch()
            if is_done(state):
                logger.debug("Remote job finished after %d poll(s)", attempt)
                return state
            if is_failed(state):
                raise RelayError("Remote model run failed")
            if attempt < policy.max_attempts:
                await sleep(next(delays))
        raise RelayTimeoutError(
            f"Remote model run did not finish after {policy.max_attempts} polls"
        )

    if policy.timeout is None:
        return await _poll()
    try:
        return await asyncio.wait_for(_poll(), timeout=policy.timeout)
    except asyncio.TimeoutError as exc:
        raise RelayTimeoutError(
            f"Remote model run did not finish within {policy.timeout:g}s"
        ) from exc

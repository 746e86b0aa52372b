"""HTTP client for the summary relay service."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Sequence

import requests

from src.journal.models import JournalEntry

from .exceptions import RelayBusyError, RelayError

logger = logging.getLogger(__name__)


class SummaryRelayClient:
    """
    Caller side of the relay

    Only one request per endpoint may be outstanding; a second call while the
    first is running raises RelayBusyError instead of sending a duplicate.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        timeout: float = 180.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: relay service URL
            timeout: seconds to wait for the relay (summaries can take a while)
            session: HTTP session (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._in_flight = {
            "/api/summary": threading.Lock(),
            "/api/chat": threading.Lock(),
        }

    def summarize(self, entries: Sequence[JournalEntry]) -> Dict[str, Any]:
        """Request the structured weekly summary for `entries`."""
        data = self._post("/api/summary", [entry.to_dict() for entry in entries])
        if not isinstance(data, dict):
            raise RelayError("Unexpected summary response from relay")
        return data

    def chat(self, message: str) -> str:
        data = self._post("/api/chat", {"message": message})
        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise RelayError("Unexpected chat response from relay")
        return reply

    def is_busy(self, path: str = "/api/summary") -> bool:
        return self._in_flight[path].locked()

    def _post(self, path: str, payload: Any) -> Any:
        lock = self._in_flight[path]
        if not lock.acquire(blocking=False):
            raise RelayBusyError(f"A request to {path} is already in progress")
        try:
            try:
                response = self.session.post(
                    f"{self.base_url}{path}", json=payload, timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                logger.error(f"Relay request to {path} failed: {e}")
                raise RelayError(f"Could not reach the summary relay: {e}") from e

            try:
                data = response.json()
            except ValueError as e:
                raise RelayError(
                    f"Unparseable response from relay (HTTP {response.status_code})",
                    status_code=response.status_code,
                ) from e

            if not response.ok:
                message = data.get("error") if isinstance(data, dict) else None
                logger.warning("Relay returned HTTP %s for %s", response.status_code, path)
                raise RelayError(
                    message or f"Relay returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            return data
        finally:
            lock.release()

"""Weekly summary route."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.journal.models import JournalEntry
from src.summary_relay import RelayError, SummaryRelay

from ..dependencies import get_relay, read_json_body
from ..errors import error_response, relay_error_response
from ..schemas import ErrorResponse, WeeklySummaryResponse

logger = logging.getLogger(__name__)

INVALID_JOURNAL_DATA = "Invalid or empty journal data"


def register_summary_routes(app: FastAPI) -> None:
    """Register the AI summary endpoint."""

    @app.post(
        "/api/summary",
        responses={
            200: {"model": WeeklySummaryResponse},
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    async def summary(request: Request, relay: SummaryRelay = Depends(get_relay)) -> JSONResponse:
        """Summarize a non-empty JSON array of journal entries."""
        payload = await read_json_body(request)
        if not isinstance(payload, list) or not payload:
            return error_response(400, INVALID_JOURNAL_DATA)
        try:
            entries = [JournalEntry.model_validate(item) for item in payload]
        except ValidationError as exc:
            logger.warning("Rejected summary request: %s", exc)
            return error_response(400, INVALID_JOURNAL_DATA)

        try:
            result = await relay.summarize(entries)
        except RelayError as exc:
            logger.error("Error generating AI summary: %s", exc)
            return relay_error_response(exc)
        return JSONResponse(content=result)

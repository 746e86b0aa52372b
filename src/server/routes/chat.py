"""Chat-related API routes."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from pydantic import ValidationError

from src.summary_relay import RelayError, SummaryRelay

from ..dependencies import get_relay, read_json_body
from ..errors import error_response, relay_error_response
from ..schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)


def register_chat_routes(app: FastAPI) -> None:
    """Register health and single-turn chat endpoints on the provided app."""

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Simple health check endpoint."""
        return HealthResponse(status="ok")

    @app.post(
        "/api/chat",
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def chat(request: Request, relay: SummaryRelay = Depends(get_relay)):
        """Relay one message to the assistant and return its reply."""
        payload = await read_json_body(request)
        try:
            chat_request = ChatRequest.model_validate(payload)
        except ValidationError:
            return error_response(400, "Invalid message format")

        try:
            reply = await relay.chat(chat_request.message)
        except RelayError as exc:
            logger.error("Assistant chat failed: %s", exc)
            return relay_error_response(exc, "Failed to generate response")
        return ChatResponse(reply=reply)

"""
Error responses for the relay API.

All failures share one shape, {"error": "<message>"}, so clients only ever
look for a single key.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from src.summary_relay import InvalidRequestError, RelayError, RelayTimeoutError


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def relay_error_response(exc: RelayError, default_message: str | None = None) -> JSONResponse:
    """Map a relay failure onto an HTTP status.

    Args:
        exc: the relay failure
        default_message: replaces the exception text for server-side errors
    """
    if isinstance(exc, InvalidRequestError):
        return error_response(400, str(exc))
    if isinstance(exc, RelayTimeoutError):
        return error_response(504, default_message or str(exc))
    return error_response(500, default_message or str(exc) or "Failed to generate summary")

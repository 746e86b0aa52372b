"""Summary relay exceptions

Design Reference: DESIGN.md (Error handling)
"""

from typing import Optional


class RelayError(Exception):
    """The remote summarization/chat call failed or returned unusable content."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidRequestError(RelayError):
    """The caller sent an empty or malformed payload."""

    pass


class RelayTimeoutError(RelayError):
    """The remote model did not finish within the poll/timeout ceiling."""

    pass


class RelayBusyError(RelayError):
    """A request of the same kind is already outstanding."""

    pass

"""Route registration helpers."""

from .chat import register_chat_routes
from .summary import register_summary_routes

__all__ = [
    "register_chat_routes",
    "register_summary_routes",
]

"""
Relay service application

Stateless HTTP bridge in front of the summary relay: it keeps no journal data,
every request carries the entries it is about.

Design Reference: DESIGN.md (HTTP service)
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.mindful_journal.config import Config

from .dependencies import config as app_config
from .routes import register_chat_routes, register_summary_routes

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the relay app with CORS and the summary/chat routes."""
    config = config or app_config
    app = FastAPI(
        title="Mindful Journal Relay",
        description="Weekly journal summaries and single-turn chat over an LLM",
        version="1.0.0",
    )

    # credentials cannot be combined with a wildcard origin
    wildcard = "*" in config.server.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_chat_routes(app)
    register_summary_routes(app)

    logger.info(
        "Relay app ready (provider=%s, model=%s)", config.relay.provider, config.relay.model
    )
    return app


app = create_app()

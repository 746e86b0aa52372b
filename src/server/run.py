"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .dependencies import config


def main() -> None:
    """Run the relay server."""
    uvicorn.run(
        "src.server.app:app",
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()

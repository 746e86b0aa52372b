"""Application-wide configuration and logging for the mindful journal."""

from .config import (
    ClientConfig,
    Config,
    OllamaConfig,
    OpenAIConfig,
    RelayConfig,
    ServerConfig,
    StorageConfig,
)
from .logger import setup_logger

__all__ = [
    "ClientConfig",
    "Config",
    "OllamaConfig",
    "OpenAIConfig",
    "RelayConfig",
    "ServerConfig",
    "StorageConfig",
    "setup_logger",
]

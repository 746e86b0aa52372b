"""
Configuration management

Design Reference: DESIGN.md (Configuration)
Related Classes:
  - src.journal.storage.create_slot: consumes StorageConfig
  - src.summary_relay.providers: consume RelayConfig / OpenAIConfig / OllamaConfig
  - src.server.dependencies: builds the relay from this configuration
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "app_config.yaml"


@dataclass
class StorageConfig:
    """Where the single journal slot lives."""

    backend: str = "sqlite"  # sqlite | file | memory
    path: str = "data/mindful_journal.db"
    key: str = "journal_entries"
    max_bytes: Optional[int] = None


@dataclass
class RelayConfig:
    """Summary relay settings, including the bounded poll policy."""

    provider: str = "openai"  # openai | ollama
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 2000
    poll_initial_interval: float = 1.0
    poll_max_interval: float = 8.0
    poll_backoff_factor: float = 2.0
    poll_max_attempts: int = 30
    poll_timeout: float = 120.0


@dataclass
class OpenAIConfig:
    """OpenAI credentials. The API key is only ever read from the environment."""

    api_key: Optional[str] = None
    assistant_id: Optional[str] = None


@dataclass
class OllamaConfig:
    """Ollama API settings"""

    host: str = "http://localhost:11434"
    model: str = "qwen3:8b"


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class ClientConfig:
    """How journal clients reach the relay service."""

    relay_url: str = "http://localhost:3001"
    timeout: float = 180.0


@dataclass
class Config:
    """Application configuration"""

    storage: StorageConfig = None  # type: ignore
    relay: RelayConfig = None  # type: ignore
    openai: OpenAIConfig = None  # type: ignore
    ollama: OllamaConfig = None  # type: ignore
    server: ServerConfig = None  # type: ignore
    client: ClientConfig = None  # type: ignore

    log_level: str = "INFO"
    log_file: str = "logs/mindful_journal.log"

    def __post_init__(self):
        if self.storage is None:
            self.storage = StorageConfig()
        if self.relay is None:
            self.relay = RelayConfig()
        if self.openai is None:
            self.openai = OpenAIConfig()
        if self.ollama is None:
            self.ollama = OllamaConfig()
        if self.server is None:
            self.server = ServerConfig()
        if self.client is None:
            self.client = ClientConfig()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """Load settings from YAML, then apply environment overrides.

        Args:
            config_path: settings file (defaults to config/app_config.yaml)

        Returns:
            Config: the loaded configuration
        """
        load_dotenv()
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        yaml_data: Dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
        else:
            logger.warning("Config file %s not found, using defaults", config_path)

        storage_data = yaml_data.get("storage") or {}
        relay_data = yaml_data.get("relay") or {}
        poll_data = relay_data.get("poll") or {}
        openai_data = yaml_data.get("openai") or {}
        ollama_data = yaml_data.get("ollama") or {}
        server_data = yaml_data.get("server") or {}
        client_data = yaml_data.get("client") or {}
        log_data = yaml_data.get("log") or {}

        config = cls(
            storage=StorageConfig(
                backend=storage_data.get("backend", "sqlite"),
                path=storage_data.get("path", "data/mindful_journal.db"),
                key=storage_data.get("key", "journal_entries"),
                max_bytes=storage_data.get("max_bytes"),
            ),
            relay=RelayConfig(
                provider=relay_data.get("provider", "openai"),
                model=relay_data.get("model", "gpt-4o-mini"),
                temperature=relay_data.get("temperature", 0.7),
                max_tokens=relay_data.get("max_tokens", 2000),
                poll_initial_interval=poll_data.get("initial_interval", 1.0),
                poll_max_interval=poll_data.get("max_interval", 8.0),
                poll_backoff_factor=poll_data.get("backoff_factor", 2.0),
                poll_max_attempts=poll_data.get("max_attempts", 30),
                poll_timeout=poll_data.get("timeout", 120.0),
            ),
            openai=OpenAIConfig(assistant_id=openai_data.get("assistant_id")),
            ollama=OllamaConfig(
                host=ollama_data.get("host", "http://localhost:11434"),
                model=ollama_data.get("model", "qwen3:8b"),
            ),
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=server_data.get("port", 3001),
                cors_origins=server_data.get("cors_origins", ["*"]),
            ),
            client=ClientConfig(
                relay_url=client_data.get("relay_url", "http://localhost:3001"),
                timeout=client_data.get("timeout", 180.0),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/mindful_journal.log"),
        )
        config._apply_env_overrides()
        return config

    @classmethod
    def from_env(cls) -> "Config":
        """Load settings purely from environment variables."""
        load_dotenv()
        max_bytes = os.getenv("MINDFUL_JOURNAL_MAX_BYTES")
        return cls(
            storage=StorageConfig(
                backend=os.getenv("MINDFUL_JOURNAL_STORAGE", "sqlite"),
                path=os.getenv("MINDFUL_JOURNAL_DB_PATH", "data/mindful_journal.db"),
                key=os.getenv("MINDFUL_JOURNAL_SLOT_KEY", "journal_entries"),
                max_bytes=int(max_bytes) if max_bytes else None,
            ),
            relay=RelayConfig(
                provider=os.getenv("RELAY_PROVIDER", "openai"),
                model=os.getenv("RELAY_MODEL", "gpt-4o-mini"),
                temperature=float(os.getenv("RELAY_TEMPERATURE", "0.7")),
                max_tokens=int(os.getenv("RELAY_MAX_TOKENS", "2000")),
                poll_timeout=float(os.getenv("RELAY_POLL_TIMEOUT", "120")),
            ),
            openai=OpenAIConfig(
                api_key=os.getenv("OPENAI_API_KEY"),
                assistant_id=os.getenv("OPENAI_ASSISTANT_ID"),
            ),
            ollama=OllamaConfig(
                host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
                model=os.getenv("OLLAMA_MODEL", "qwen3:8b"),
            ),
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3001")),
            ),
            client=ClientConfig(
                relay_url=os.getenv("RELAY_URL", "http://localhost:3001"),
                timeout=float(os.getenv("RELAY_CLIENT_TIMEOUT", "180")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/mindful_journal.log"),
        )

    def _apply_env_overrides(self) -> None:
        """Secrets and deployment knobs always come from the environment."""
        self.openai.api_key = os.getenv("OPENAI_API_KEY", self.openai.api_key)
        self.openai.assistant_id = os.getenv("OPENAI_ASSISTANT_ID", self.openai.assistant_id)
        if os.getenv("PORT"):
            self.server.port = int(os.environ["PORT"])
        if os.getenv("MINDFUL_JOURNAL_DB_PATH"):
            self.storage.path = os.environ["MINDFUL_JOURNAL_DB_PATH"]
        if os.getenv("RELAY_URL"):
            self.client.relay_url = os.environ["RELAY_URL"]
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

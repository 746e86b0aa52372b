from pathlib import Path

import pytest

from src.mindful_journal.config import DEFAULT_CONFIG_PATH, Config
from src.mindful_journal.logger import setup_logger

ENV_KEYS = [
    "OPENAI_API_KEY",
    "OPENAI_ASSISTANT_ID",
    "PORT",
    "MINDFUL_JOURNAL_DB_PATH",
    "RELAY_URL",
    "LOG_LEVEL",
    "RELAY_PROVIDER",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_default_config_file_loads():
    assert DEFAULT_CONFIG_PATH.exists()
    config = Config.from_yaml()

    assert config.server.port == 3001
    assert config.relay.provider == "openai"
    assert config.storage.backend == "sqlite"
    assert config.openai.api_key is None


def test_from_yaml_reads_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
storage:
  backend: file
  path: /tmp/journal.json
  max_bytes: 1024
relay:
  provider: ollama
  temperature: 0.2
  poll:
    max_attempts: 3
    timeout: 9.5
ollama:
  model: llama3
server:
  port: 8080
log:
  level: DEBUG
""",
        encoding="utf-8",
    )

    config = Config.from_yaml(path)

    assert config.storage.backend == "file"
    assert config.storage.max_bytes == 1024
    assert config.relay.provider == "ollama"
    assert config.relay.temperature == 0.2
    assert config.relay.poll_max_attempts == 3
    assert config.relay.poll_timeout == 9.5
    assert config.relay.poll_initial_interval == 1.0
    assert config.ollama.model == "llama3"
    assert config.server.port == 8080
    assert config.client.relay_url == "http://localhost:3001"
    assert config.log_level == "DEBUG"


def test_missing_file_uses_defaults(tmp_path):
    config = Config.from_yaml(tmp_path / "absent.yaml")

    assert config.server.port == 3001
    assert config.storage.path == "data/mindful_journal.db"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_ASSISTANT_ID", "asst_123")
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("MINDFUL_JOURNAL_DB_PATH", str(tmp_path / "env.db"))

    config = Config.from_yaml(Path(tmp_path / "absent.yaml"))

    assert config.openai.api_key == "sk-test"
    assert config.openai.assistant_id == "asst_123"
    assert config.server.port == 4000
    assert config.storage.path == str(tmp_path / "env.db")


def test_from_env(monkeypatch):
    monkeypatch.setenv("RELAY_PROVIDER", "ollama")
    monkeypatch.setenv("PORT", "5000")

    config = Config.from_env()

    assert config.relay.provider == "ollama"
    assert config.server.port == 5000
    assert config.storage.backend == "sqlite"


def test_cors_origins_default_and_override(tmp_path):
    assert Config().server.cors_origins == ["*"]

    path = tmp_path / "config.yaml"
    path.write_text("server:\n  cors_origins:\n    - http://localhost:5173\n", encoding="utf-8")
    assert Config.from_yaml(path).server.cors_origins == ["http://localhost:5173"]


def test_setup_logger_rejects_unknown_level(tmp_path):
    with pytest.raises(ValueError):
        setup_logger(log_level="LOUD", log_file=str(tmp_path / "logs" / "app.log"))


def test_setup_logger_creates_log_directory(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    setup_logger(log_level="debug", log_file=str(log_file))
    assert log_file.parent.is_dir()


def test_empty_sections_fall_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage:\nrelay:\nserver:\nlog:\n", encoding="utf-8")

    config = Config.from_yaml(path)

    assert config.storage.backend == "sqlite"
    assert config.relay.poll_max_attempts == 30
    assert config.server.port == 3001
    assert config.log_level == "INFO"


def test_empty_poll_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("relay:\n  provider: ollama\n  poll:\n", encoding="utf-8")

    config = Config.from_yaml(path)

    assert config.relay.provider == "ollama"
    assert config.relay.poll_timeout == 120.0

"""
Logging setup

Design Reference: DESIGN.md (Logging)
"""

import logging
from pathlib import Path

# HTTP client libraries log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def setup_logger(log_level: str = "INFO", log_file: str = "logs/mindful_journal.log") -> None:
    """
    Configure the root logger for the relay service.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: path of the log file (parent directories are created)

    Raises:
        ValueError: unknown log level
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

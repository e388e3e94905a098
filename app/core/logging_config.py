"""
Logging setup for the EmploySmart API.

Console output for the hosting platform plus a rotating file for local
debugging. Modules log through ``logging.getLogger(__name__)``.
"""
import logging
import sys
from dataclasses import asdict, is_dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("uvicorn.access", "stripe", "google", "google.auth", "urllib3", "httpx", "openai")

SENSITIVE_KEYS = ("password", "token", "secret", "key", "credentials", "database_url")
REDACTED = "***REDACTED***"


def setup_logging(log_level: str = "INFO", log_dir: str = "logs", log_to_file: bool = True):
    """
    Configure the root logger once at startup.

    Args:
        log_level: Logging level name, unknown names fall back to INFO
        log_dir: Directory for ``employsmart.log``
        log_to_file: Disable on read-only filesystems
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / "employsmart.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def sanitize_log_data(data: Any) -> Any:
    """
    Copy of ``data`` with secret-looking values redacted, nested dicts included.

    Dataclasses (such as ``Settings``) are converted to dicts first.
    """
    if is_dataclass(data) and not isinstance(data, type):
        data = asdict(data)
    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS):
            sanitized[key] = REDACTED if value else value
        else:
            sanitized[key] = sanitize_log_data(value)
    return sanitized

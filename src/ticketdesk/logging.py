"""Logging setup for TicketDesk.

Every component logs under the ``ticketdesk`` hierarchy and shares one rotating
log file. Raw webhook bodies go to a separate ``ticketdesk.integration.raw``
logger that stays quiet unless explicitly enabled, because the client-data
webhook returns whole client records.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "ticketdesk"
RAW_RESPONSE_LOGGER = "ticketdesk.integration.raw"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "ticketdesk.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "INFO"
RAW_RESPONSE_MAX_LENGTH = 5000

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request line at INFO, webhook secret included.
_HTTP_LOGGERS = ("httpx", "httpcore")

_SECRET_PATTERNS = [
    # The secret of a webhook URL is its last path segment.
    (re.compile(r"(https?://hook\.[\w.-]+/)[A-Za-z0-9_-]+"), r"\1[WEBHOOK_TOKEN]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
]


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
    raw_responses: bool | None = None,
) -> logging.Logger:
    """Configure the ticketdesk logger with a rotating file and optional console.

    Args:
        log_dir: Log directory, else TICKETDESK_LOG_DIR, else ./logs
        log_file: File name inside log_dir
        max_bytes: Size at which the file rotates
        backup_count: Rotated files kept
        level: Level name, else TICKETDESK_LOG_LEVEL, else INFO
        console: Also log to stderr
        raw_responses: Log raw webhook bodies (sanitized and truncated) at DEBUG,
            else TICKETDESK_LOG_RAW_RESPONSES

    Returns:
        The ticketdesk logger.
    """
    log_path = Path(log_dir or os.environ.get("TICKETDESK_LOG_DIR", DEFAULT_LOG_DIR))
    log_path.mkdir(parents=True, exist_ok=True)
    level = level or os.environ.get("TICKETDESK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    if raw_responses is None:
        raw_responses = _env_flag("TICKETDESK_LOG_RAW_RESPONSES")

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # Handlers carry no level of their own: logger levels decide, so the raw
    # logger can emit DEBUG while the rest stays at INFO.
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.getLogger(RAW_RESPONSE_LOGGER).setLevel(
        logging.DEBUG if raw_responses else logging.INFO
    )
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(
        "TicketDesk logging initialized (level=%s, file=%s, raw_responses=%s)",
        level,
        log_path / log_file,
        raw_responses,
    )
    return logger


def truncate_output(output: str, max_length: int = RAW_RESPONSE_MAX_LENGTH) -> str:
    """Cut output to max_length, noting how much was dropped."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Redact webhook secrets and credentials."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def log_raw_response(label: str, body: str, max_length: int = RAW_RESPONSE_MAX_LENGTH) -> None:
    """Log a raw webhook body on the raw-response logger, sanitized and truncated."""
    raw_logger = logging.getLogger(RAW_RESPONSE_LOGGER)
    if raw_logger.isEnabledFor(logging.DEBUG):
        raw_logger.debug("%s: %s", label, truncate_output(sanitize_for_log(body), max_length))

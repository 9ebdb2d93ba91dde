"""Logging configuration for the Vehicle Reviews domain.

Every event carries ``bounded_context="vehicle_reviews"``. Request handlers
bind the review being acted on with :func:`bind_review`, so unit of work,
ledger and store failures logged deeper down name the review without each
call site repeating it.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

BOUNDED_CONTEXT = "vehicle_reviews"

# Identifier fields arrive as UUIDs or Protean identifiers depending on the caller
_ID_KEYS = ("review_id", "vehicle_id", "author_id", "voter_id", "reporter_id", "moderator_id")


def get_log_level() -> str:
    """Get log level based on environment."""
    env = (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()

    level_map = {
        "production": "INFO",
        "staging": "INFO",
        "development": "DEBUG",
        "test": "WARNING",
    }

    return os.getenv("LOG_LEVEL", level_map.get(env, "INFO")).upper()


def add_bounded_context(logger, method_name, event_dict):
    event_dict.setdefault("bounded_context", BOUNDED_CONTEXT)
    return event_dict


def normalize_review_ids(logger, method_name, event_dict):
    """Render identifier fields as plain strings so log lines join on them."""
    for key in _ID_KEYS:
        value = event_dict.get(key)
        if value is not None and not isinstance(value, str):
            event_dict[key] = str(value)
    return event_dict


def setup_stdlib_logging(log_dir: Path | None = None) -> None:
    """Route stdlib logging to stdout and rotating review log files."""
    log_level = get_log_level()

    log_dir = log_dir or Path(os.getenv("REVIEWS_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / "vehicle_reviews.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)

    error_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / "vehicle_reviews_error.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(error_handler)

    # Protean logs every unit of work at INFO
    logging.getLogger("protean").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def review_processors() -> list:
    """Processors shared by every renderer, ending just before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_bounded_context,
        normalize_review_ids,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_structlog() -> None:
    """Configure structlog for structured logging."""
    env = (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()

    processors = review_processors()
    if env in ["production", "staging"]:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging()
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Add context variables that will be included in all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def bind_review(review_id) -> None:
    """Tag the rest of the current request's log lines with ``review_id``."""
    structlog.contextvars.bind_contextvars(review_id=str(review_id))


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()

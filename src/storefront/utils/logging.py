"""Logging configuration for the storefront domain.

Standard library handlers carry the output: stdout, ``storefront.log`` and
``storefront_error.log`` under ``LOG_DIR``, the files rotating at 10 MB.
structlog shapes every record: JSON in production and staging, a rich
console rendering everywhere else.

Checkout requests carry card details. ``mask_card_details`` runs in every
chain so that card numbers, expiry dates and CVVs never reach a handler,
including when they arrive nested inside request validation errors.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from storefront.config import get_settings

LOG_FILE = "storefront.log"
ERROR_LOG_FILE = "storefront_error.log"

LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Chatty third-party loggers seen under uvicorn and the test client
QUIET_LOGGERS = ("urllib3", "asyncio", "httpx", "httpcore", "multipart", "sqlalchemy.engine", "faker")

CARD_FIELDS = frozenset({"card_number", "number", "cvv", "expiry"})
MASK = "***"


def get_log_level(environment: str | None = None) -> str:
    """LOG_LEVEL wins; otherwise the level for the environment, INFO if unknown."""
    environment = environment or get_settings().environment
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENVIRONMENT.get(environment, "INFO")).upper()


def _mask(field: str, value: Any) -> Any:
    if value in (None, ""):
        return value
    if field in ("card_number", "number"):
        digits = "".join(ch for ch in str(value) if ch.isdigit())
        return f"{MASK}{digits[-4:]}" if len(digits) > 4 else MASK
    return MASK


def _scrub(value: Any) -> Any:
    if isinstance(value, dict):
        scrubbed = {}
        for key, item in value.items():
            scrubbed[key] = _mask(key, item) if key in CARD_FIELDS and not isinstance(item, dict) else _scrub(item)

        # pydantic errors carry the rejected value under "input" and the field path under "loc"
        loc = value.get("loc")
        if "input" in value and isinstance(loc, list | tuple) and loc and loc[-1] in CARD_FIELDS:
            scrubbed["input"] = _mask(str(loc[-1]), value["input"])
        return scrubbed
    if isinstance(value, list | tuple):
        return type(value)(_scrub(item) for item in value)
    return value


def mask_card_details(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor hiding card data anywhere in the event."""
    return _scrub(event_dict)


def _file_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(environment: str) -> None:
    level = get_log_level(environment)
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _file_handler(log_dir / LOG_FILE, level),
        _file_handler(log_dir / ERROR_LOG_FILE, logging.ERROR),
    ]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_processors(environment: str) -> list:
    """The structlog chain for ``environment``, renderer last."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        mask_card_details,
    ]

    if environment in ("production", "staging"):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        traceback_formatter = structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4)
        processors.append(structlog.dev.ConsoleRenderer(colors=True, exception_formatter=traceback_formatter))
    return processors


def configure_logging() -> None:
    """Configure stdlib handlers and structlog for the current environment."""
    environment = get_settings().environment
    setup_stdlib_logging(environment)
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values into every following log line of this request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()

"""Structured logging for the API process and Celery workers."""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

from .config import settings

# Libraries that log every broker heartbeat or connection at INFO.
_NOISY_LOGGERS = ("celery.worker.consumer", "kombu", "redis", "urllib3")


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = settings.log_level or (logging.DEBUG if settings.debug else logging.INFO)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        # getLevelName maps unknown names to "Level <NAME>".
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_logging(level: int | str | None = None) -> None:
    """Route structlog through stdlib logging and render JSON lines on stdout."""

    log_level = _resolve_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


@contextmanager
def bound_log_context(**values: Any) -> Iterator[None]:
    """Attach ``values`` to every log line emitted inside the block."""

    with structlog.contextvars.bound_contextvars(**values):
        yield


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or "critical_cache")

# crud_scaffold/core/log.py

"""
Logging for the CRUD scaffold.

``configure_logging`` sets up structlog once per process (JSON output in
production, colored console output in development). Components do not use a
module-level logger: they receive a ``Log`` instance at construction and call

    log.debug("Successfully found", "User/read", id=42)
    log.error("Error in reading", "User/read", error=exc, id=42)

The second positional argument is a tag naming the call site; keyword
arguments are attached to the event as structured fields. Request-scoped
context (such as ``request_id``) bound with ``structlog.contextvars`` is
merged into every event.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog

from crud_scaffold.config import Settings


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog and the standard logging library.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Uvicorn / SQLAlchemy log through the standard library.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


class Log:
    """
    Thin logging facade handed to daos, services and controllers.
    """

    def __init__(self, name: Optional[str] = None, logger: Any = None) -> None:
        self.name = name
        self._logger = logger if logger is not None else structlog.get_logger(name)

    @property
    def logger(self) -> Any:
        return self._logger

    def _fields(self, tag: Optional[str], meta: dict) -> dict:
        if tag is not None:
            meta["tag"] = tag
        return meta

    def info(self, message: str, tag: Optional[str] = None, **meta: Any) -> None:
        self._logger.info(message, **self._fields(tag, meta))

    def debug(self, message: str, tag: Optional[str] = None, **meta: Any) -> None:
        self._logger.debug(message, **self._fields(tag, meta))

    def warn(self, message: str, tag: Optional[str] = None, **meta: Any) -> None:
        self._logger.warning(message, **self._fields(tag, meta))

    def error(
        self,
        message: str,
        tag: Optional[str] = None,
        error: Optional[BaseException] = None,
        **meta: Any,
    ) -> None:
        if error is not None:
            meta["exc_info"] = error
        self._logger.error(message, **self._fields(tag, meta))

    def fatal(self, message: str, tag: Optional[str] = None, **meta: Any) -> None:
        self._logger.critical(message, **self._fields(tag, meta))


__all__ = ["configure_logging", "Log"]

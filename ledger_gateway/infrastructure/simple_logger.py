"""Logger adapter over the standard logging module."""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..ports.logger import LoggerPort
from .config import LogContext

CONTEXT_ATTR = "gateway_context"


class ContextFormatter(logging.Formatter):
    """Appends a record's gateway context as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = getattr(record, CONTEXT_ATTR, None)
        if context:
            text += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return text


class SimpleLogger(LoggerPort):
    """LoggerPort backed by a named ``logging.Logger``.

    Bound fields are held as a :class:`LogContext`. Each record receives the
    bound fields merged with the call's fields, both as individual ``extra``
    attributes and collected under ``gateway_context`` for the formatter.
    """

    def __init__(
        self,
        name: str = "ledger_gateway",
        level: int = logging.INFO,
        context: LogContext | None = None,
    ):
        """Initialize the logger.

        Args:
            name: Logger name (default: "ledger_gateway")
            level: Logging level (default: INFO)
            context: Fields attached to every record
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._context = context or LogContext()

        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                ContextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self._logger.addHandler(handler)

    @property
    def context(self) -> LogContext:
        return self._context

    def bind(self, **fields: Any) -> SimpleLogger:
        bound = copy.copy(self)
        bound._context = LogContext(**{**self._context.model_dump(), **fields})
        return bound

    def log(self, level: int, message: str, **fields: Any) -> None:
        record_fields = {
            **self._context.to_dict(),
            **{k: v for k, v in fields.items() if v is not None},
        }
        self._logger.log(level, message, extra={**record_fields, CONTEXT_ATTR: record_fields})

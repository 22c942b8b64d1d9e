"""Logger port for structured gateway diagnostics."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Structured logger the bootstrap reports through.

    Keyword fields (msp id, endpoint, state, error code) travel with each
    record; :meth:`bind` returns a logger that carries fields into every
    later call. The surrounding process decides where records end up.
    """

    @abstractmethod
    def log(self, level: int, message: str, **fields: Any) -> None:
        """Emit one record at a ``logging`` level."""
        ...

    @abstractmethod
    def bind(self, **fields: Any) -> LoggerPort:
        """Return a logger that adds ``fields`` to every record."""
        ...

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

"""
Event observers for gateway components.

Components never talk to a logging backend directly; they emit events through
a GatewayObserver. LoggingObserver (the default) forwards to the standard
logging module.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pubchem_gateway.context import RequestContext

# =============================================================================
# Abstract Observer Interface
# =============================================================================


class GatewayObserver(ABC):
    """Abstract observer interface."""

    @abstractmethod
    def emit(
        self,
        level: int,
        message: str,
        context: RequestContext | None = None,
        **fields: Any,
    ) -> None:
        """Record one event."""
        pass

    def debug(self, message: str, context: RequestContext | None = None, **fields: Any) -> None:
        self.emit(logging.DEBUG, message, context, **fields)

    def info(self, message: str, context: RequestContext | None = None, **fields: Any) -> None:
        self.emit(logging.INFO, message, context, **fields)

    def warning(self, message: str, context: RequestContext | None = None, **fields: Any) -> None:
        self.emit(logging.WARNING, message, context, **fields)

    def error(self, message: str, context: RequestContext | None = None, **fields: Any) -> None:
        self.emit(logging.ERROR, message, context, **fields)


# =============================================================================
# Logging Observer
# =============================================================================


class LoggingObserver(GatewayObserver):
    """
    Observer backed by the standard logging module.

    Event fields and the request context are attached to the record under
    the ``gateway`` attribute so formatters and handlers can pick them up
    without clashing with LogRecord's own attributes.
    """

    def __init__(self, logger: logging.Logger | str | None = None):
        if logger is None or isinstance(logger, str):
            logger = logging.getLogger(logger or "pubchem_gateway")
        self._logger = logger

    def emit(
        self,
        level: int,
        message: str,
        context: RequestContext | None = None,
        **fields: Any,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload = context.as_log_fields() if context else {}
        payload.update(fields)
        self._logger.log(level, message, extra={"gateway": payload})

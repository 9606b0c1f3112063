"""Logging for the sync history service.

All modules log through ``logger`` (or a child obtained via
``logger.with_context``) so that identifying dimensions such as the
request id or job id travel with every record.

Usage:
    from synchistory.core.logging import logger

    logger.info("Listing jobs")
    job_logger = logger.with_context(job_id="42")
    job_logger.warning("Log file missing")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

from synchistory.core.config import settings

_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()) | {
    "message",
    "asctime",
}


class JSONFormatter(logging.Formatter):
    """Single-line JSON records for dev/prd log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dict of dimensions merged into every record."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None):
        super().__init__(logger, dict(dimensions or {}))

    @property
    def dimensions(self) -> dict[str, Any]:
        """The dimensions attached to this logger."""
        return dict(self.extra)

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions."""
        merged = {**self.extra, **{k: v for k, v in dimensions.items() if v is not None}}
        return ContextualLogger(self.logger, merged)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, Any]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def _configure_base_logger() -> logging.Logger:
    base = logging.getLogger("synchistory")
    base.setLevel(settings.LOG_LEVEL.upper())
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.ENVIRONMENT.is_local:
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
        else:
            handler.setFormatter(JSONFormatter())
        base.addHandler(handler)
    return base


logger = ContextualLogger(_configure_base_logger())

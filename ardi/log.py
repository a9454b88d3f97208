"""Logging setup for ardi: stdlib logging with key=value context fields."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "ardi"


def _format_value(value) -> str:
    text = str(value)
    if not text or any(c.isspace() or c in '"=' for c in text):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class FieldsFormatter(logging.Formatter):
    """Render records as ``level=info msg="..." key=value ...``.

    Context fields come from ``extra={"fields": {...}}`` on the record.
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"level={record.levelname.lower()}",
            f"msg={_format_value(record.getMessage())}",
        ]
        fields = getattr(record, "fields", None) or {}
        for key in sorted(fields):
            parts.append(f"{key.replace(' ', '-')}={_format_value(fields[key])}")
        if record.exc_info:
            parts.append(f"exc={_format_value(self.formatException(record.exc_info))}")
        return " ".join(parts)


class FieldsAdapter(logging.LoggerAdapter):
    """Logger adapter that binds context fields to every record.

    Per-call fields passed as ``extra={"fields": {...}}`` are merged over
    the bound ones.
    """

    def __init__(self, logger: logging.Logger, fields: dict | None = None):
        super().__init__(logger, {"fields": dict(fields or {})})

    def process(self, msg, kwargs):
        extra = kwargs.get("extra") or {}
        merged = {**self.extra["fields"], **extra.get("fields", {})}
        kwargs["extra"] = {**extra, "fields": merged}
        return msg, kwargs

    def bind(self, **fields) -> FieldsAdapter:
        """Return a new adapter with additional bound fields."""
        return FieldsAdapter(self.logger, {**self.extra["fields"], **fields})

    def with_error(self, error) -> FieldsAdapter:
        """Return a new adapter carrying ``error`` as a field."""
        return self.bind(error=error)


def get_logger(name: str = LOGGER_NAME, **fields) -> FieldsAdapter:
    return FieldsAdapter(logging.getLogger(name), fields)


def configure_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Attach a single stderr handler to the ``ardi`` logger.

    Safe to call repeatedly; previous handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(FieldsFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger

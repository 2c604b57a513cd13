"""Structured logging for ShopSense.

Every record is written as one JSON line. Anything passed as
``extra={"context": {...}}`` is nested under ``context``. Configured API keys
are scrubbed from messages and context before output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

LOGGER_NAMESPACE = "shopsense"
REDACTED = "[redacted]"

# Third-party loggers that only repeat what our own records already say.
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class SecretRedactor:
    """Replaces known secret values in strings and nested context dicts."""

    def __init__(self, secrets: Iterable[Optional[str]] = ()):
        self.secrets = [s for s in secrets if s]

    def scrub(self, value: Any) -> Any:
        if not self.secrets:
            return value
        if isinstance(value, str):
            for secret in self.secrets:
                value = value.replace(secret, REDACTED)
            return value
        if isinstance(value, dict):
            return {key: self.scrub(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.scrub(item) for item in value]
        return value


class JSONFormatter(logging.Formatter):
    def __init__(self, redactor: Optional[SecretRedactor] = None):
        super().__init__()
        self.redactor = redactor or SecretRedactor()

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self.redactor.scrub(record.getMessage()),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = self.redactor.scrub(context)

        if record.exc_info:
            entry["exception"] = self.redactor.scrub(self.formatException(record.exc_info))

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", secrets: Iterable[Optional[str]] = ()) -> None:
    """Route all logging to stdout as JSON. ``secrets`` are never written out."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in root.handlers[:]:
        root.removeHandler(existing)

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(JSONFormatter(SecretRedactor(secrets)))
    root.addHandler(stream)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """Merges the adapter's bound fields with a per-call ``context=`` kwarg."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        call_context = kwargs.pop("context", None) or {}
        extra = kwargs.get("extra") or {}
        merged = {**(self.extra or {}), **extra.get("context", {}), **call_context}
        if merged:
            kwargs["extra"] = {**extra, "context": merged}
        return msg, kwargs


def contact_logger(logger: logging.Logger, contact_id: str) -> LoggerAdapter:
    """Logger whose records all carry the contact they concern."""
    return LoggerAdapter(logger, {"contact_id": contact_id})

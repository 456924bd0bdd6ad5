"""
Centralized logging configuration for ticketchecker.

Call ``setup_logging()`` once from the embedding application's entry point.
Every other module should just do::

    import logging
    logger = logging.getLogger(__name__)

No library module calls ``logging.basicConfig()``.

Records pass through :class:`SecretRedactingFilter` before they are
formatted, so passwords, bearer tokens and vault keys never reach stdout
even if a caller logs a raw payload or exception.
"""

import json
import logging
import os
import re
import sys
from datetime import datetime, timezone

REDACTED = "[REDACTED]"

_SECRET_KEYS = r"password|passcode|access_?token|master_?key|token"

_REDACTIONS = [
    # Authorization: Bearer <token>
    (re.compile(r"(Bearer\s+)[^\s'\",]+", re.IGNORECASE), rf"\1{REDACTED}"),
    # "password": "..." / 'password': '...'  (JSON and dict reprs)
    (
        re.compile(rf"""(["']({_SECRET_KEYS})["']\s*:\s*)(["'])(?:\\.|(?!\3).)*\3""", re.IGNORECASE),
        rf"\1\3{REDACTED}\3",
    ),
    # password=... (kwargs, query strings, pydantic reprs)
    (
        re.compile(rf"""(\b({_SECRET_KEYS})=)(["']?)[^\s&,)'"]+\3""", re.IGNORECASE),
        rf"\1\3{REDACTED}\3",
    ),
]


def redact(text: str) -> str:
    """Mask credential values in *text*."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Rewrite each record's message with secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exc"] = redact(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


def _configured_level() -> str:
    try:
        from ticketchecker.config.config_loader import config_loader
    except Exception as e:
        logging.getLogger(__name__).warning(f"Ignoring config for log level: {e}")
        return "INFO"
    return config_loader.get_logging_config().level


def setup_logging(*, level: str | None = None) -> None:
    """Configure the root logger with a redacting JSON handler on *stdout*.

    Parameters
    ----------
    level:
        Log level name (DEBUG, INFO, WARNING, ...).
        Falls back to the ``LOG_LEVEL`` env-var, then the ``logging.level``
        entry of the loaded config, then ``INFO``.
    """
    resolved_level = (level or os.getenv("LOG_LEVEL") or _configured_level()).upper()

    root = logging.getLogger()
    if any(isinstance(h, logging.StreamHandler) and
           isinstance(h.formatter, _JSONFormatter) for h in root.handlers):
        root.setLevel(resolved_level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JSONFormatter())
    handler.addFilter(SecretRedactingFilter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolved_level)

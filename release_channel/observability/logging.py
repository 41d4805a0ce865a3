"""Logging setup.

Channels log through standard-library loggers named
`release_channel.channels.<name>`. The CLI installs a single stderr handler on
the root logger, either as plain text or as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}

TEXT_FORMAT = "%(levelname)s %(message)s"


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter suitable for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Capture non-standard fields attached via `extra={...}`.
        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def configure_logging(*, level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging with a single stderr handler.

    Safe to call multiple times; the previous handler is replaced.
    """

    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream=sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    for h in [h for h in root.handlers if getattr(h, "_release_channel", False)]:
        root.removeHandler(h)
    setattr(handler, "_release_channel", True)
    root.addHandler(handler)


def get_logger(name: str | None = None, **extra: Any) -> logging.LoggerAdapter:
    """Return a logger adapter that can carry additional static fields."""

    base = logging.getLogger(name or "release_channel")
    return logging.LoggerAdapter(base, extra)

"""Structured Logging — JSON log lines for the catalog service.

Invariants:
    - Every line has timestamp, level, logger and message
    - Request/content identifiers passed via `extra=` (comic_id, page_index,
      remote_address, error_code, view, path) become top-level keys when set
    - CJK text is written as-is, not \\u-escaped
    - setup_logging() is idempotent: calling it again replaces its own handler

Design Decisions:
    - Called once from the FastAPI lifespan; "json" in production, "text" locally
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "comic_id", "page_index", "remote_address", "error_code", "view", "path",
)

_QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "multipart")


class JSONFormatter(logging.Formatter):
    def __init__(self, fields: tuple[str, ...] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = fields

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key in self.fields
            if (value := getattr(record, key, None)) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


_installed: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the service's root handler (replacing a previous one)."""
    global _installed
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    if _installed is not None:
        logging.root.removeHandler(_installed)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _installed = handler
    return handler

"""Structured Logging — JSON log lines tagged with dossier, task and member context.

Invariants:
    - Every line has timestamp, level, logger name and message
    - Dossier context (dao_id, task_id, member_id), cache_key and error fields
      are emitted only when the call site passed them through `extra`
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - setup_logging called once on startup via lifespan
    - SQL echo and per-request access lines held at WARNING unless level is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

_CONTEXT_KEYS = (
    "dao_id", "task_id", "member_id", "cache_key", "error_code", "path",
)
_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")
_HANDLER_NAME = "dao_manager"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _CONTEXT_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the application handler on the root logger."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)

    root_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(root_level)
    noisy_level = root_level if root_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

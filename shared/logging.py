"""
Structured logging setup for all modules.

Every record is emitted as one JSON object. While a webhook is being applied,
the id of the pipeline (or file/actor) it targets is attached automatically.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, List, Optional

from shared.config import Settings, get_settings

pipeline_id_context: ContextVar[Optional[str]] = ContextVar("pipeline_id", default=None)

# Attributes every LogRecord carries; anything else arrived through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

LOG_FILE_NAME = "app.log"
LOG_FILE_MAX_BYTES = 100 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        pipeline_id = pipeline_id_context.get()
        if pipeline_id:
            log_data["pipeline_id"] = pipeline_id

        log_data.update(
            (key, _json_safe(value))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers: List[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        ),
    ]
    formatter = JSONFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing JSON to stdout and the rotating log file.

    Args:
        name: Logger name (e.g., "status_updates.process")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    settings = get_settings()
    logger.setLevel(settings.log_level)
    for handler in _build_handlers(settings):
        logger.addHandler(handler)
    return logger


@contextmanager
def pipeline_context(pipeline_id: Optional[str]) -> Iterator[None]:
    """Attach `pipeline_id` to every record logged inside the block."""
    token = pipeline_id_context.set(pipeline_id)
    try:
        yield
    finally:
        pipeline_id_context.reset(token)


def get_pipeline_id() -> Optional[str]:
    """Pipeline id attached to the current context, if any."""
    return pipeline_id_context.get()

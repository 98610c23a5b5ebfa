"""Configure shop logging using the Python standard library.

Sets up the root logger with a console handler and, when a log
directory is configured, a rotating file handler.  Records are written
as one JSON object per line (timestamp, level, module, message) with any
structured fields passed as ``extra={"extra": {...}}`` merged in.

Configuration comes from the environment:

* ``SHOP_LOG_LEVEL`` - level name, default ``INFO``.
* ``SHOP_LOG_DIR`` - directory for ``shop.log``; unset means console only.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone
from typing import Optional, Union

LOG_FILE_NAME = "shop.log"


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            # Flatten into the top level
            log_record.update(extra)
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.environ.get("SHOP_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(log_dir: Optional[str] = None, level: Union[int, str, None] = None) -> logging.Logger:
    """Configure the root logger with JSON formatting.

    Args:
        log_dir: Directory for the rotating log file.  Falls back to
            ``SHOP_LOG_DIR``; when neither is set only the console handler
            is installed.  The directory is created if missing.
        level: Level for the root logger and its handlers.  Falls back to
            ``SHOP_LOG_LEVEL``.

    Returns:
        The configured root logger.
    """
    level = _resolve_level(level)
    if log_dir is None:
        log_dir = os.environ.get("SHOP_LOG_DIR") or None

    logger = logging.getLogger()
    logger.setLevel(level)
    # Drop handlers from earlier calls or basicConfig
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=5 * 1024 * 1024,  # 5 MB per log file
            backupCount=3,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    return logger

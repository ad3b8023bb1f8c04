import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

from config import LOG_FILE_PATH, LOG_LEVEL, LOG_TO_FILE

# Standard LogRecord attributes; anything else on a record was passed via `extra=`.
_RECORD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "stacklevel",
    "taskName",
}

# Third-party loggers that log every HTTP round trip at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, location, message and extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once; calling it again only re-applies levels and formatter.

    File logging is enabled with LOG_TO_FILE and written to LOG_FILE_PATH.
    """
    numeric_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    formatter = JsonFormatter()

    if not root.handlers:
        root.addHandler(logging.StreamHandler())
    root.setLevel(numeric_level)
    for handler in root.handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)

    if LOG_TO_FILE and not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        try:
            file_handler = RotatingFileHandler(LOG_FILE_PATH, maxBytes=5 * 1024 * 1024, backupCount=3)
        except OSError as e:
            root.warning(f"File logging disabled, cannot open {LOG_FILE_PATH}: {e}")
        else:
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.setLevel(numeric_level)
        for handler in uvicorn_logger.handlers:
            handler.setFormatter(formatter)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

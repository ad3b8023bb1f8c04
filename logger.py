import sys

from loguru import logger

from config import LOG_FILE_PATH, LOG_LEVEL, LOG_TO_FILE

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]: <8} | {name}:{function}:{line} - {message}"


class JsonLogger:
    """loguru sink setup for the auth and budget flows.

    Records carry a ``component`` field; it defaults to ``iwems`` and can be
    overridden with ``bind_context(component=...)``.
    """

    def __init__(self):
        self.logger = logger
        self._configure_logger()

    def _configure_logger(self):
        self.logger.remove()  # Remove default handler
        self.logger.configure(extra={"component": "iwems"})

        self.logger.add(sys.stdout, level=LOG_LEVEL, format=LOG_FORMAT, serialize=False, enqueue=True)
        if LOG_TO_FILE:
            self.logger.add(
                LOG_FILE_PATH,
                level=LOG_LEVEL,
                format=LOG_FORMAT,
                serialize=False,
                rotation="10 MB",
                compression="zip",
                enqueue=True,
            )
            self.logger.debug(f"Logging to file {LOG_FILE_PATH} is enabled.")

    def bind_context(self, **kwargs):
        """Bind context variables to the logger."""
        return self.logger.bind(**kwargs)


_json_logger = JsonLogger()
json_logger = _json_logger.logger
bind_context = _json_logger.bind_context

"""Structured logging manager for the file watcher.

Provides console logging and a rotating JSON Lines log file that carries
the ``extra`` fields handlers attach to their records.
"""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "asctime",
        "taskName",
    ]
)


def record_extras(record: logging.LogRecord) -> dict:
    """Collect the ``extra`` fields of a record as JSON-safe values."""
    extras = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS:
            continue
        try:
            json.dumps(value)  # Ensure serializable
            extras[key] = value
        except (TypeError, ValueError):
            extras[key] = str(value)
    return extras


class JsonLineFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_obj.update(record_extras(record))
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


class LoggingManager:
    """Configures the ``filewatch`` logger tree."""

    def __init__(self, log_dir: str | Path = "/tmp/filewatch/logs", log_level: str = "INFO"):
        """Initialize logging manager.

        Args:
            log_dir: Directory for the JSON log file
            log_level: Console log level
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper())
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / "filewatch.log"

        self._setup_logger()

        # Loggers created by imports before setup must defer to our handlers
        for name in list(logging.Logger.manager.loggerDict.keys()):
            if name.startswith("filewatch."):
                child_logger = logging.getLogger(name)
                if isinstance(child_logger, logging.Logger):  # Skip PlaceHolders
                    child_logger.setLevel(logging.NOTSET)
                    child_logger.propagate = True
                    child_logger.handlers.clear()

    def _setup_logger(self):
        """Setup the package logger with console and file handlers."""
        logger = logging.getLogger("filewatch")
        logger.setLevel(logging.DEBUG)  # Handlers filter
        logger.propagate = False

        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

        # Console handler - human readable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

        # File handler - structured JSON
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)  # Capture everything to file
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

        self.logger = logger

    def shutdown(self):
        """Flush and close all handlers."""
        for handler in self.logger.handlers:
            handler.flush()
            handler.close()
        self.logger.handlers.clear()

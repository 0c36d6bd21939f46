"""
Structured logging for the Yarn Review Service.

Every log line carries the service name, environment and the correlation ID
of the request being served. Business events pass a ``metadata`` dict with an
``event`` key so that log pipelines can filter on it.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from app.core.config import config
from app.middleware.correlation_id import get_correlation_id

# LogRecord attributes that are not worth repeating in JSON output
_RESERVED_RECORD_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": config.service_name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value
        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"
        correlation_id = getattr(record, "correlationId", None)
        if correlation_id:
            line += f" [{correlation_id}]"
        metadata = getattr(record, "metadata", None)
        if metadata:
            line += f" {json.dumps(metadata, default=str)}"
        return line


class StructuredLogger:
    """
    Logger wrapper adding service context, correlation IDs and metadata
    to every entry.
    """

    def __init__(self, name: str = None):
        self.service_name = name or config.service_name
        self.environment = config.environment
        self._logger = logging.getLogger(self.service_name)
        self._setup_logging()

    def _setup_logging(self):
        """Configure handlers once per process"""
        level = getattr(logging, config.log_level.upper(), logging.INFO)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            if config.log_format == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

        if config.log_to_file:
            directory = os.path.dirname(config.log_file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())  # Always JSON for files
            self._logger.addHandler(file_handler)

    def _log(
        self,
        level: int,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ):
        extra = {
            "environment": self.environment,
            "correlationId": get_correlation_id(),
        }
        if user_id:
            extra["userId"] = user_id
        if metadata:
            extra["metadata"] = metadata
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, user_id: Optional[str] = None,
              metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, user_id, metadata)

    def info(self, message: str, user_id: Optional[str] = None,
             metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, user_id, metadata)

    def warning(self, message: str, user_id: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, user_id, metadata)

    def error(
        self,
        message: str,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ):
        """Error level logging; ``error`` is flattened into the metadata"""
        metadata = dict(metadata or {})
        if error is not None:
            if isinstance(error, Exception):
                metadata["error"] = {"type": type(error).__name__, "message": str(error)}
            else:
                metadata["error"] = {"message": str(error)}
        self._log(logging.ERROR, message, user_id, metadata, exc_info=exc_info)


# Create and export the logger instance
logger = StructuredLogger()

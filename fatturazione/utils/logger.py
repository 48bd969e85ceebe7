"""
Structured logging configuration for the application.
Provides consistent logging across all modules.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pathlib import Path

from fatturazione.config import Settings, settings as default_settings

# Extra attributes copied into JSON records when present
_CONTEXT_FIELDS = (
    "actor_id", "actor_name", "document_id", "document_number", "operation", "path", "method"
)

_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "motor", "pymongo", "asyncio")


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string of log record
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Custom text formatter for human-readable logs."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def setup_logging(settings: Settings = default_settings) -> None:
    """
    Setup application logging based on configuration.
    Called once at application startup.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if settings.LOG_FORMAT.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        log_file_path = Path(settings.LOG_FILE)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"✅ Logging configured: level={settings.LOG_LEVEL}, format={settings.LOG_FORMAT}")


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter to add contextual information to logs.

    Example:
        logger = LoggerAdapter(logging.getLogger(__name__), {"actor_id": "123"})
        logger.info("Documento emesso", extra={"document_number": "2026/001"})
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Add contextual data to log record."""
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs


def actor_logger(logger: logging.Logger, actor: Optional[Any]) -> LoggerAdapter:
    """Bind an actor context to a module logger."""
    if actor is None:
        return LoggerAdapter(logger, {})
    return LoggerAdapter(logger, {"actor_id": actor.user_id, "actor_name": actor.user_name})

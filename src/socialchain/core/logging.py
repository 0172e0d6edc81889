"""
Logging configuration for the SocialChain backend.

Provides structured JSON logging with support for multiple log files,
log rotation, and masking of signatures, tokens and secrets.
"""

import json
import logging
import logging.handlers
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in logs."""

    SENSITIVE_KEYS = {
        "password",
        "private_key",
        "secret",
        "jwt_secret",
        "token",
        "authorization",
        "signature",
        "nonce",
    }

    _PATTERN = re.compile(
        r"(?P<key>" + "|".join(sorted(SENSITIVE_KEYS, key=len, reverse=True)) + r")(?P<sep>\s*[=:]\s*)(?P<value>[^\s,;]+)",
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in log records."""
        if isinstance(record.msg, str):
            record.msg = self._mask_sensitive_data(record.msg)
        if isinstance(record.args, dict):
            record.args = self._mask_dict(record.args)
        for key, value in list(record.__dict__.items()):
            if key in _RESERVED_ATTRS:
                continue
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_KEYS):
                setattr(record, key, "***MASKED***")
            elif isinstance(value, dict):
                setattr(record, key, self._mask_dict(value))
        return True

    def _mask_sensitive_data(self, text: str) -> str:
        """Mask ``key=value`` / ``key: value`` pairs for sensitive keys."""
        return self._PATTERN.sub(lambda m: f"{m.group('key')}{m.group('sep')}***MASKED***", text)

    def _mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive data in dictionary."""
        masked = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in self.SENSITIVE_KEYS):
                masked[key] = "***MASKED***"
            elif isinstance(value, dict):
                masked[key] = self._mask_dict(value)
            else:
                masked[key] = value
        return masked


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs logs in JSON format."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        if context:
            log_data["context"] = context

        return json.dumps(log_data, default=str)


def setup_logging(config: Any) -> None:
    """
    Set up logging configuration.

    Args:
        config: Configuration object with logging settings
    """
    level = getattr(logging, config.LOG_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    sensitive_filter = SensitiveDataFilter()

    if config.LOG_FORMAT == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Console handler (stdout)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(sensitive_filter)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not config.LOG_TO_FILE:
        return

    os.makedirs(config.LOG_DIR, exist_ok=True)

    # File handlers for different log types
    log_files = {
        "socialchain": "app.log",
        "auth": "auth.log",
    }

    for log_type, filename in log_files.items():
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(config.LOG_DIR, filename),
            maxBytes=100 * 1024 * 1024,  # 100MB
            backupCount=10,
        )
        file_handler.setLevel(level)
        file_handler.addFilter(sensitive_filter)
        file_handler.setFormatter(formatter)

        logger = logging.getLogger(log_type)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(file_handler)
        logger.setLevel(level)

    error_handler = logging.handlers.RotatingFileHandler(
        os.path.join(config.LOG_DIR, "errors.log"),
        maxBytes=100 * 1024 * 1024,
        backupCount=10,
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.addFilter(sensitive_filter)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name)

"""
Logging for the contract analyzer.

Pipeline stages and vendor adapters log through the standard library. In
structured mode every record is one JSON line, and `extra=` payloads built
with the helpers below (pipeline timings, processing errors, outbound
OpenAI / Azure / Hugging Face calls) land under the "extra" key.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

from ..config.settings import settings

_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "getMessage",
    "taskName",
}

# Chatty at INFO: request lines from httpx, layout parsing from pdfplumber
_QUIET_LOGGERS = ("httpx", "httpcore", "pdfminer")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with `extra=` fields nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            k: v for k, v in record.__dict__.items()
            if k not in _RESERVED_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    level: Optional[str] = None,
    structured: Optional[bool] = None,
    include_console: bool = True
) -> None:
    """
    Configure the root logger for the API and CLI.

    Defaults come from `settings.log_level` and `settings.log_structured`.
    Existing root handlers are replaced, so calling it again reconfigures
    rather than duplicating output.
    """
    log_level = level or settings.log_level
    use_structured = settings.log_structured if structured is None else structured

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(numeric_level)

    if include_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)

        if use_structured:
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))

        root_logger.addHandler(console_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_timing(operation: str, duration_ms: float, **context) -> Dict[str, Any]:
    """`extra=` payload for a timed pipeline stage, e.g. process_contract."""
    return {
        "event": "timing",
        "operation": operation,
        "duration_ms": duration_ms,
        **context
    }


def log_error(error: Exception, **context) -> Dict[str, Any]:
    """`extra=` payload for a failed contract, keyed by exception type."""
    return {
        "event": "error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        **context
    }


def log_api_request(
    method: str,
    url: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **context
) -> Dict[str, Any]:
    """
    `extra=` payload for an outbound vendor call made by `HttpClient`.

    Status code and duration are left out when the request never got a
    response.
    """
    log_data = {
        "event": "api_request",
        "method": method,
        "url": url,
        **context
    }

    if status_code is not None:
        log_data["status_code"] = status_code

    if duration_ms is not None:
        log_data["duration_ms"] = duration_ms

    return log_data


setup_logging()

# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for Composite Fingerprint."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

__all__ = [
    "logger",
    "setup_logger",
    "configure_logging",
    "LogFormat",
]

LOGGER_NAME = "composite_fingerprint"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "message", "taskName",
    "thread", "threadName", "asctime",
})


class LogFormat(str, Enum):
    """Supported log output formats."""

    JSON = "json"    # Structured JSON format (default)
    HUMAN = "human"  # Colored, for terminals
    TEXT = "text"    # Plain text


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs one JSON object per line. Fields passed through ``extra`` (for
    example the per-field comparison events) are nested under ``"extra"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = _extra_fields(record)
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable log formatter with ANSI colors."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            prefix = f"{self.DIM}{timestamp}{self.RESET} {color}[{level:>8}]{self.RESET}"
        else:
            prefix = f"{timestamp} [{level:>8}]"

        output = f"{prefix} {record.getMessage()}"

        extra = _extra_fields(record)
        if extra:
            pairs = " ".join(f"{k}={v!r}" for k, v in extra.items())
            output += f" ({pairs})"

        if record.exc_info:
            output += f"\n{self.formatException(record.exc_info)}"

        return output


class TextFormatter(logging.Formatter):
    """Plain text log formatter."""

    def __init__(self):
        super().__init__(fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def get_log_level(level_str: str) -> int:
    """
    Convert log level string to logging constant.

    Unknown names fall back to INFO.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def get_formatter(log_format: LogFormat, use_colors: bool = True) -> logging.Formatter:
    """Get the formatter for the specified format."""
    if log_format == LogFormat.JSON:
        return JsonFormatter()
    elif log_format == LogFormat.HUMAN:
        return HumanFormatter(use_colors=use_colors)
    return TextFormatter()


def _install_handler(log: logging.Logger, level: int, formatter: logging.Formatter) -> None:
    log.setLevel(level)
    log.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    log.addHandler(handler)


def configure_logging(
    level: str = "INFO",
    log_format: LogFormat = LogFormat.JSON,
    human_readable: bool = False,
) -> None:
    """
    Reconfigure the package logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format type (JSON, HUMAN, TEXT)
        human_readable: If True, forces human-readable format regardless of log_format
    """
    if human_readable:
        log_format = LogFormat.HUMAN
    _install_handler(logger, get_log_level(level), get_formatter(log_format))


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Create the package logger.

    ``COMPOSITE_FP_LOG_LEVEL`` and ``COMPOSITE_FP_LOG_FORMAT`` (json, human,
    text) override the defaults.

    Args:
        name: Logger name
        level: Logging level
        format_string: Custom format string for log messages

    Returns:
        Configured logger instance
    """
    env_level = os.environ.get("COMPOSITE_FP_LOG_LEVEL", "")
    env_format = os.environ.get("COMPOSITE_FP_LOG_FORMAT", LogFormat.JSON.value).lower()

    if env_level:
        level = get_log_level(env_level)

    if format_string is not None:
        formatter = logging.Formatter(format_string)
    else:
        try:
            formatter = get_formatter(LogFormat(env_format))
        except ValueError:
            formatter = JsonFormatter()

    log = logging.getLogger(name)
    _install_handler(log, level, formatter)
    return log


# Default logger instance
logger = setup_logger()

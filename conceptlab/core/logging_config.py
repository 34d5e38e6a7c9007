"""
Logging setup for conceptlab.

Everything logs through the root logger: stderr for interactive use and a
rotating file (``logging.file``) for the server. Request traces and API
errors can carry credentials, so they go through ``redact_sensitive_data``
before being logged.
"""

import os
import sys
import logging
import logging.handlers
from typing import Dict, Any, Optional

from conceptlab.core.constants import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_MAX_BYTES,
    DEFAULT_LOG_BACKUP_COUNT,
    REDACTED,
)

# Field names whose values are never logged: substrings, then exact names.
# "max_tokens" must stay readable, so bare "token" only matches exactly.
SENSITIVE_KEY_PARTS = ("api_key", "api-key", "secret", "password", "credential", "authorization",
                       "access_token", "refresh_token")
SENSITIVE_KEY_NAMES = ("key", "token", "tokens", "auth")


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_to_console: bool = True
) -> None:
    """
    Configure the root logger from the ``logging`` config section.

    Args:
        level (str, optional): Level name; defaults to ``logging.level``
        log_file (str, optional): Rotating log file; defaults to ``logging.file``.
            An empty value disables file logging.
        log_to_console (bool): Whether to also log to stderr
    """
    from conceptlab.core.config import get_config_value

    if level is None:
        level = get_config_value("logging.level", "INFO")
    if log_file is None:
        log_file = get_config_value("logging.file", "conceptlab.log")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(get_config_value("logging.format", DEFAULT_LOG_FORMAT))

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=get_config_value("logging.max_bytes", DEFAULT_LOG_MAX_BYTES),
            backupCount=get_config_value("logging.backup_count", DEFAULT_LOG_BACKUP_COUNT)
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def redact_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with credential values masked.

    Nested dicts are redacted too. The input is not modified.

    Args:
        data (Dict[str, Any]): Headers or request data

    Returns:
        Dict[str, Any]: Redacted copy
    """
    redacted = {}
    for key, value in data.items():
        name = str(key).lower()
        if name in SENSITIVE_KEY_NAMES or any(part in name for part in SENSITIVE_KEY_PARTS):
            redacted[key] = REDACTED
        elif isinstance(value, dict):
            redacted[key] = redact_sensitive_data(value)
        else:
            redacted[key] = value
    return redacted

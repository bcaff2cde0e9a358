"""
Logging for openstack_auth.

Every module logs under the ``openstack_auth`` hierarchy
(``get_logger('auth.password')`` -> ``openstack_auth.auth.password``).
Credentials pass through ``sanitize_token`` / ``sanitize_dict`` before they
reach a log line: passwords and other secrets are replaced entirely, tokens
keep a short prefix so log lines can be correlated.
"""

import logging
import sys
from typing import Any, FrozenSet, Optional

from .core.constants import MASKED_VALUE, SECRET_KEYS, TOKEN_KEYS, TOKEN_PREFIX_LENGTH


ROOT_LOGGER_NAME = 'openstack_auth'

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = 'INFO', log_format: Optional[str] = None) -> None:
    """
    Send openstack_auth log records to stdout.

    Only attaches a handler when the application has not configured one
    on the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string; DEFAULT_LOG_FORMAT if None
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)

    if not any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(log_format or DEFAULT_LOG_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a package component.

    Args:
        name: Dotted component name (e.g., 'core.transport'); '' for the root

    Returns:
        Logger with a NullHandler attached
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def sanitize_token(token: Optional[str], show_chars: int = TOKEN_PREFIX_LENGTH) -> str:
    """
    Shorten a token to a prefix for logging.

    Tokens too short to hide most of their value are masked entirely.

    Returns:
        e.g. "gAAAAABk...", "***" or "<empty>"
    """
    if not token:
        return "<empty>"

    if len(token) <= show_chars * 2:
        return MASKED_VALUE

    return f"{token[:show_chars]}..."


def _key_matches(key: Any, keys: FrozenSet[str]) -> bool:
    key_lower = str(key).lower()
    return any(k in key_lower for k in keys)


def sanitize_dict(
    data: dict,
    secret_keys: FrozenSet[str] = SECRET_KEYS,
    token_keys: FrozenSet[str] = TOKEN_KEYS,
) -> dict:
    """
    Copy a mapping (such as a cloud entry) with credentials masked.

    Values under secret keys (password, secret, credential) become "***"
    whatever their length; values under token keys are shortened with
    sanitize_token. Nested mappings are handled recursively.

    Args:
        data: Mapping to sanitize; left unchanged
        secret_keys: Key substrings whose values are fully masked
        token_keys: Key substrings whose values keep a prefix

    Returns:
        Sanitized copy
    """
    sanitized = {}
    for key, value in data.items():
        if isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, secret_keys, token_keys)
        elif value is None:
            sanitized[key] = value
        elif _key_matches(key, secret_keys):
            sanitized[key] = MASKED_VALUE
        elif _key_matches(key, token_keys):
            sanitized[key] = sanitize_token(str(value))
        else:
            sanitized[key] = value

    return sanitized


logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

"""Logging setup shared by the metasearch service modules."""

import logging
import os
import re
import sys
from typing import Iterable, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MASK = '***MASKED***'


class SensitiveDataFilter(logging.Filter):
    """
    Masks credentials in log records.

    Two kinds of masking are applied: key=value shaped credentials found by
    pattern, and literal secret values registered at startup (the search
    index key), wherever they appear.
    """

    PATTERNS = [
        re.compile(r'(store[_-]?key["\']?\s*[:=]\s*["\']?)([^"\'}\s,]+)', re.IGNORECASE),
        re.compile(r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([^"\'}\s,]+)', re.IGNORECASE),
        re.compile(r'(authorization["\']?\s*[:=]\s*["\']?)([^"\'}\s,]+)', re.IGNORECASE),
        re.compile(r'(bearer\s+)([^\s,}\'\"]+)', re.IGNORECASE),
    ]

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self.secrets = {secret for secret in secrets if secret}

    def add_secret(self, secret: str) -> None:
        if secret:
            self.secrets.add(secret)

    def mask(self, text: str) -> str:
        for secret in self.secrets:
            text = text.replace(secret, MASK)
        for pattern in self.PATTERNS:
            text = pattern.sub(rf'\1{MASK}', text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        # Render first so credentials passed as %-args are masked as well
        message = record.getMessage()
        record.msg = self.mask(message)
        record.args = None
        return True


def _masking_filter(logger: logging.Logger) -> Optional[SensitiveDataFilter]:
    for handler in logger.handlers:
        for log_filter in handler.filters:
            if isinstance(log_filter, SensitiveDataFilter):
                return log_filter
    return None


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up the stdout handler for a component logger.

    Module loggers below the component (``metasearch.search_client`` and so
    on) propagate to it. Calling this again returns the configured logger.

    Args:
        component_name: Top-level logger name (e.g., 'metasearch')
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to LOG_LEVEL env var or INFO

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, log_level, logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if _masking_filter(logger) is not None:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(SensitiveDataFilter())

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def register_secret(logger: logging.Logger, secret: str) -> None:
    """
    Mask a literal secret value in everything the logger writes.

    Args:
        logger: Logger configured by setup_logging
        secret: Value to hide (e.g. the search index key)
    """
    log_filter = _masking_filter(logger)
    if log_filter is not None:
        log_filter.add_secret(secret)


def get_logger(name: str) -> logging.Logger:
    """Module logger; inherits the component handler through propagation."""
    return logging.getLogger(name)

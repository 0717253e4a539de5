"""
Common utilities for the cluster networking installer.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Optional, Tuple

from lib.constants import LOGGER_NAME

_VERSION_PREFIX = re.compile(r"^v?(\d+(?:\.\d+)*)")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def setup_logging(verbose: bool = False, log_format: str = "text") -> logging.Logger:
    """
    Configure logging for the installer.

    Args:
        verbose: Enable debug logging
        log_format: 'text' or 'json'
    """
    level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.addHandler(handler)

    return logging.getLogger(LOGGER_NAME)


def parse_version(version_string: str) -> Optional[Tuple[int, int, int]]:
    """
    Parse a version string to a tuple for comparison.

    Accepts a leading "v" and ignores pre-release or build suffixes,
    so "v1.32.0-beta.0" and "2.53.0" both parse.

    Args:
        version_string: Version like "1.5.2", "v0.20.0" or "2.53"

    Returns:
        Tuple of (major, minor, patch), or None if unparsable
    """
    try:
        match = _VERSION_PREFIX.match(version_string.strip())
    except AttributeError:
        return None
    if not match:
        return None

    parts = [int(p) for p in match.group(1).split(".")]
    while len(parts) < 3:
        parts.append(0)
    return (parts[0], parts[1], parts[2])


def is_version_ge(version: str, compare_to: str) -> bool:
    """
    Check if a version is greater than or equal to a comparison version.

    Args:
        version: Current version string
        compare_to: Version to compare against

    Returns:
        True if version >= compare_to
    """
    current = parse_version(version)
    target = parse_version(compare_to)

    if current is None or target is None:
        return False

    return current >= target


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"

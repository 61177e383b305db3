"""Logging configuration for lume."""

from __future__ import annotations

import logging
import sys
from typing import Optional


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True,
) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string (optional)
        include_timestamp: Whether to include timestamps in log messages
    """
    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        else:
            format_string = "%(levelname)-8s | %(name)s | %(message)s"

    # Logs go to stderr so that --json output on stdout stays parseable
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)


def redact_url(url: str) -> str:
    """Strip the query string so embedded keys never reach the log."""
    return url.split("?", 1)[0]

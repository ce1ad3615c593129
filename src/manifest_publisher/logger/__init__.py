"""Logging utilities for manifest-publisher.

Usage:
    >>> from manifest_publisher.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing %s", package_id)  # Use %-style formatting

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Only the root 'manifest_publisher' logger has a handler
    4. Never use f-strings in log calls
"""

from manifest_publisher.logger.formatters import (
    ActionsAnnotationFormatter,
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from manifest_publisher.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from manifest_publisher.logger.state import get_state

__all__ = [
    "ActionsAnnotationFormatter",
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "get_state",
    "setup_logging",
]

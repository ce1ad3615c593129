"""Handler creation and management for the logging system.

A single console handler is attached behind a QueueListener so that log
calls made from the event loop never block on stream I/O.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener

from manifest_publisher.constants import (
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
)
from manifest_publisher.logger.formatters import (
    ActionsAnnotationFormatter,
    HybridConsoleFormatter,
)

ROOT_LOGGER_NAME = "manifest_publisher"


def _create_console_handler(
    console_level: str, use_annotations: bool  # noqa: FBT001
) -> logging.StreamHandler:
    """Create the console handler.

    Args:
        console_level: Log level for console (e.g., "DEBUG", "INFO")
        use_annotations: Emit GitHub Actions annotations instead of the
            colored hybrid format

    Returns:
        Configured StreamHandler writing to stdout

    """
    console_handler = logging.StreamHandler(sys.stdout)
    if use_annotations:
        console_handler.setFormatter(ActionsAnnotationFormatter())
    else:
        console_handler.setFormatter(
            HybridConsoleFormatter(
                LOG_CONSOLE_FORMAT,
                datefmt=LOG_CONSOLE_DATE_FORMAT,
            )
        )
    console_handler.setLevel(getattr(logging, console_level, logging.INFO))
    return console_handler


def setup_root_logger(
    state,
    console_level: str,
    use_annotations: bool,  # noqa: FBT001
) -> None:
    """Initialize the root logger with its handler via QueueListener.

    Called exactly once per process (until the state is cleared).

    Args:
        state: Logger state object (from logger.state module)
        console_level: Console log level
        use_annotations: Whether to emit GitHub Actions annotations

    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handlers
    root_logger.propagate = False

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = _create_console_handler(console_level, use_annotations)

    state.log_queue = queue.Queue(-1)
    state.queue_listener = QueueListener(
        state.log_queue,
        console_handler,
        respect_handler_level=True,
    )
    state.queue_listener.start()

    root_logger.addHandler(QueueHandler(state.log_queue))

    state.root_initialized = True

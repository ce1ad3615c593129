"""Main logger module providing public API functions.

- setup_logging(): Configure logging with the QueueHandler architecture
- get_logger(): Get or create a module logger
- flush_all_handlers(): Drain the queue and flush handlers
- clear_logger_state(): Reset global logger state for tests
"""

import atexit
import contextlib
import logging
import time

from manifest_publisher.logger.config import (
    annotations_enabled,
    load_log_level,
)
from manifest_publisher.logger.handlers import (
    ROOT_LOGGER_NAME,
    setup_root_logger,
)
from manifest_publisher.logger.state import get_state

_FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Wait for queued records to be handled and flush every handler.

    Call before process exit or before asserting on captured output.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        # QueueListener doesn't use task_done(), so poll the queue
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > _FLUSH_TIMEOUT_SECONDS:
                break
            time.sleep(0.01)

        # Give the listener thread time to hand off the last record
        time.sleep(0.05)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    use_annotations: bool | None = None,
) -> logging.Logger:
    """Configure logging once and return the requested logger.

    Logger Hierarchy:
        - Root logger: "manifest_publisher" (QueueHandler → QueueListener)
        - Child loggers: "manifest_publisher.core.publisher", ...
          (auto-propagate to root)

    Args:
        name: Logger name, typically __name__
        console_level: Console log level; read from the environment
            when omitted
        use_annotations: Emit GitHub Actions annotations; detected from
            the environment when omitted

    Returns:
        Logger instance

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            level = console_level or load_log_level()
            annotate = (
                annotations_enabled()
                if use_annotations is None
                else use_annotations
            )
            setup_root_logger(state, level, annotate)

    return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get or create a logger.

    Example:
        >>> from manifest_publisher.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Publishing %s", package_id)

    """
    return setup_logging(name=name)


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, removes handlers and resets flags so the next
    get_logger() call configures logging from scratch.
    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(ROOT_LOGGER_NAME):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)

"""Event reporting protocol for the publication engine.

The workflow reports each step (resolved checksum, URL, final manifest,
publish result) through an ``EventSink`` instead of printing, so callers
choose where events go and tests can record them without capturing
console output.

Usage::

    from manifest_publisher.core.protocols import LoggerEventSink

    sink = LoggerEventSink()
    sink.info("sha256=%s", digest)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import logging


@runtime_checkable
class EventSink(Protocol):
    """Receiver for informational and error events."""

    def info(self, message: str, *args: object) -> None:
        """Report progress or a computed value."""
        ...

    def error(self, message: str, *args: object) -> None:
        """Report an error or an advisory conflict."""
        ...


class NullEventSink:
    """Event sink that discards everything."""

    def info(self, message: str, *args: object) -> None:
        """Discard informational event."""

    def error(self, message: str, *args: object) -> None:
        """Discard error event."""


class LoggerEventSink:
    """Event sink forwarding to a standard logger with %-style arguments."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize with a logger (defaults to the workflow logger)."""
        if logger is None:
            from manifest_publisher.logger import get_logger  # noqa: PLC0415

            logger = get_logger("manifest_publisher.events")
        self.logger = logger

    def info(self, message: str, *args: object) -> None:
        """Log informational event."""
        self.logger.info(message, *args)

    def error(self, message: str, *args: object) -> None:
        """Log error event."""
        self.logger.error(message, *args)

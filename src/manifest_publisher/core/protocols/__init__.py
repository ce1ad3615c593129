"""Core protocols for dependency injection.

Available protocols:
    EventSink: Receiver for informational and error events

Usage:
    from manifest_publisher.core.protocols import EventSink, NullEventSink
"""

from .events import EventSink, LoggerEventSink, NullEventSink

__all__ = [
    "EventSink",
    "LoggerEventSink",
    "NullEventSink",
]

"""Logging formatters for console output.

- ColoredConsoleFormatter: Adds ANSI color codes to log levels
- SimpleConsoleFormatter: Shows only message content (no metadata)
- HybridConsoleFormatter: Uses simple format for INFO, structured for others
- ActionsAnnotationFormatter: Prefixes warnings and errors with GitHub
  Actions workflow commands so they surface in the run summary
"""

import logging

from manifest_publisher.constants import ACTIONS_ANNOTATIONS, LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with ANSI color support for different log levels."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a colored level name.

        The record's levelname is swapped for the colored variant only for
        the duration of the call.
        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]
            original_levelname = record.levelname
            record.levelname = f"{color}{record.levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class SimpleConsoleFormatter(logging.Formatter):
    """Minimal console formatter that only shows the message content."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the rendered message without metadata."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Console formatter with simple format for INFO, structured for others.

    Example Output:
        INFO:     "computing manifest file path..."
        WARNING:  "12:30:45 - manifest_publisher - WARNING - Rate limit low"
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize hybrid formatter with structured format template.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple_formatter = SimpleConsoleFormatter()
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record using simple or structured format by level."""
        if record.levelno == logging.INFO:
            return self._simple_formatter.format(record)
        return self._colored_formatter.format(record)


class ActionsAnnotationFormatter(logging.Formatter):
    """Formatter emitting GitHub Actions annotations for WARNING and above.

    INFO and DEBUG lines are plain messages; the runner already timestamps
    every line of job output.

    Example Output:
        INFO:     "sha256=0f3a..."
        ERROR:    "::error::Asset not found for 'app-.*': ..."
    """

    def format(self, record: logging.LogRecord) -> str:
        """Return the message, prefixed by a workflow command if needed."""
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        prefix = ACTIONS_ANNOTATIONS.get(record.levelname)
        if prefix is None:
            return message
        # Workflow commands are single-line; escape embedded newlines
        escaped = (
            message.replace("%", "%25")
            .replace("\r", "%0D")
            .replace("\n", "%0A")
        )
        return f"{prefix}{escaped}"

"""Environment-driven logging settings.

The publisher runs inside CI jobs, so the log level comes from the
environment rather than a settings file:

    LOG_LEVEL: Explicit console level (DEBUG, INFO, WARNING, ERROR)
    RUNNER_DEBUG: Set to "1" by GitHub Actions when step debugging is on
    GITHUB_ACTIONS: Set to "true" on GitHub-hosted runs; enables
        workflow-command annotations for warnings and errors
"""

import logging
import os
from collections.abc import Mapping

from manifest_publisher.constants import DEFAULT_LOG_LEVEL


def load_log_level(environ: Mapping[str, str] | None = None) -> str:
    """Return the console log level name.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Upper-case level name understood by the logging module

    """
    env = os.environ if environ is None else environ

    explicit = env.get("LOG_LEVEL", "").strip().upper()
    if explicit and isinstance(logging.getLevelName(explicit), int):
        return explicit
    if env.get("RUNNER_DEBUG") == "1":
        return "DEBUG"
    return DEFAULT_LOG_LEVEL


def annotations_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Return whether warnings and errors should become annotations."""
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS", "").lower() == "true"

"""Centralized constants module for manifest-publisher.

Constants are grouped by concern and annotated with typing.Final so they
are never rebound at runtime.

Usage:
    from manifest_publisher.constants import DEFAULT_MANIFEST_REPO
"""

from typing import Final

# =============================================================================
# Input Defaults
# =============================================================================

# Community manifest repository that receives the manifest by default
DEFAULT_MANIFEST_REPO: Final[str] = "microsoft/winget-pkgs"

# Commit message used when the "message" input is empty
DEFAULT_COMMIT_MESSAGE: Final[str] = "{{id}} version {{version}}"

# Environment variable prefix used by GitHub Actions for step inputs
ACTION_INPUT_PREFIX: Final[str] = "INPUT_"

# Prefix stripped from GITHUB_REF when it is used as the release tag
TAG_REF_PREFIX: Final[str] = "refs/tags/"

# =============================================================================
# Manifest Layout
# =============================================================================

MANIFESTS_ROOT: Final[str] = "manifests"
MANIFEST_EXTENSION: Final[str] = ".yaml"

# Git tree entry mode for a regular, non-executable file
GIT_FILE_MODE: Final[str] = "100644"

# =============================================================================
# Network Constants
# =============================================================================

GITHUB_API_URL: Final[str] = "https://api.github.com"
GITHUB_WEB_URL: Final[str] = "https://github.com"
GITHUB_API_VERSION: Final[str] = "2022-11-28"
GITHUB_ACCEPT_HEADER: Final[str] = "application/vnd.github+json"

DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

# Read requests are retried with exponential backoff; writes never are
DEFAULT_READ_RETRY_ATTEMPTS: Final[int] = 3

# Page size used when listing release assets and pull requests
API_PAGE_SIZE: Final[int] = 100

# Streaming chunk size used when hashing remote payloads
CHUNK_SIZE: Final[int] = 65536

# A freshly created fork is populated asynchronously by GitHub
FORK_READY_POLL_ATTEMPTS: Final[int] = 10
FORK_READY_POLL_INTERVAL_SECONDS: Final[float] = 2.0

# =============================================================================
# Logging Constants
# =============================================================================

DEFAULT_LOG_LEVEL: Final[str] = "INFO"

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"

# Color mapping for console output levels
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}

# GitHub Actions workflow command prefixes per level
ACTIONS_ANNOTATIONS: Final[dict[str, str]] = {
    "WARNING": "::warning::",
    "ERROR": "::error::",
    "CRITICAL": "::error::",
}

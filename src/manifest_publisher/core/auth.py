"""GitHub authentication and rate limiting management.

The access credential arrives as a step input, so unlike an interactive
tool there is no token store: the manager holds the token it was given,
applies it to API requests, and tracks rate-limit headers.
"""

import time

from manifest_publisher.logger import get_logger

logger = get_logger(__name__)


class GitHubAuthManager:
    """Apply a GitHub token to requests and track rate-limit status."""

    RATE_LIMIT_THRESHOLD: int = 10  # Minimum remaining requests before waiting

    def __init__(self, token: str | None = None) -> None:
        """Initialize the auth manager.

        Args:
            token: GitHub access token; anonymous requests when empty

        """
        self._token = (token or "").strip() or None
        self._rate_limit_reset: int | None = None
        self._remaining_requests: int | None = None
        self._user_notified: bool = False

    def get_token(self) -> str | None:
        """Return the configured token, if any."""
        return self._token

    def apply_auth(self, headers: dict[str, str]) -> dict[str, str]:
        """Apply GitHub authentication to the given request headers.

        Args:
            headers: HTTP headers to update.

        Returns:
            Headers with the Authorization header set when a token exists.

        """
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        elif not self._user_notified:
            self._user_notified = True
            logger.warning(
                "No GitHub token configured; write operations will fail "
                "and API rate limits apply (60 requests/hour)."
            )
        return headers

    def update_rate_limit_info(self, headers: dict[str, str]) -> None:
        """Update rate-limit information from GitHub response headers."""
        if "X-RateLimit-Remaining" not in headers:
            return
        try:
            self._remaining_requests = int(headers["X-RateLimit-Remaining"])
            self._rate_limit_reset = int(headers.get("X-RateLimit-Reset", 0))
        except (ValueError, TypeError):
            # Don't expose header values in log output
            logger.warning("Invalid rate limit headers received")

    def get_rate_limit_status(self) -> dict[str, int | None]:
        """Return remaining requests, reset time and seconds until reset."""
        current_time = int(time.time())

        if self._rate_limit_reset and current_time >= self._rate_limit_reset:
            self._remaining_requests = None
            self._rate_limit_reset = None

        return {
            "remaining": self._remaining_requests,
            "reset_time": self._rate_limit_reset,
            "reset_in_seconds": (
                self._rate_limit_reset - current_time
                if self._rate_limit_reset
                else None
            ),
        }

    def should_wait_for_rate_limit(self) -> bool:
        """Return True when remaining requests fell below the threshold."""
        if self._remaining_requests is None:
            return False
        return self._remaining_requests < self.RATE_LIMIT_THRESHOLD

    def get_wait_time(self) -> int:
        """Return the recommended wait in seconds, capped at one hour."""
        reset_in = self.get_rate_limit_status().get("reset_in_seconds")
        if reset_in and reset_in > 0:
            return min(reset_in + 10, 3600)
        return 60

    def is_authenticated(self) -> bool:
        """Return whether a non-empty token is configured."""
        return self._token is not None

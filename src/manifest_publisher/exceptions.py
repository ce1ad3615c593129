"""Exception classes for manifest-publisher operations."""


class ManifestPublisherError(Exception):
    """Base exception for manifest-publisher operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the input, asset, URL or ref involved.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class InvalidInput(ManifestPublisherError):
    """Raised when the supplied inputs cannot describe a publish run."""

    error_prefix = "Invalid input"


class AssetNotFound(ManifestPublisherError):
    """Raised when no release asset matches the name pattern."""

    error_prefix = "Asset not found"


class NoVersionMatch(ManifestPublisherError):
    """Raised when a version cannot be captured from an asset name."""

    error_prefix = "No version match"


class InvalidVersionFormat(ManifestPublisherError):
    """Raised when a version string is not dot-separated integers."""

    error_prefix = "Invalid version format"


class ChecksumComputationError(ManifestPublisherError):
    """Raised when a remote payload cannot be read for hashing."""

    error_prefix = "Checksum computation failed"


class ApiError(ManifestPublisherError):
    """Raised when a GitHub API request fails."""

    error_prefix = "GitHub API request failed"

    def __init__(
        self,
        message: str,
        target: str | None = None,
        status: int | None = None,
    ) -> None:
        """Initialize error with the HTTP status when one was received.

        Args:
            message: Error message describing the failure.
            target: Optional API path that failed.
            status: HTTP status code, None for transport failures.

        """
        super().__init__(message, target)
        self.status = status


class PublishConflict(ManifestPublisherError):
    """Raised when a branch tip moved between read and ref update."""

    error_prefix = "Publish conflict"

"""GitHub infrastructure - REST API client."""

from manifest_publisher.infrastructure.github.client import GitHubClient

__all__ = ["GitHubClient"]

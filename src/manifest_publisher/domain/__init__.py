"""Domain layer - pure types and selection logic without IO."""

from manifest_publisher.domain.asset import resolve_asset
from manifest_publisher.domain.types import (
    Commit,
    PublishRequest,
    PublishResult,
    PullRequest,
    ReleaseAsset,
    TargetRepository,
    branch_name_for,
    split_repo_name,
)
from manifest_publisher.domain.version import (
    Version,
    VersionCapture,
    derive_version_from_asset_name,
    fill_version_placeholders,
    format_version,
    parse_version,
)

__all__ = [
    "Commit",
    "PublishRequest",
    "PublishResult",
    "PullRequest",
    "ReleaseAsset",
    "TargetRepository",
    "Version",
    "VersionCapture",
    "branch_name_for",
    "derive_version_from_asset_name",
    "fill_version_placeholders",
    "format_version",
    "parse_version",
    "resolve_asset",
    "split_repo_name",
]

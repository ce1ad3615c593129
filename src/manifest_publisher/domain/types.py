"""Domain types for the publication engine.

Pure value types shared by the resolver, renderer and publisher, without
any IO or infrastructure dependencies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

from manifest_publisher.domain.version import Version

# Characters git refuses in branch names, plus whitespace
_INVALID_REF_CHARS_RE = re.compile(r"[\s~^:?*\[\]\\]+|\.\.|@\{")


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """Downloadable file attached to a published release.

    Attributes:
        name: Asset file name
        download_url: Public download URL of the asset

    """

    name: str
    download_url: str

    @classmethod
    def from_api_response(
        cls, asset_data: dict[str, Any]
    ) -> ReleaseAsset | None:
        """Create ReleaseAsset from GitHub API response data.

        Returns:
            ReleaseAsset or None if the name or download URL is missing

        """
        name = asset_data.get("name") or ""
        download_url = asset_data.get("browser_download_url") or ""
        if not name or not download_url:
            return None
        return cls(name=name, download_url=download_url)


@dataclass(frozen=True, slots=True)
class TargetRepository:
    """Repository receiving the manifest.

    Attributes:
        owner: Repository owner login
        name: Repository name
        default_branch: Branch that manifests land on
        can_push: Whether the credential may push to the repository

    """

    owner: str
    name: str
    default_branch: str
    can_push: bool = False

    @property
    def full_name(self) -> str:
        """Return ``owner/name``."""
        return f"{self.owner}/{self.name}"


def split_repo_name(full_name: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts.

    Raises:
        ValueError: If the text is not exactly two non-empty parts

    """
    parts = full_name.strip().split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        msg = f"expected 'owner/name', got '{full_name}'"
        raise ValueError(msg)
    return parts[0], parts[1]


def branch_name_for(package_id: str, version: Version) -> str:
    """Return the deterministic head branch for a package release.

    The same id and version always map to the same branch so repeated
    runs for one release converge on one branch and one pull request.
    """
    raw = f"{package_id}-{version}"
    cleaned = _INVALID_REF_CHARS_RE.sub("-", raw).strip("/.-")
    if cleaned.endswith(".lock"):
        cleaned = cleaned[: -len(".lock")]
    return cleaned


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Rendered artifacts for one publish run.

    Attributes:
        manifest: Final manifest text
        file_path: Destination path inside the target repository
        message: Commit message (first line doubles as pull request title)
        always_use_pull_request: Force the fork and pull request workflow
        package_id: Package identifier, used for the head branch name
        version: Package version, used for the head branch name

    """

    manifest: str
    file_path: str
    message: str
    always_use_pull_request: bool
    package_id: str
    version: Version

    @property
    def branch_name(self) -> str:
        """Return the deterministic head branch for this request."""
        return branch_name_for(self.package_id, self.version)


@dataclass(frozen=True, slots=True)
class Commit:
    """Commit that carries the manifest on the target branch."""

    sha: str
    url: str
    kind: Literal["commit"] = "commit"


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Pull request proposing the manifest to the target repository."""

    id: int
    url: str
    kind: Literal["pull_request"] = "pull_request"


PublishResult = Commit | PullRequest

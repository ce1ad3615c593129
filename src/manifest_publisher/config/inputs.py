"""Publish inputs gathered from the environment and the command line.

On GitHub Actions every step input ``foo`` arrives as the environment
variable ``INPUT_FOO``; release repository and tag fall back to
``GITHUB_REPOSITORY`` and ``GITHUB_REF``. Command line flags override the
environment so the same entry point works outside a workflow run.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from manifest_publisher.constants import (
    ACTION_INPUT_PREFIX,
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_MANIFEST_REPO,
    TAG_REF_PREFIX,
)
from manifest_publisher.domain.version import parse_version
from manifest_publisher.exceptions import InvalidInput

# Dataclass field name -> action input name
_INPUT_NAMES: dict[str, str] = {
    "token": "token",
    "repo": "repo",
    "branch": "branch",
    "package_id": "id",
    "manifest_text": "manifestText",
    "version": "version",
    "sha256": "sha256",
    "url": "url",
    "message": "message",
    "release_repo": "releaseRepo",
    "release_tag": "releaseTag",
    "release_asset": "releaseAsset",
    "always_use_pull_request": "alwaysUsePullRequest",
}


def _input_env_name(name: str) -> str:
    """Return the variable GitHub Actions uses for an input name."""
    return ACTION_INPUT_PREFIX + name.replace(" ", "_").upper()


def normalize_release_tag(tag: str) -> str:
    """Strip the ``refs/tags/`` prefix carried by ``GITHUB_REF``."""
    if tag.startswith(TAG_REF_PREFIX):
        return tag[len(TAG_REF_PREFIX) :]
    return tag


@dataclass(frozen=True)
class PublishInputs:
    """Everything a publish run needs, before any network access."""

    package_id: str = ""
    manifest_text: str = ""
    token: str = ""
    repo: str = DEFAULT_MANIFEST_REPO
    branch: str = ""
    version: str = ""
    sha256: str = ""
    url: str = ""
    message: str = DEFAULT_COMMIT_MESSAGE
    release_repo: str = ""
    release_tag: str = ""
    release_asset: str = ""
    always_use_pull_request: bool = False

    @property
    def needs_release_asset(self) -> bool:
        """Return whether the release asset must be looked up."""
        return not self.version or not self.url

    @property
    def has_version_conflict(self) -> bool:
        """Return whether both version and asset pattern were supplied."""
        return bool(self.version and self.release_asset)

    def validate(self) -> None:
        """Check the inputs are sufficient for a publish run.

        Raises:
            InvalidInput: On a missing required input
            InvalidVersionFormat: If an explicit version is malformed

        """
        if not self.package_id:
            msg = "the 'id' input is required"
            raise InvalidInput(msg, target="id")
        if not self.manifest_text:
            msg = "the 'manifestText' input is required"
            raise InvalidInput(msg, target="manifestText")
        if not self.version and not self.release_asset:
            msg = (
                "must specify either the 'version' parameter OR "
                "'releaseAsset' parameters."
            )
            raise InvalidInput(msg)
        if self.needs_release_asset and not (
            self.release_repo and self.release_tag
        ):
            msg = "'releaseRepo' and 'releaseTag' are required"
            raise InvalidInput(msg, target="releaseAsset")
        if self.version:
            parse_version(self.version)

    @classmethod
    def from_environment(
        cls, environ: Mapping[str, str] | None = None
    ) -> PublishInputs:
        """Build inputs from ``INPUT_*`` variables and runner defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field_name, input_name in _INPUT_NAMES.items():
            raw = env.get(_input_env_name(input_name), "")
            if field_name == "always_use_pull_request":
                values[field_name] = raw.strip().lower() == "true"
            elif field_name == "manifest_text":
                values[field_name] = raw
            elif raw.strip():
                values[field_name] = raw.strip()

        values.setdefault("release_repo", env.get("GITHUB_REPOSITORY", ""))
        values.setdefault("release_tag", env.get("GITHUB_REF", ""))
        values["release_tag"] = normalize_release_tag(values["release_tag"])
        return cls(**values)

    def with_overrides(self, overrides: Mapping[str, Any]) -> PublishInputs:
        """Return a copy where every non-None override replaces a field."""
        known = {f.name for f in fields(self)}
        changes = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None
        }
        if "release_tag" in changes:
            changes["release_tag"] = normalize_release_tag(
                changes["release_tag"]
            )
        return replace(self, **changes)

    def describe(self) -> dict[str, str]:
        """Return inputs for logging, with the token masked."""
        described = {}
        for field_name, input_name in _INPUT_NAMES.items():
            value = getattr(self, field_name)
            if field_name == "token":
                value = "***" if value else ""
            described[input_name] = str(value)
        return described

"""End-to-end publish workflow.

Runs the engine steps strictly in order: validate inputs, resolve the
release asset, establish version and URL, compute the checksum, render
the manifest, then publish. Each step's result is reported to the event
sink as soon as it is known, so a later failure still leaves the computed
values in the log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from manifest_publisher.config import PublishInputs
from manifest_publisher.core.checksum import ChecksumComputer
from manifest_publisher.core.protocols import EventSink, NullEventSink
from manifest_publisher.core.publisher import GitPublisher, resolve_target
from manifest_publisher.core.template import (
    ManifestContext,
    compute_file_path,
    render_manifest,
    render_message,
)
from manifest_publisher.domain import (
    Commit,
    PublishRequest,
    PublishResult,
    PullRequest,
    ReleaseAsset,
    Version,
    derive_version_from_asset_name,
    fill_version_placeholders,
    parse_version,
    resolve_asset,
    split_repo_name,
)
from manifest_publisher.exceptions import InvalidInput
from manifest_publisher.infrastructure.github import GitHubClient


@dataclass(frozen=True)
class PublishOutcome:
    """Values produced by a successful run."""

    version: Version
    sha256: str
    url: str
    manifest: str
    file_path: str
    message: str
    result: PublishResult


class PublishWorkflow:
    """Turn publish inputs into a published manifest."""

    def __init__(
        self,
        client: GitHubClient,
        checksums: ChecksumComputer,
        events: EventSink | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            client: GitHub API client
            checksums: Computer used when no checksum input is given
            events: Sink receiving step events

        """
        self.client = client
        self.checksums = checksums
        self.events = events or NullEventSink()

    async def run(self, inputs: PublishInputs) -> PublishOutcome:
        """Execute the full publish run.

        Raises:
            ManifestPublisherError: Any failure; the run stops at the first

        """
        inputs.validate()
        for name, value in inputs.describe().items():
            if name != "manifestText":
                self.events.info("%s=%s", name, value)

        if inputs.has_version_conflict:
            self.events.error(
                "'version' parameter specified as well as 'releaseAsset' "
                "parameter; using 'version' parameter only"
            )

        asset = None
        if inputs.needs_release_asset:
            asset = await self._locate_asset(inputs)

        version = self._resolve_version(inputs, asset)
        url = self._resolve_url(inputs, version, asset)
        self.events.info("url=%s", url)

        sha256 = inputs.sha256
        if not sha256:
            self.events.info("computing SHA256 hash of data at '%s'...", url)
            sha256 = await self.checksums.compute_digest(url)
        self.events.info("sha256=%s", sha256)

        manifest = render_manifest(
            inputs.manifest_text,
            ManifestContext(
                package_id=inputs.package_id,
                version=version,
                sha256=sha256,
                url=url,
            ),
        )
        file_path = compute_file_path(inputs.package_id, version)
        message = render_message(
            inputs.message, inputs.package_id, file_path, version
        )
        self.events.info("manifest file path is: %s", file_path)
        self.events.info("final manifest is:\n%s", manifest)

        target = await resolve_target(
            self.client, inputs.repo, inputs.branch or None
        )
        publisher = GitPublisher(self.client, target, self.events)
        result = await publisher.publish(
            PublishRequest(
                manifest=manifest,
                file_path=file_path,
                message=message,
                always_use_pull_request=inputs.always_use_pull_request,
                package_id=inputs.package_id,
                version=version,
            )
        )
        self._report_result(result)

        return PublishOutcome(
            version=version,
            sha256=sha256,
            url=url,
            manifest=manifest,
            file_path=file_path,
            message=message,
            result=result,
        )

    async def _locate_asset(self, inputs: PublishInputs) -> ReleaseAsset:
        try:
            owner, repo = split_repo_name(inputs.release_repo)
        except ValueError as e:
            raise InvalidInput(str(e), target="releaseRepo") from e

        self.events.info(
            "locating release asset in repo '%s' @ '%s'",
            inputs.release_repo,
            inputs.release_tag,
        )
        assets = await self.client.list_release_assets(
            owner, repo, inputs.release_tag
        )
        asset = resolve_asset(assets, inputs.release_asset)
        self.events.info("using release asset '%s'", asset.name)
        return asset

    def _resolve_version(
        self, inputs: PublishInputs, asset: ReleaseAsset | None
    ) -> Version:
        if inputs.version:
            return parse_version(inputs.version)
        if asset is None:
            msg = "missing asset to compute version number from"
            raise InvalidInput(msg, target="releaseAsset")

        version = derive_version_from_asset_name(
            inputs.release_asset, asset.name
        )
        self.events.info("version=%s (from asset '%s')", version, asset.name)
        return version

    def _resolve_url(
        self,
        inputs: PublishInputs,
        version: Version,
        asset: ReleaseAsset | None,
    ) -> str:
        if inputs.url:
            return fill_version_placeholders(inputs.url, version)
        if asset is None:
            msg = "missing asset to compute URL from"
            raise InvalidInput(msg, target="url")
        return asset.download_url

    def _report_result(self, result: PublishResult) -> None:
        match result:
            case Commit(sha=sha, url=url):
                self.events.info("Created commit '%s': %s", sha, url)
            case PullRequest(id=number, url=url):
                self.events.info("Created pull request '%s': %s", number, url)
            case _:
                assert_never(result)

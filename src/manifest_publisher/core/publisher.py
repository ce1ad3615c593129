"""Git-level publication of a rendered manifest.

The publisher lands a manifest in the target repository either as a direct
commit on its branch or as a pull request from a head branch:

    Resolved ──(push permission, not forced)──▶ Direct ──▶ Published
        │
        └──(forced or no push permission)──▶ Forked ──▶ Published

Both paths write the same way: blob, then a tree based on the branch tip's
tree with only the manifest path replaced, then a commit whose parent is
the tip, then a fast-forward of the branch ref.

Re-runs are idempotent. The head branch is named after package id and
version, so a second run for the same release reuses the branch, skips the
write when the manifest blob is unchanged, and returns the existing pull
request for that branch instead of opening another one. When nothing was
written, a merged or closed pull request counts as existing too.

There is no cross-run locking: the deterministic branch name and GitHub's
atomic ref updates are the only safeguards when two runs race. Nothing is
rolled back on failure; forks, branches and blobs left behind are reused by
the next run.
"""

import asyncio
import hashlib

from manifest_publisher.constants import (
    FORK_READY_POLL_ATTEMPTS,
    FORK_READY_POLL_INTERVAL_SECONDS,
    GITHUB_WEB_URL,
)
from manifest_publisher.core.protocols import EventSink, NullEventSink
from manifest_publisher.domain.types import (
    Commit,
    PublishRequest,
    PublishResult,
    PullRequest,
    TargetRepository,
    split_repo_name,
)
from manifest_publisher.exceptions import ApiError, PublishConflict
from manifest_publisher.infrastructure.github import GitHubClient
from manifest_publisher.logger import get_logger

logger = get_logger(__name__)

HTTP_CONFLICT = 409
HTTP_UNPROCESSABLE = 422


def git_blob_sha(content: bytes) -> str:
    """Return the SHA-1 git assigns to a blob with this content."""
    header = f"blob {len(content)}\0".encode()
    return hashlib.sha1(header + content, usedforsecurity=False).hexdigest()


def split_message(message: str) -> tuple[str, str]:
    """Split a commit message into pull request title and body."""
    title, _, body = message.strip().partition("\n")
    return title.strip(), body.strip()


async def resolve_target(
    client: GitHubClient, full_name: str, branch: str | None = None
) -> TargetRepository:
    """Look up the target repository.

    Args:
        client: GitHub API client
        full_name: ``owner/name`` of the manifest repository
        branch: Branch receiving manifests; the repository default when None

    Raises:
        ApiError: If the repository cannot be read

    """
    owner, name = split_repo_name(full_name)
    data = await client.get_repository(owner, name)
    if data is None:
        msg = "repository not found or not accessible"
        raise ApiError(msg, target=full_name, status=404)

    permissions = data.get("permissions") or {}
    return TargetRepository(
        owner=data.get("owner", {}).get("login", owner),
        name=data.get("name", name),
        default_branch=branch or data.get("default_branch") or "main",
        can_push=bool(permissions.get("push", False)),
    )


class GitPublisher:
    """Publish a rendered manifest to a target repository."""

    def __init__(
        self,
        client: GitHubClient,
        target: TargetRepository,
        events: EventSink | None = None,
        fork_poll_attempts: int = FORK_READY_POLL_ATTEMPTS,
        fork_poll_interval: float = FORK_READY_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the publisher.

        Args:
            client: GitHub API client
            target: Repository and branch receiving the manifest
            events: Sink for step events (discarded when None)
            fork_poll_attempts: Reads made while a new fork initializes
            fork_poll_interval: Seconds between those reads

        """
        self.client = client
        self.target = target
        self.events = events or NullEventSink()
        self.fork_poll_attempts = fork_poll_attempts
        self.fork_poll_interval = fork_poll_interval

    def uses_pull_request(self, request: PublishRequest) -> bool:
        """Return whether the request goes through a pull request.

        The explicit flag always wins; without it, a credential lacking
        push permission on the target falls back to the pull request flow.
        """
        return request.always_use_pull_request or not self.target.can_push

    async def publish(self, request: PublishRequest) -> PublishResult:
        """Publish the manifest and return the commit or pull request.

        Raises:
            ApiError: If any GitHub request fails
            PublishConflict: If the branch moved before the ref update

        """
        if self.uses_pull_request(request):
            return await self._publish_via_pull_request(request)
        return await self._publish_direct(request)

    # ------------------------------------------------------------------
    # Direct commit
    # ------------------------------------------------------------------

    async def _publish_direct(self, request: PublishRequest) -> Commit:
        owner, repo = self.target.owner, self.target.name
        branch = self.target.default_branch
        self.events.info(
            "committing directly to %s@%s", self.target.full_name, branch
        )

        tip = await self.client.get_branch_sha(owner, repo, branch)
        if tip is None:
            msg = f"branch '{branch}' does not exist"
            raise ApiError(msg, target=self.target.full_name, status=404)

        commit = await self._write_manifest(owner, repo, branch, tip, request)
        if commit is not None:
            return commit

        existing = await self.client.get_latest_commit_for_path(
            owner, repo, request.file_path, branch
        )
        if existing is not None:
            return Commit(sha=existing["sha"], url=existing["html_url"])
        return Commit(
            sha=tip, url=f"{GITHUB_WEB_URL}/{owner}/{repo}/commit/{tip}"
        )

    # ------------------------------------------------------------------
    # Fork and pull request
    # ------------------------------------------------------------------

    async def _publish_via_pull_request(
        self, request: PublishRequest
    ) -> PullRequest:
        login = await self.client.get_authenticated_login()
        head_owner, head_repo = await self._ensure_head_repository(login)
        branch = request.branch_name

        tip = await self._ensure_branch(head_owner, head_repo, branch)
        written = await self._write_manifest(
            head_owner, head_repo, branch, tip, request
        )

        # An unchanged head may belong to a merged or closed pull request;
        # opening another one would propose no commits
        head = f"{head_owner}:{branch}"
        existing = await self.client.find_pull_request(
            self.target.owner,
            self.target.name,
            head,
            self.target.default_branch,
            state="open" if written is not None else "all",
        )
        if existing is not None:
            self.events.info(
                "pull request #%s (%s) already exists for %s",
                existing["number"],
                existing.get("state", "open"),
                head,
            )
            return PullRequest(id=existing["number"], url=existing["html_url"])

        title, body = split_message(request.message)
        created = await self.client.create_pull_request(
            self.target.owner,
            self.target.name,
            title=title,
            body=body,
            head=head,
            base=self.target.default_branch,
        )
        return PullRequest(id=created["number"], url=created["html_url"])

    async def _ensure_head_repository(self, login: str) -> tuple[str, str]:
        """Return the repository that holds the head branch.

        The target itself when the credential owns it, otherwise the
        credential's fork of the target, created on first use.
        """
        if login.lower() == self.target.owner.lower():
            return self.target.owner, self.target.name

        existing = await self.client.get_repository(login, self.target.name)
        if existing is not None:
            parent = (existing.get("parent") or {}).get("full_name")
            if not existing.get("fork") or (
                parent and parent.lower() != self.target.full_name.lower()
            ):
                msg = (
                    f"'{login}/{self.target.name}' is not a fork of "
                    "the target"
                )
                raise ApiError(msg, target=self.target.full_name)
            self.events.info("reusing fork %s", existing["full_name"])
            return existing["owner"]["login"], existing["name"]

        self.events.info("forking %s", self.target.full_name)
        fork = await self.client.create_fork(
            self.target.owner, self.target.name
        )
        fork_owner, fork_name = fork["owner"]["login"], fork["name"]
        await self._wait_for_fork(
            fork_owner,
            fork_name,
            fork.get("default_branch") or self.target.default_branch,
        )
        return fork_owner, fork_name

    async def _wait_for_fork(self, owner: str, repo: str, branch: str) -> None:
        """Poll until a freshly created fork exposes its default branch."""
        for attempt in range(1, self.fork_poll_attempts + 1):
            if await self.client.get_branch_sha(owner, repo, branch):
                return
            logger.debug(
                "Fork %s/%s not ready (attempt %d/%d)",
                owner,
                repo,
                attempt,
                self.fork_poll_attempts,
            )
            await asyncio.sleep(self.fork_poll_interval)

        msg = "fork did not become ready in time"
        raise ApiError(msg, target=f"{owner}/{repo}")

    async def _ensure_branch(self, owner: str, repo: str, branch: str) -> str:
        """Return the tip of the head branch, creating it if needed."""
        tip = await self.client.get_branch_sha(owner, repo, branch)
        if tip is not None:
            self.events.info("reusing branch %s/%s:%s", owner, repo, branch)
            return tip

        base = await self.client.get_branch_sha(
            self.target.owner, self.target.name, self.target.default_branch
        )
        if base is None:
            msg = f"branch '{self.target.default_branch}' does not exist"
            raise ApiError(msg, target=self.target.full_name, status=404)

        self.events.info("creating branch %s/%s:%s", owner, repo, branch)
        try:
            return await self.client.create_branch(owner, repo, branch, base)
        except ApiError as e:
            if e.status != HTTP_UNPROCESSABLE:
                raise
            # Another run created the branch first; converge on it
            tip = await self.client.get_branch_sha(owner, repo, branch)
            if tip is None:
                raise
            return tip

    # ------------------------------------------------------------------
    # Shared write path
    # ------------------------------------------------------------------

    async def _write_manifest(
        self,
        owner: str,
        repo: str,
        branch: str,
        tip: str,
        request: PublishRequest,
    ) -> Commit | None:
        """Commit the manifest on top of ``tip`` and fast-forward ``branch``.

        Returns:
            The new commit, or None when the manifest at the tip is already
            byte-identical and nothing was written

        """
        content = request.manifest.encode("utf-8")
        current = await self.client.get_file_sha(
            owner, repo, request.file_path, tip
        )
        if current == git_blob_sha(content):
            self.events.info(
                "manifest %s unchanged on %s; nothing to commit",
                request.file_path,
                branch,
            )
            return None

        blob = await self.client.create_blob(owner, repo, request.manifest)
        base_tree = await self.client.get_commit_tree(owner, repo, tip)
        tree = await self.client.create_tree(
            owner, repo, base_tree, request.file_path, blob
        )
        commit = await self.client.create_commit(
            owner, repo, request.message, tree, tip
        )

        try:
            await self.client.update_branch(owner, repo, branch, commit["sha"])
        except ApiError as e:
            if e.status in (HTTP_CONFLICT, HTTP_UNPROCESSABLE):
                msg = f"branch '{branch}' moved while publishing: {e.message}"
                raise PublishConflict(msg, target=f"{owner}/{repo}") from e
            raise

        logger.debug(
            "Branch %s/%s:%s now at %s", owner, repo, branch, commit["sha"]
        )
        return Commit(sha=commit["sha"], url=commit["html_url"])

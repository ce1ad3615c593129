"""Low-level GitHub API client for HTTP communication.

This module handles direct HTTP communication with the GitHub REST API:
authentication, rate-limit tracking, JSON encoding and error mapping.
Read requests are retried with exponential backoff on transient failures;
write requests are sent exactly once so a retry can never create a
duplicate commit, branch or pull request.
"""

import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp
import orjson

from manifest_publisher.constants import (
    API_PAGE_SIZE,
    DEFAULT_READ_RETRY_ATTEMPTS,
    GIT_FILE_MODE,
    GITHUB_ACCEPT_HEADER,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
)
from manifest_publisher.core.auth import GitHubAuthManager
from manifest_publisher.domain.types import ReleaseAsset
from manifest_publisher.exceptions import ApiError
from manifest_publisher.logger import get_logger

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE = 422
HTTP_SERVER_ERROR = 500


def _error_message(payload: Any, fallback: str) -> str:
    """Extract GitHub's error message (and detail list) from a body."""
    if not isinstance(payload, dict):
        return fallback
    message = str(payload.get("message") or fallback)
    details = [
        str(item.get("message") or item.get("code"))
        for item in payload.get("errors") or []
        if isinstance(item, dict)
    ]
    if details:
        message = f"{message} ({'; '.join(details)})"
    return message


class GitHubClient:
    """Thin async wrapper over the GitHub REST endpoints the publisher uses."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        auth_manager: GitHubAuthManager,
        api_url: str = GITHUB_API_URL,
        retry_attempts: int = DEFAULT_READ_RETRY_ATTEMPTS,
    ) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp session for making requests
            auth_manager: GitHub authentication manager
            api_url: REST API base URL (GitHub Enterprise uses another host)
            retry_attempts: Attempts for read requests

        """
        self.session = session
        self.auth_manager = auth_manager
        self.api_url = api_url.rstrip("/")
        self.retry_attempts = max(1, retry_attempts)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": GITHUB_ACCEPT_HEADER,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        return self.auth_manager.apply_auth(headers)

    async def _wait_for_rate_limit(self) -> None:
        if self.auth_manager.should_wait_for_rate_limit():
            wait_time = self.auth_manager.get_wait_time()
            logger.warning(
                "Rate limit low (%s remaining). Waiting %s s",
                self.auth_manager.get_rate_limit_status()["remaining"],
                wait_time,
            )
            await asyncio.sleep(wait_time)

    async def _send(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        params: dict[str, Any] | None,
        allow_not_found: bool,  # noqa: FBT001
    ) -> Any | None:
        """Send a single request and decode the JSON response."""
        url = f"{self.api_url}{path}"
        headers = self._headers()
        data = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            data = orjson.dumps(payload)

        async with self.session.request(
            method, url, headers=headers, params=params, data=data
        ) as response:
            self.auth_manager.update_rate_limit_info(dict(response.headers))
            body = await response.read()
            try:
                decoded = orjson.loads(body) if body else None
            except orjson.JSONDecodeError:
                # Proxies answer some failures with HTML bodies
                decoded = None

            if response.status == HTTP_NOT_FOUND and allow_not_found:
                return None
            if response.status >= 400:  # noqa: PLR2004
                raise ApiError(
                    _error_message(decoded, response.reason or "HTTP error"),
                    target=f"{method} {path}",
                    status=response.status,
                )
            return decoded

    async def request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        *,
        allow_not_found: bool = False,
    ) -> Any | None:
        """Perform an API request.

        Args:
            method: HTTP method
            path: API path starting with "/"
            payload: JSON body for write requests
            params: Query string parameters
            allow_not_found: Return None instead of raising on 404

        Returns:
            Decoded JSON response, or None for 404 when allowed

        Raises:
            ApiError: On HTTP error status or transport failure

        """
        await self._wait_for_rate_limit()

        attempts = self.retry_attempts if method == "GET" else 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._send(
                    method, path, payload, params, allow_not_found
                )
            except ApiError as e:
                retryable = (
                    e.status is not None and e.status >= HTTP_SERVER_ERROR
                )
                if not retryable or attempt == attempts:
                    raise
                logger.warning(
                    "Attempt %d/%d for %s %s failed: %s",
                    attempt,
                    attempts,
                    method,
                    path,
                    e,
                )
            except (aiohttp.ClientError, TimeoutError) as e:
                if attempt == attempts:
                    logger.debug(
                        "%s %s failed after %d attempts",
                        method,
                        path,
                        attempt,
                    )
                    msg = f"request failed: {e}"
                    raise ApiError(msg, target=f"{method} {path}") from e
                logger.warning(
                    "Attempt %d/%d for %s %s failed: %s",
                    attempt,
                    attempts,
                    method,
                    path,
                    e,
                )
            await asyncio.sleep(2**attempt)
        return None

    # ------------------------------------------------------------------
    # Users and repositories
    # ------------------------------------------------------------------

    async def get_authenticated_login(self) -> str:
        """Return the login that owns the access token."""
        data = await self.request("GET", "/user")
        return data["login"]

    async def get_repository(
        self, owner: str, repo: str
    ) -> dict[str, Any] | None:
        """Return repository metadata, or None if it does not exist."""
        return await self.request(
            "GET", f"/repos/{owner}/{repo}", allow_not_found=True
        )

    async def create_fork(self, owner: str, repo: str) -> dict[str, Any]:
        """Fork a repository into the authenticated user's account."""
        return await self.request(
            "POST",
            f"/repos/{owner}/{repo}/forks",
            {"default_branch_only": True},
        )

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def list_release_assets(
        self, owner: str, repo: str, tag: str
    ) -> list[ReleaseAsset]:
        """List the assets of the release tagged ``tag`` in listing order.

        Raises:
            ApiError: If the release does not exist or a request fails

        """
        release = await self.request(
            "GET", f"/repos/{owner}/{repo}/releases/tags/{quote(tag)}"
        )
        release_id = release["id"]

        assets: list[ReleaseAsset] = []
        page = 1
        while True:
            batch = await self.request(
                "GET",
                f"/repos/{owner}/{repo}/releases/{release_id}/assets",
                params={"per_page": API_PAGE_SIZE, "page": page},
            )
            batch = batch or []
            for item in batch:
                asset = ReleaseAsset.from_api_response(item)
                if asset is not None:
                    assets.append(asset)
            if len(batch) < API_PAGE_SIZE:
                break
            page += 1

        logger.debug(
            "Release %s/%s@%s has %d assets", owner, repo, tag, len(assets)
        )
        return assets

    # ------------------------------------------------------------------
    # Git data
    # ------------------------------------------------------------------

    async def get_branch_sha(
        self, owner: str, repo: str, branch: str
    ) -> str | None:
        """Return the commit SHA a branch points to, or None if absent."""
        data = await self.request(
            "GET",
            f"/repos/{owner}/{repo}/git/ref/heads/{quote(branch)}",
            allow_not_found=True,
        )
        if not isinstance(data, dict):
            return None
        return data["object"]["sha"]

    async def create_branch(
        self, owner: str, repo: str, branch: str, sha: str
    ) -> str:
        """Create ``refs/heads/<branch>`` pointing at ``sha``."""
        data = await self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            {"ref": f"refs/heads/{branch}", "sha": sha},
        )
        return data["object"]["sha"]

    async def update_branch(
        self, owner: str, repo: str, branch: str, sha: str
    ) -> str:
        """Fast-forward a branch to ``sha``; never forces."""
        data = await self.request(
            "PATCH",
            f"/repos/{owner}/{repo}/git/refs/heads/{quote(branch)}",
            {"sha": sha, "force": False},
        )
        return data["object"]["sha"]

    async def get_commit_tree(self, owner: str, repo: str, sha: str) -> str:
        """Return the tree SHA of a commit."""
        data = await self.request(
            "GET", f"/repos/{owner}/{repo}/git/commits/{sha}"
        )
        return data["tree"]["sha"]

    async def get_file_sha(
        self, owner: str, repo: str, path: str, ref: str
    ) -> str | None:
        """Return the blob SHA of ``path`` at ``ref``, or None if absent."""
        data = await self.request(
            "GET",
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            params={"ref": ref},
            allow_not_found=True,
        )
        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        return data.get("sha")

    async def create_blob(self, owner: str, repo: str, content: str) -> str:
        """Store UTF-8 content as a blob and return its SHA."""
        data = await self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/blobs",
            {"content": content, "encoding": "utf-8"},
        )
        return data["sha"]

    async def create_tree(
        self,
        owner: str,
        repo: str,
        base_tree: str,
        path: str,
        blob_sha: str,
    ) -> str:
        """Create a tree equal to ``base_tree`` with one file replaced."""
        data = await self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/trees",
            {
                "base_tree": base_tree,
                "tree": [
                    {
                        "path": path,
                        "mode": GIT_FILE_MODE,
                        "type": "blob",
                        "sha": blob_sha,
                    }
                ],
            },
        )
        return data["sha"]

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parent: str,
    ) -> dict[str, Any]:
        """Create a commit object with a single parent."""
        return await self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/commits",
            {"message": message, "tree": tree, "parents": [parent]},
        )

    async def get_latest_commit_for_path(
        self, owner: str, repo: str, path: str, branch: str
    ) -> dict[str, Any] | None:
        """Return the newest commit on ``branch`` that touched ``path``."""
        data = await self.request(
            "GET",
            f"/repos/{owner}/{repo}/commits",
            params={"path": path, "sha": branch, "per_page": 1},
        )
        if not data:
            return None
        return data[0]

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    async def find_pull_request(
        self,
        owner: str,
        repo: str,
        head: str,
        base: str,
        state: str = "open",
    ) -> dict[str, Any] | None:
        """Return the newest pull request from ``head`` into ``base``.

        Args:
            owner: Target repository owner
            repo: Target repository name
            head: Head reference as ``login:branch``
            base: Base branch
            state: ``open``, ``closed`` or ``all``

        """
        data = await self.request(
            "GET",
            f"/repos/{owner}/{repo}/pulls",
            params={
                "state": state,
                "head": head,
                "base": base,
                "sort": "created",
                "direction": "desc",
                "per_page": 1,
            },
        )
        if not data:
            return None
        return data[0]

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> dict[str, Any]:
        """Open a pull request from ``head`` (``login:branch``) to ``base``."""
        return await self.request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            {"title": title, "body": body, "head": head, "base": base},
        )

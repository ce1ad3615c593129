"""Pytest configuration and fixtures for manifest-publisher tests.

Provides:
- Log propagation so caplog sees records from the package loggers
- An async chunk generator for simulating streamed HTTP bodies
- A recording event sink
- An in-memory GitHub implementing the GitHubClient API used by the
  publisher and workflow (repositories, refs, blobs, trees, commits,
  forks, pull requests, release assets)
"""

import hashlib
import itertools
import logging
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest

from manifest_publisher.core.publisher import git_blob_sha
from manifest_publisher.domain.types import ReleaseAsset
from manifest_publisher.exceptions import ApiError


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation so pytest's caplog captures package logs."""
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("manifest_publisher"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logging.getLogger(name).propagate = propagate_value


# =============================================================================
# Async Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Yield chunks like ``response.content.iter_chunked`` does."""
    for chunk in chunks:
        yield chunk


@pytest.fixture
def chunk_stream() -> Callable[[list[bytes]], AsyncGenerator[bytes, None]]:
    """Return the async chunk generator factory."""
    return async_chunk_gen


# =============================================================================
# Event Sink
# =============================================================================


class RecordingEventSink:
    """Event sink keeping every rendered event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def info(self, message: str, *args: object) -> None:
        self.events.append(("info", message % args if args else message))

    def error(self, message: str, *args: object) -> None:
        self.events.append(("error", message % args if args else message))

    @property
    def infos(self) -> list[str]:
        return [text for level, text in self.events if level == "info"]

    @property
    def errors(self) -> list[str]:
        return [text for level, text in self.events if level == "error"]


@pytest.fixture
def event_sink() -> RecordingEventSink:
    """Provide a fresh recording event sink."""
    return RecordingEventSink()


# =============================================================================
# In-memory GitHub
# =============================================================================


class FakeGitHub:
    """In-memory stand-in for GitHubClient.

    Objects are content addressed like git, so identical manifests yield
    identical blob SHAs and the publisher's no-op detection works as it
    does against the real API. Every mutating call is appended to
    ``writes``.
    """

    def __init__(self, login: str = "release-bot") -> None:
        self.login = login
        self.repos: dict[str, dict[str, Any]] = {}
        self.refs: dict[tuple[str, str], str] = {}
        self.blobs: dict[str, bytes] = {}
        self.trees: dict[str, dict[str, str]] = {}
        self.commits: dict[str, dict[str, Any]] = {}
        self.pulls: list[dict[str, Any]] = []
        self.assets: dict[tuple[str, str], list[ReleaseAsset]] = {}
        self.writes: list[str] = []
        self.before_update: Callable[[str, str, str], None] | None = None
        self._counter = itertools.count(1)
        self._pull_numbers = itertools.count(101)

    # -- setup helpers -------------------------------------------------

    def _store_tree(self, entries: dict[str, str]) -> str:
        serialized = "\n".join(f"{p} {s}" for p, s in sorted(entries.items()))
        sha = hashlib.sha1(serialized.encode()).hexdigest()
        self.trees[sha] = dict(entries)
        return sha

    def _store_blob(self, content: bytes) -> str:
        sha = git_blob_sha(content)
        self.blobs[sha] = content
        return sha

    def _store_commit(
        self, tree: str, parents: list[str], message: str
    ) -> str:
        seed = f"{tree}{parents}{message}{next(self._counter)}"
        sha = hashlib.sha1(seed.encode()).hexdigest()
        self.commits[sha] = {
            "tree": tree,
            "parents": parents,
            "message": message,
        }
        return sha

    def add_repo(
        self,
        full_name: str,
        *,
        default_branch: str = "master",
        files: dict[str, str] | None = None,
        can_push: bool = False,
        fork_of: str | None = None,
    ) -> str:
        """Create a repository with one commit holding ``files``."""
        entries = {
            path: self._store_blob(text.encode("utf-8"))
            for path, text in (files or {}).items()
        }
        tip = self._store_commit(self._store_tree(entries), [], "initial")
        self._register_repo(
            full_name, default_branch, tip, can_push=can_push, fork_of=fork_of
        )
        return tip

    def _register_repo(
        self,
        full_name: str,
        default_branch: str,
        tip: str,
        *,
        can_push: bool,
        fork_of: str | None,
    ) -> None:
        owner, name = full_name.split("/")
        self.repos[full_name.lower()] = {
            "name": name,
            "full_name": full_name,
            "owner": {"login": owner},
            "default_branch": default_branch,
            "fork": fork_of is not None,
            "parent": {"full_name": fork_of} if fork_of else None,
            "permissions": {"push": can_push},
        }
        self.refs[(full_name.lower(), default_branch)] = tip

    def add_release(
        self, full_name: str, tag: str, assets: list[ReleaseAsset]
    ) -> None:
        self.assets[(full_name.lower(), tag)] = list(assets)

    def file_at(self, full_name: str, branch: str, path: str) -> str | None:
        """Return the text of ``path`` at a branch tip."""
        tip = self.refs.get((full_name.lower(), branch))
        if tip is None:
            return None
        blob = self.trees[self.commits[tip]["tree"]].get(path)
        return None if blob is None else self.blobs[blob].decode("utf-8")

    def _resolve(self, full_name: str, ref: str) -> str | None:
        if ref in self.commits:
            return ref
        return self.refs.get((full_name.lower(), ref))

    @staticmethod
    def _not_found(path: str) -> ApiError:
        return ApiError("Not Found", target=path, status=404)

    # -- GitHubClient API ----------------------------------------------

    async def get_authenticated_login(self) -> str:
        return self.login

    async def get_repository(
        self, owner: str, repo: str
    ) -> dict[str, Any] | None:
        data = self.repos.get(f"{owner}/{repo}".lower())
        return None if data is None else dict(data)

    async def create_fork(self, owner: str, repo: str) -> dict[str, Any]:
        self.writes.append("create_fork")
        source = self.repos[f"{owner}/{repo}".lower()]
        fork_name = f"{self.login}/{repo}"
        key = (source["full_name"].lower(), source["default_branch"])
        tip = self.refs[key]
        self._register_repo(
            fork_name,
            source["default_branch"],
            tip,
            can_push=True,
            fork_of=source["full_name"],
        )
        return dict(self.repos[fork_name.lower()])

    async def list_release_assets(
        self, owner: str, repo: str, tag: str
    ) -> list[ReleaseAsset]:
        key = (f"{owner}/{repo}".lower(), tag)
        if key not in self.assets:
            raise self._not_found(f"/repos/{owner}/{repo}/releases/tags/{tag}")
        return list(self.assets[key])

    async def get_branch_sha(
        self, owner: str, repo: str, branch: str
    ) -> str | None:
        return self.refs.get((f"{owner}/{repo}".lower(), branch))

    async def create_branch(
        self, owner: str, repo: str, branch: str, sha: str
    ) -> str:
        self.writes.append("create_branch")
        key = (f"{owner}/{repo}".lower(), branch)
        if key in self.refs:
            msg = "Reference already exists"
            raise ApiError(msg, target=branch, status=422)
        self.refs[key] = sha
        return sha

    async def update_branch(
        self, owner: str, repo: str, branch: str, sha: str
    ) -> str:
        self.writes.append("update_branch")
        if self.before_update is not None:
            self.before_update(owner, repo, branch)
        key = (f"{owner}/{repo}".lower(), branch)
        if self.refs.get(key) not in self.commits[sha]["parents"]:
            msg = "Update is not a fast forward"
            raise ApiError(msg, target=branch, status=422)
        self.refs[key] = sha
        return sha

    async def get_commit_tree(self, owner: str, repo: str, sha: str) -> str:
        return self.commits[sha]["tree"]

    async def get_file_sha(
        self, owner: str, repo: str, path: str, ref: str
    ) -> str | None:
        commit = self._resolve(f"{owner}/{repo}", ref)
        if commit is None:
            raise self._not_found(path)
        return self.trees[self.commits[commit]["tree"]].get(path)

    async def create_blob(self, owner: str, repo: str, content: str) -> str:
        self.writes.append("create_blob")
        return self._store_blob(content.encode("utf-8"))

    async def create_tree(
        self,
        owner: str,
        repo: str,
        base_tree: str,
        path: str,
        blob_sha: str,
    ) -> str:
        self.writes.append("create_tree")
        entries = dict(self.trees[base_tree])
        entries[path] = blob_sha
        return self._store_tree(entries)

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parent: str,
    ) -> dict[str, Any]:
        self.writes.append("create_commit")
        sha = self._store_commit(tree, [parent], message)
        return {
            "sha": sha,
            "html_url": f"https://github.com/{owner}/{repo}/commit/{sha}",
        }

    async def get_latest_commit_for_path(
        self, owner: str, repo: str, path: str, branch: str
    ) -> dict[str, Any] | None:
        sha = self.refs.get((f"{owner}/{repo}".lower(), branch))
        while sha is not None:
            commit = self.commits[sha]
            blob = self.trees[commit["tree"]].get(path)
            parent = commit["parents"][0] if commit["parents"] else None
            parent_blob = (
                self.trees[self.commits[parent]["tree"]].get(path)
                if parent
                else None
            )
            if blob is not None and blob != parent_blob:
                return {
                    "sha": sha,
                    "html_url": (
                        f"https://github.com/{owner}/{repo}/commit/{sha}"
                    ),
                }
            sha = parent
        return None

    async def find_pull_request(
        self,
        owner: str,
        repo: str,
        head: str,
        base: str,
        state: str = "open",
    ) -> dict[str, Any] | None:
        for pull in reversed(self.pulls):
            if (
                pull["repo"] == f"{owner}/{repo}".lower()
                and pull["head"] == head
                and pull["base"] == base
                and state in ("all", pull["state"])
            ):
                return pull
        return None

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> dict[str, Any]:
        self.writes.append("create_pull_request")
        number = next(self._pull_numbers)
        pull = {
            "number": number,
            "html_url": f"https://github.com/{owner}/{repo}/pull/{number}",
            "repo": f"{owner}/{repo}".lower(),
            "head": head,
            "base": base,
            "title": title,
            "body": body,
            "state": "open",
        }
        self.pulls.append(pull)
        return pull


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty in-memory GitHub."""
    return FakeGitHub()

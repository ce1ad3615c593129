"""HTTP session utilities for manifest-publisher."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from manifest_publisher.constants import DEFAULT_TIMEOUT_SECONDS


@asynccontextmanager
async def create_http_session(
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    The total timeout is generous because the same session streams release
    assets of arbitrary size for hashing; only connect and per-read stalls
    are bounded tightly.

    Args:
        timeout_seconds: Base timeout in seconds

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout = aiohttp.ClientTimeout(
        total=timeout_seconds * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    connector = aiohttp.TCPConnector(limit=4)

    async with aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
    ) as session:
        yield session

"""Checksum computation for remote release assets.

Payloads are streamed through an incremental SHA-256 accumulator chunk by
chunk, so memory use stays bounded regardless of the asset size.
"""

import hashlib

import aiohttp

from manifest_publisher.constants import CHUNK_SIZE
from manifest_publisher.exceptions import ChecksumComputationError
from manifest_publisher.logger import get_logger

logger = get_logger(__name__)


class ChecksumComputer:
    """Compute content digests of remote resources."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        """Initialize with the HTTP session used for downloads.

        Args:
            session: aiohttp session for downloads
            chunk_size: Bytes read per streaming step

        """
        self.session = session
        self.chunk_size = chunk_size

    async def compute_digest(self, url: str) -> str:
        """Return the lowercase hex SHA-256 digest of the data at ``url``.

        Raises:
            ChecksumComputationError: On any HTTP or transport failure

        """
        sha256_hash = hashlib.sha256()
        total = 0
        try:
            async with self.session.get(url) as response:
                response.raise_for_status()
                async for chunk in response.content.iter_chunked(
                    self.chunk_size
                ):
                    if chunk:
                        sha256_hash.update(chunk)
                        total += len(chunk)
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = f"unable to read payload: {e}"
            raise ChecksumComputationError(msg, target=url) from e

        digest = sha256_hash.hexdigest()
        logger.debug("Hashed %s bytes from %s", f"{total:,}", url)
        return digest

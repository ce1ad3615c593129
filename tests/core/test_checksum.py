"""Tests for streaming checksum computation."""

import hashlib
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from manifest_publisher.core.checksum import ChecksumComputer
from manifest_publisher.exceptions import ChecksumComputationError


def _mock_session(response):
    session = MagicMock()
    session.get.return_value = response
    return session


def _mock_response(chunk_stream, chunks):
    response = AsyncMock()
    response.__aenter__.return_value = response
    response.raise_for_status = MagicMock()
    response.content.iter_chunked = MagicMock(
        return_value=chunk_stream(chunks)
    )
    return response


@pytest.mark.asyncio
async def test_digest_of_streamed_payload(chunk_stream):
    chunks = [b"hello ", b"", b"world"]
    session = _mock_session(_mock_response(chunk_stream, chunks))

    digest = await ChecksumComputer(session, chunk_size=4).compute_digest(
        "https://dl/tool.zip"
    )

    assert digest == hashlib.sha256(b"hello world").hexdigest()
    session.get.assert_called_once_with("https://dl/tool.zip")


@pytest.mark.asyncio
async def test_digest_is_lowercase_hex(chunk_stream):
    session = _mock_session(_mock_response(chunk_stream, [b"\x00\xff"]))
    digest = await ChecksumComputer(session).compute_digest("https://dl/x")
    assert digest == digest.lower()
    assert len(digest) == 64


@pytest.mark.asyncio
async def test_empty_payload(chunk_stream):
    session = _mock_session(_mock_response(chunk_stream, []))
    digest = await ChecksumComputer(session).compute_digest("https://dl/x")
    assert digest == hashlib.sha256(b"").hexdigest()


@pytest.mark.asyncio
async def test_http_error_status(chunk_stream):
    response = _mock_response(chunk_stream, [])
    response.raise_for_status.side_effect = aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=404, message="Not Found"
    )
    session = _mock_session(response)

    with pytest.raises(ChecksumComputationError) as exc_info:
        await ChecksumComputer(session).compute_digest("https://dl/missing")
    assert exc_info.value.target == "https://dl/missing"


@pytest.mark.asyncio
async def test_transport_error():
    response = AsyncMock()
    response.__aenter__.side_effect = aiohttp.ClientConnectionError("reset")
    session = _mock_session(response)

    with pytest.raises(ChecksumComputationError, match="reset"):
        await ChecksumComputer(session).compute_digest("https://dl/x")


@pytest.mark.asyncio
async def test_timeout():
    response = AsyncMock()
    response.__aenter__.side_effect = TimeoutError()
    session = _mock_session(response)

    with pytest.raises(ChecksumComputationError):
        await ChecksumComputer(session).compute_digest("https://dl/x")

"""Tests for the exception hierarchy."""

import pytest

from manifest_publisher.exceptions import (
    ApiError,
    AssetNotFound,
    ChecksumComputationError,
    InvalidInput,
    InvalidVersionFormat,
    ManifestPublisherError,
    NoVersionMatch,
    PublishConflict,
)


class TestManifestPublisherError:
    """Tests for the base exception."""

    def test_message_without_target(self):
        error = ManifestPublisherError("something broke")
        assert str(error) == "Operation failed: something broke"
        assert error.message == "something broke"
        assert error.target is None

    def test_message_with_target(self):
        error = ManifestPublisherError("something broke", target="x")
        assert str(error) == "Operation failed for 'x': something broke"


class TestSubclasses:
    """Each failure kind carries its own prefix."""

    @pytest.mark.parametrize(
        ("error_class", "prefix"),
        [
            (InvalidInput, "Invalid input"),
            (AssetNotFound, "Asset not found"),
            (NoVersionMatch, "No version match"),
            (InvalidVersionFormat, "Invalid version format"),
            (ChecksumComputationError, "Checksum computation failed"),
            (ApiError, "GitHub API request failed"),
            (PublishConflict, "Publish conflict"),
        ],
    )
    def test_prefix_and_inheritance(self, error_class, prefix):
        error = error_class("details", target="thing")
        assert isinstance(error, ManifestPublisherError)
        assert str(error) == f"{prefix} for 'thing': details"

    def test_api_error_keeps_status(self):
        error = ApiError("Not Found", target="GET /user", status=404)
        assert error.status == 404

    def test_api_error_status_defaults_to_none(self):
        assert ApiError("timeout").status is None

    def test_can_be_caught_as_base(self):
        with pytest.raises(ManifestPublisherError):
            raise AssetNotFound("none", target="app-.*")

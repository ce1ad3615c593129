"""Configuration: publish inputs from environment and command line."""

from manifest_publisher.config.inputs import (
    PublishInputs,
    normalize_release_tag,
)

__all__ = ["PublishInputs", "normalize_release_tag"]

"""Workflows composing the engine into complete runs."""

from manifest_publisher.workflows.publish import (
    PublishOutcome,
    PublishWorkflow,
)

__all__ = ["PublishOutcome", "PublishWorkflow"]

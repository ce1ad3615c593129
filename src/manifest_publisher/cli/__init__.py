"""Command line interface for manifest-publisher."""

from manifest_publisher.cli.parser import CLIParser
from manifest_publisher.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]

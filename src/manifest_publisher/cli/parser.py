"""CLI argument parser for manifest-publisher.

Every flag mirrors a GitHub Actions input. Flags left unset keep the value
read from the ``INPUT_*`` environment, so the action wrapper can call the
entry point without arguments.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path
from typing import Any


class CLIParser:
    """Command-line argument parser for manifest-publisher."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse; ``sys.argv[1:]`` when None

        Returns:
            Parsed arguments namespace

        """
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_manifest_options(parser)
        self._add_release_options(parser)
        self._add_target_options(parser)
        return parser.parse_args(argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="manifest-publisher",
            description="Publish a package manifest to a manifest repository",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Derive version and URL from a release asset, open a pull request
  %(prog)s --id Contoso.Tool --manifest-file manifest.yaml \\
      --release-repo contoso/tool --release-tag v3.1.4 \\
      --release-asset 'tool-(?<version>\\d+\\.\\d+\\.\\d+)\\.zip'

  # Explicit version and URL, commit directly when permitted
  %(prog)s --id Contoso.Tool --manifest-file manifest.yaml \\
      --version 3.1.4 --url 'https://example/tool-{{version}}.zip'
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--version-info",
            action="store_true",
            help="Show manifest-publisher version and exit",
        )
        parser.add_argument(
            "--token",
            help="GitHub access token (prefer the INPUT_TOKEN variable)",
        )

    def _add_manifest_options(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("manifest")
        group.add_argument(
            "--id", dest="package_id", help="Package identifier"
        )
        text = group.add_mutually_exclusive_group()
        text.add_argument(
            "--manifest-text", help="Manifest template text"
        )
        text.add_argument(
            "--manifest-file",
            type=Path,
            help="Read the manifest template from a file",
        )
        group.add_argument(
            "--version", help="Package version (wins over --release-asset)"
        )
        group.add_argument("--sha256", help="Installer SHA-256 checksum")
        group.add_argument(
            "--url",
            help="Installer URL; version placeholders are filled in",
        )
        group.add_argument("--message", help="Commit message template")

    def _add_release_options(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("release")
        group.add_argument(
            "--release-repo", help="Repository owning the release"
        )
        group.add_argument("--release-tag", help="Release tag")
        group.add_argument(
            "--release-asset",
            help="Regular expression selecting the release asset",
        )

    def _add_target_options(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("target")
        group.add_argument(
            "--repo", help="Manifest repository (owner/name)"
        )
        group.add_argument(
            "--branch", help="Branch receiving the manifest"
        )
        group.add_argument(
            "--always-use-pull-request",
            action="store_const",
            const=True,
            default=None,
            help="Always publish through a fork and pull request",
        )


def overrides_from_args(args: Namespace) -> dict[str, Any]:
    """Return PublishInputs overrides for the flags that were given."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key not in {"version_info", "manifest_file"}
    }
    if args.manifest_file is not None:
        overrides["manifest_text"] = args.manifest_file.read_text(
            encoding="utf-8"
        )
    return overrides

"""Manifest template rendering.

Templates use a fixed set of ``{{name}}`` placeholders; there is no general
templating language. Every occurrence of a known placeholder is replaced in
a single pass and unknown tokens are kept verbatim.

Manifest placeholders:
    {{id}}                         package identifier
    {{sha256}}                     checksum of the installer
    {{url}}                        installer download URL
    {{version}}                    full version
    {{version.major}}              first component
    {{version.major_minor}}        first two components
    {{version.major_minor_patch}}  first three components

Commit message placeholders:
    {{id}}, {{file}} and the version placeholders above
"""

from __future__ import annotations

from dataclasses import dataclass

from manifest_publisher.constants import MANIFEST_EXTENSION, MANIFESTS_ROOT
from manifest_publisher.domain.version import (
    Version,
    substitute_placeholders,
    version_placeholders,
)


@dataclass(frozen=True, slots=True)
class ManifestContext:
    """Values substituted into a manifest template."""

    package_id: str
    version: Version
    sha256: str
    url: str

    def placeholders(self) -> dict[str, str]:
        """Return the placeholder name to value mapping."""
        values = {
            "id": self.package_id,
            "sha256": self.sha256,
            "url": self.url,
        }
        values.update(version_placeholders(self.version))
        return values


def render_manifest(template: str, context: ManifestContext) -> str:
    """Substitute manifest placeholders into ``template``."""
    return substitute_placeholders(template, context.placeholders())


def render_message(
    template: str, package_id: str, file_path: str, version: Version
) -> str:
    """Substitute commit message placeholders into ``template``."""
    values = {"id": package_id, "file": file_path}
    values.update(version_placeholders(version))
    return substitute_placeholders(template, values)


def compute_file_path(package_id: str, version: Version) -> str:
    """Return the manifest path for a package version.

    Every dot of the identifier becomes a directory separator:
    ``Contoso.Tool`` at 3.1.4 maps to ``manifests/Contoso/Tool/3.1.4.yaml``.
    """
    id_path = package_id.replace(".", "/")
    return f"{MANIFESTS_ROOT}/{id_path}/{version}{MANIFEST_EXTENSION}"

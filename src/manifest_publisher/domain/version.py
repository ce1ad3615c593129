"""Version parsing and derivation from release asset names.

A manifest version is a plain dotted sequence of non-negative integers
(``1.2.3``). It can be given explicitly or captured from a release asset
name with a regular expression, preferring a ``version`` named group over
the first positional group.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from manifest_publisher.exceptions import (
    InvalidInput,
    InvalidVersionFormat,
    NoVersionMatch,
)

_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")

# ECMAScript named groups "(?<name>" without lookbehind "(?<=" / "(?<!".
# Only an even run of backslashes may precede the parenthesis; an odd run
# escapes it.
_ECMASCRIPT_NAMED_GROUP_RE = re.compile(r"(?<!\\)((?:\\\\)*)\(\?<(?![=!])")

VERSION_GROUP = "version"


@dataclass(frozen=True, slots=True)
class Version:
    """Immutable dotted version made of non-negative integer components."""

    components: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.components:
            msg = "version needs at least one component"
            raise InvalidVersionFormat(msg)
        if any(part < 0 for part in self.components):
            msg = "version components must be non-negative"
            raise InvalidVersionFormat(msg, target=repr(self.components))

    @classmethod
    def of(cls, *components: int) -> Version:
        """Build a version from integer components."""
        return cls(tuple(components))

    def format(self, precision: int | None = None) -> str:
        """Join the first ``precision`` components with dots.

        Asking for more components than exist returns the full value.
        """
        if precision is None:
            return ".".join(str(part) for part in self.components)
        if precision < 1:
            msg = f"precision must be at least 1, got {precision}"
            raise ValueError(msg)
        return ".".join(str(part) for part in self.components[:precision])

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, slots=True)
class VersionCapture:
    """Capture groups of interest extracted from an asset-name match.

    Attributes:
        named_version: Value of the ``version`` named group, if it matched
        first_group: Value of the first positional group, if it matched

    """

    named_version: str | None
    first_group: str | None

    @classmethod
    def from_match(cls, match: re.Match[str]) -> VersionCapture:
        """Extract the named and first positional groups from a match."""
        named = match.groupdict().get(VERSION_GROUP)
        first = match.group(1) if match.re.groups >= 1 else None
        return cls(named_version=named, first_group=first)

    @property
    def value(self) -> str | None:
        """Return the captured version text, preferring the named group."""
        return self.named_version or self.first_group


def parse_version(text: str) -> Version:
    """Parse a dotted version string.

    Args:
        text: Version text such as ``"1.2.3"``; surrounding whitespace is
            ignored

    Returns:
        Parsed Version

    Raises:
        InvalidVersionFormat: If text is empty or holds anything other than
            dot-separated digit groups

    """
    candidate = (text or "").strip()
    if not candidate:
        msg = "version string is empty"
        raise InvalidVersionFormat(msg)
    if not _VERSION_RE.match(candidate):
        msg = "expected dot-separated non-negative integers"
        raise InvalidVersionFormat(msg, target=candidate)
    return Version(tuple(int(part) for part in candidate.split(".")))


def format_version(version: Version, precision: int | None = None) -> str:
    """Format version with at most ``precision`` components."""
    return version.format(precision)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a user-supplied asset pattern.

    Patterns written for JavaScript regular expressions use ``(?<name>...)``
    for named groups; they are rewritten to Python's ``(?P<name>...)``.

    Raises:
        InvalidInput: If the pattern is not a valid regular expression

    """
    translated = _ECMASCRIPT_NAMED_GROUP_RE.sub(r"\1(?P<", pattern)
    try:
        return re.compile(translated)
    except re.error as e:
        msg = f"invalid regular expression: {e}"
        raise InvalidInput(msg, target=pattern) from e


def derive_version_from_asset_name(pattern: str, asset_name: str) -> Version:
    """Capture a version from an asset name.

    Args:
        pattern: Regular expression searched in the asset name
        asset_name: Release asset file name

    Returns:
        Version taken from the ``version`` named group, or from the first
        capture group when the named group is absent or did not match

    Raises:
        NoVersionMatch: If the pattern does not match, exposes no capture
            group, or the selected group did not participate
        InvalidVersionFormat: If the captured text is not a valid version

    """
    regex = compile_pattern(pattern)
    match = regex.search(asset_name)
    if match is None:
        msg = f"pattern '{pattern}' does not match"
        raise NoVersionMatch(msg, target=asset_name)
    if regex.groups < 1:
        msg = f"pattern '{pattern}' has no capture group"
        raise NoVersionMatch(msg, target=asset_name)

    captured = VersionCapture.from_match(match).value
    if captured is None:
        msg = f"pattern '{pattern}' captured nothing"
        raise NoVersionMatch(msg, target=asset_name)
    return parse_version(captured)


def fill_version_placeholders(text: str, version: Version) -> str:
    """Replace every version placeholder in text.

    Handles ``{{version}}``, ``{{version.major}}``,
    ``{{version.major_minor}}`` and ``{{version.major_minor_patch}}``.
    """
    return substitute_placeholders(text, version_placeholders(version))


def version_placeholders(version: Version) -> dict[str, str]:
    """Return the placeholder values derived from a version."""
    return {
        "version": version.format(),
        "version.major": version.format(1),
        "version.major_minor": version.format(2),
        "version.major_minor_patch": version.format(3),
    }


_PLACEHOLDER_RE = re.compile(r"\{\{([A-Za-z0-9_.]+)\}\}")


def substitute_placeholders(text: str, values: dict[str, str]) -> str:
    """Replace every ``{{name}}`` token whose name is in ``values``.

    Substitution is a single pass, so inserted values are never scanned for
    further placeholders. Unknown tokens are kept verbatim.
    """

    def _replace(match: re.Match[str]) -> str:
        return values.get(match.group(1), match.group(0))

    return _PLACEHOLDER_RE.sub(_replace, text)

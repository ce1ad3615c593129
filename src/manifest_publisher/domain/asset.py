"""Release asset selection.

Pure business logic for picking the release asset whose name matches a
user-supplied pattern.
"""

from collections.abc import Iterable

from manifest_publisher.domain.types import ReleaseAsset
from manifest_publisher.domain.version import compile_pattern
from manifest_publisher.exceptions import AssetNotFound


def resolve_asset(
    assets: Iterable[ReleaseAsset], name_pattern: str
) -> ReleaseAsset:
    """Return the first asset whose name matches ``name_pattern``.

    Several matching assets are not an error: the first one in platform
    listing order is selected.

    Args:
        assets: Release assets in listing order
        name_pattern: Regular expression searched in each asset name

    Returns:
        First matching asset

    Raises:
        AssetNotFound: If no asset name matches
        InvalidInput: If the pattern is not a valid regular expression

    """
    regex = compile_pattern(name_pattern)
    for asset in assets:
        if regex.search(asset.name):
            return asset

    msg = "no release asset name matches the pattern"
    raise AssetNotFound(msg, target=name_pattern)

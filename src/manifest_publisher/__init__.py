"""Top-level package for manifest-publisher.

License: GPL-3.0
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("manifest-publisher")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"

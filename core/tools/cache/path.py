"""Cache path utilities.

The ip-ranges document is cached under the user's ``~/.aws/`` directory,
next to the AWS CLI configuration.

Attributes:
    CACHE_ROOT: cache root directory (``{home}/.aws``).
    DEFAULT_CACHE_FILENAME: cached document file name.
"""

import os
from pathlib import Path

DEFAULT_CACHE_FILENAME = "ip-ranges.json"


def _get_home_dir() -> str:
    """Return the executing user's home directory."""
    return str(Path.home())


# Cache root directory ({home}/.aws)
CACHE_ROOT = os.path.join(_get_home_dir(), ".aws")


def get_cache_dir() -> str:
    """Return the cache directory path

    The directory is not created here; the cache writer creates it on the
    first successful fetch.

    Example:
        >>> get_cache_dir()
        '/home/user/.aws'
    """
    return CACHE_ROOT


def get_cache_path(filename: str = DEFAULT_CACHE_FILENAME) -> str:
    """Return the cache file path

    Args:
        filename: cache file name (default: "ip-ranges.json")

    Returns:
        absolute cache file path

    Example:
        >>> get_cache_path()
        '/home/user/.aws/ip-ranges.json'
    """
    return os.path.join(get_cache_dir(), filename)

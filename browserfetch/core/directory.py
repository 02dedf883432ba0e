"""
Default directory locations for browserfetch.

Downloaded browsers live in a per-user cache directory, one sub-directory per
product:

    <cache>/browserfetch/
        - chromium/   : Chrome/Chromium revisions
        - firefox/    : Firefox revisions

The cache root follows each OS's convention:
    - Linux:   $XDG_CACHE_HOME or ~/.cache
    - macOS:   ~/Library/Caches
    - Windows: %LOCALAPPDATA%
"""

import os
import sys
from pathlib import Path

from browserfetch.core.exceptions import BrowserFetchError


class DirectoryError(BrowserFetchError):
    """Raised when a default directory cannot be determined."""

    pass


def get_user_cache_dir() -> Path:
    """
    Get the platform-specific user cache directory.

    Returns:
        Path: The user cache directory.

    Raises:
        DirectoryError: If LOCALAPPDATA is not set on Windows.

    Example:
        >>> get_user_cache_dir()
        PosixPath('/home/user/.cache')  # on Linux
    """
    if os.name == "nt":  # Windows
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise DirectoryError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine cache directory."
            )
        return Path(local_app_data)
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    else:
        xdg_cache = os.environ.get("XDG_CACHE_HOME")
        if xdg_cache:
            return Path(xdg_cache)
        return Path.home() / ".cache"


def get_download_root(destination: str) -> Path:
    """
    Get the default download root for a product.

    Args:
        destination: Product sub-directory name (e.g. 'chromium', 'firefox').

    Returns:
        Path: ``<cache>/browserfetch/<destination>``
    """
    return get_user_cache_dir() / "browserfetch" / destination

"""
Centralized exception hierarchy for browserfetch.

This module defines all custom exceptions used across the codebase
so callers can catch a single base class or a precise condition.
"""

from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class BrowserFetchError(Exception):
    """Base exception for all browserfetch errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class UnsupportedPlatform(BrowserFetchError, ValueError):
    """Raised for a platform identifier that is not in the known table."""

    def __init__(self, platform: object):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class UnsupportedProduct(BrowserFetchError, ValueError):
    """Raised for a product name that is not a known browser family."""

    def __init__(self, product: object):
        self.product = product
        super().__init__(f'Unknown product: "{product}"')


class UnsupportedArchitectureCombination(BrowserFetchError):
    """Raised when a product has no builds for the requested architecture."""

    pass


class ConfigError(BrowserFetchError):
    """Raised when a configuration file cannot be parsed."""

    pass


# ============================================================================
# Download Exceptions
# ============================================================================


class DownloadFailed(BrowserFetchError):
    """Raised when the server does not answer a download with HTTP 200."""

    def __init__(
        self, url: str, status_code: Optional[int] = None, reason: str = ""
    ):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            msg = f"Download failed: server returned code {status_code}. URL: {url}"
        else:
            msg = f"Download failed: {reason}. URL: {url}"
        super().__init__(msg)


class RevisionLookupError(BrowserFetchError):
    """Raised when the latest published revision cannot be determined."""

    pass


# ============================================================================
# Archive Exceptions
# ============================================================================


class ArchiveError(BrowserFetchError):
    """Base exception for archive handling errors."""

    pass


class UnsupportedArchiveFormat(ArchiveError):
    """No extraction handler matches the archive name."""

    def __init__(self, archive_path: Union[str, Path]):
        self.archive_path = Path(archive_path)
        super().__init__(f"Unsupported archive format: {archive_path}")


class ExtractionFailed(ArchiveError):
    """Extraction tooling failed or the archive layout was not as expected."""

    pass


class InsecureArchiveError(ArchiveError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class NotInstalled(BrowserFetchError):
    """Raised when an operation needs a revision that is not on disk."""

    def __init__(self, revision: str, folder_path: Union[str, Path]):
        self.revision = revision
        self.folder_path = Path(folder_path)
        super().__init__(
            f"Failed to remove: revision {revision} is not downloaded"
        )

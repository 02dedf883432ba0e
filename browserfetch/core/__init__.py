"""
Core functionality for browserfetch.

This package contains the foundational modules that the browser fetcher
depends on: platform identifiers, HTTP downloads, external processes,
filesystem helpers and archive format detection.
"""

from .exceptions import (
    BrowserFetchError,
    UnsupportedPlatform,
    UnsupportedProduct,
    UnsupportedArchitectureCombination,
    ConfigError,
    DownloadFailed,
    RevisionLookupError,
    ArchiveError,
    UnsupportedArchiveFormat,
    ExtractionFailed,
    InsecureArchiveError,
    NotInstalled,
)

from .platform import (
    Platform,
    Product,
    detect_platform,
    clear_platform_cache,
)

from .process import (
    CommandResult,
    CommandRunner,
    SubprocessRunner,
)

from .sniffer import (
    ArchiveFormat,
    classify,
    normalize_archive_name,
)

__all__ = [
    "BrowserFetchError",
    "UnsupportedPlatform",
    "UnsupportedProduct",
    "UnsupportedArchitectureCombination",
    "ConfigError",
    "DownloadFailed",
    "RevisionLookupError",
    "ArchiveError",
    "UnsupportedArchiveFormat",
    "ExtractionFailed",
    "InsecureArchiveError",
    "NotInstalled",
    "Platform",
    "Product",
    "detect_platform",
    "clear_platform_cache",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "ArchiveFormat",
    "classify",
    "normalize_archive_name",
]

"""
Browser download, extraction and revision management.
"""

from .fetcher import BrowserFetcher, RevisionInfo, create_browser_fetcher
from .installer import install_archive, mounted_disk_image
from .resolver import (
    archive_name,
    download_url,
    executable_path,
    folder_path,
    parse_installed_name,
)
from .revisions import PREFERRED_REVISIONS, default_revision

__all__ = [
    "BrowserFetcher",
    "RevisionInfo",
    "create_browser_fetcher",
    "install_archive",
    "mounted_disk_image",
    "archive_name",
    "download_url",
    "executable_path",
    "folder_path",
    "parse_installed_name",
    "PREFERRED_REVISIONS",
    "default_revision",
]

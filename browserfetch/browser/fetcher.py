"""
Browser download and installation orchestration.

This module ties the resolver, downloader, sniffer and installer together:

1. Resolve the download URL and installation folder for a revision
2. Return early if the revision is already installed
3. Stream the archive into the download root with progress reporting
4. Fix the archive's extension if its content disagrees
5. Extract into a staging folder, check the executable and fix permissions
6. Move the staging folder into place and delete the archive

Note:
    BrowserFetcher is not designed to work concurrently with other instances
    that share the same download root. Nothing is locked.
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from browserfetch.browser import resolver
from browserfetch.browser.installer import install_archive, make_executables
from browserfetch.core.directory import get_download_root
from browserfetch.core.download import ProgressCallback, download_file, head_request
from browserfetch.core.exceptions import (
    ExtractionFailed,
    NotInstalled,
    UnsupportedArchitectureCombination,
)
from browserfetch.core.filesystem import safe_rmtree
from browserfetch.core.platform import Platform, Product, detect_platform
from browserfetch.core.process import CommandRunner, SubprocessRunner
from browserfetch.core.sniffer import normalize_archive_name

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".extract-"


@dataclass(frozen=True)
class RevisionInfo:
    """Where a revision comes from and where it lives on disk."""

    revision: str
    """Revision identifier as requested"""

    product: Product
    """Browser family"""

    platform: Platform
    """Target platform"""

    folder_path: Path
    """Installation folder"""

    executable_path: Path
    """Browser executable inside the installation folder"""

    url: str
    """Download URL"""

    local: bool
    """Whether the installation folder existed when this record was built"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "revision": self.revision,
            "product": self.product.value,
            "platform": self.platform.value,
            "folderPath": str(self.folder_path),
            "executablePath": str(self.executable_path),
            "url": self.url,
            "local": self.local,
        }


class BrowserFetcher:
    """
    Downloads and manages revisions of Chromium and Firefox.

    Revisions are opaque strings: a Chromium snapshot number such as
    ``"1022525"``, or a Firefox Nightly version such as ``"130.0a1"``.

    Example:
        >>> fetcher = BrowserFetcher(product="chrome")
        >>> info = fetcher.download("1022525")
        >>> print(f"Browser at: {info.executable_path}")
    """

    def __init__(
        self,
        platform: Optional[Union[str, Platform]] = None,
        product: Optional[Union[str, Product]] = None,
        path: Optional[Union[str, Path]] = None,
        host: Optional[str] = None,
        runner: Optional[CommandRunner] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize browser fetcher.

        Args:
            platform: Target platform. If None, detected from the host.
            product: 'chrome' (default) or 'firefox', case-insensitive.
            path: Download root. If None, uses the user cache directory.
            host: Download host. If None, uses the product's default host.
            runner: Runner for external tools. If None, uses subprocess.
            session: requests session. If None, creates a new one.
            logger: Logger to report to. If None, uses this module's logger.

        Raises:
            UnsupportedProduct: If product is unknown
            UnsupportedPlatform: If platform is unknown or cannot be detected
        """
        self._product = Product.parse(product)
        config = resolver.PRODUCT_CONFIG[self._product]

        self._download_root = Path(path) if path else get_download_root(config.destination)
        self._download_host = host or config.host
        self._platform = Platform.parse(platform) if platform else detect_platform()
        self._runner = runner or SubprocessRunner()
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger(__name__)

        self._logger.debug(
            f"Initialized {self._product.value} fetcher for {self._platform.value} "
            f"at {self._download_root}"
        )

    def platform(self) -> Platform:
        """Return the target platform."""
        return self._platform

    def product(self) -> Product:
        """Return the browser family."""
        return self._product

    def host(self) -> str:
        """Return the download host being used."""
        return self._download_host

    @property
    def download_root(self) -> Path:
        return self._download_root

    def can_download(self, revision: str) -> bool:
        """
        Check whether a revision is available from the host.

        Issues a HEAD request against the revision's download URL.

        Returns:
            True if the server answered 200
        """
        url = self._url(revision)
        response = head_request(url, session=self._session)
        self._logger.debug(f"HEAD {url} -> {response.status_code}")
        return response.status_code == 200

    def download(
        self, revision: str, progress_callback: Optional[ProgressCallback] = None
    ) -> RevisionInfo:
        """
        Download and install a revision.

        If the installation folder already exists the revision is returned as
        is, without contacting the server or checking the folder's content.

        Args:
            revision: Revision to install
            progress_callback: Optional callback(received, total) invoked
                after every chunk; total is 0 when the size is unknown

        Returns:
            RevisionInfo of the installed revision

        Raises:
            UnsupportedArchitectureCombination: For Chrome on linux-arm64
            DownloadFailed: If the server does not answer with 200
            UnsupportedArchiveFormat: If the archive cannot be dispatched
            ExtractionFailed: If extraction tooling fails or the archive
                does not contain the browser executable
        """
        url = self._url(revision)
        output_path = self._folder_path(revision)

        if output_path.exists():
            self._logger.info(f"Revision {revision} already installed: {output_path}")
            return self.revision_info(revision)

        self._download_root.mkdir(parents=True, exist_ok=True)

        if self._product is Product.CHROME and self._platform is Platform.LINUX_ARM64:
            raise UnsupportedArchitectureCombination(
                "Chrome arm64 downloads not supported on Linux. "
                "Specify an explicit browser executable path or use Firefox."
            )

        archive_path = self._download_root / self._archive_file_name(revision, url)
        staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self._download_root))
        # mkdtemp creates 0700
        staging_dir.chmod(0o755)

        try:
            download_file(
                url,
                archive_path,
                progress_callback,
                session=self._session,
                logger=self._logger,
            )
            archive_path = normalize_archive_name(archive_path, self._runner, self._logger)
            install_archive(archive_path, staging_dir, self._runner, self._logger)

            staged_executable = resolver.executable_path(
                self._product, self._platform, staging_dir, revision
            )
            if not staged_executable.is_file():
                raise ExtractionFailed(
                    f"Executable not found after extraction: "
                    f"{staged_executable.relative_to(staging_dir)}"
                )
            make_executables(
                self._product, self._platform, staged_executable, self._logger
            )
            staging_dir.rename(output_path)
        finally:
            if archive_path.exists():
                archive_path.unlink()
            safe_rmtree(staging_dir, require_prefix=self._download_root)

        info = self.revision_info(revision)
        self._logger.info(f"Installed {self._product.value} {revision} to {output_path}")
        return info

    def local_revisions(self) -> List[str]:
        """
        List revisions installed for the current platform.

        Returns:
            Revisions in directory enumeration order (not sorted)
        """
        if not self._download_root.exists():
            return []

        revisions = []
        for entry in self._download_root.iterdir():
            parsed = resolver.parse_installed_name(entry.name)
            if parsed and parsed.platform is self._platform:
                revisions.append(parsed.revision)
        return revisions

    def remove(self, revision: str) -> None:
        """
        Delete an installed revision.

        Raises:
            NotInstalled: If the revision is not on disk
        """
        folder = self._folder_path(revision)
        if not folder.exists():
            raise NotInstalled(revision, folder)
        self._logger.info(f"Removing {folder}")
        safe_rmtree(folder, require_prefix=self._download_root)

    def revision_info(self, revision: str) -> RevisionInfo:
        """
        Describe a revision.

        ``local`` reflects whether the installation folder exists right now.
        """
        folder = self._folder_path(revision)
        info = RevisionInfo(
            revision=revision,
            product=self._product,
            platform=self._platform,
            folder_path=folder,
            executable_path=resolver.executable_path(
                self._product, self._platform, folder, revision
            ),
            url=self._url(revision),
            local=folder.exists(),
        )
        self._logger.debug(f"Revision info: {info.to_dict()}")
        return info

    def _url(self, revision: str) -> str:
        return resolver.download_url(
            self._product, self._platform, self._download_host, revision
        )

    def _folder_path(self, revision: str) -> Path:
        return resolver.folder_path(self._download_root, self._platform, revision)

    def _archive_file_name(self, revision: str, url: str) -> str:
        """
        Local file name for a download.

        The fixed nightly endpoints redirect to a file whose real name (and
        compression) is only known from the Content-Disposition header.
        """
        file_name = resolver.default_archive_file_name(
            self._product, self._platform, revision, url
        )
        if not resolver.get_entry(self._product, self._platform).fixed_url:
            return file_name

        response = head_request(url, session=self._session)
        actual = resolver.filename_from_content_disposition(
            response.headers.get("content-disposition")
        )
        if actual:
            self._logger.debug(f"Server names the download {actual}")
            return actual
        return file_name


def create_browser_fetcher(**options) -> BrowserFetcher:
    """
    Convenience function to create a fetcher.

    Example:
        >>> from browserfetch.browser.fetcher import create_browser_fetcher
        >>> fetcher = create_browser_fetcher(product="firefox")
        >>> fetcher.local_revisions()
        []
    """
    return BrowserFetcher(**options)

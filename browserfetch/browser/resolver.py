"""
Download URL and installation path resolution.

Every product/platform quirk is data in ``BROWSER_TABLE``: the URL template
(or a fixed URL), and the executable location inside the extracted tree.
Functions here are pure and do no I/O.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union
from urllib.parse import urlparse

from browserfetch.core.platform import Platform, Product

PlatformLike = Union[str, Platform]
ProductLike = Union[str, Product]

# Windows Chromium archives were renamed from chrome-win32 to chrome-win here
CHROME_WIN_RENAME_REVISION = 591479

# Placeholder for the archive name in executable path segments
ARCHIVE = "{archive}"

# Nightly redirect endpoints that always serve the newest build
FIREFOX_NIGHTLY_LINUX_URL = (
    "https://download.mozilla.org/"
    "?product=firefox-nightly-latest-ssl&os=linux64&lang=en-US"
)
FIREFOX_NIGHTLY_LINUX_ARM64_URL = (
    "https://download.mozilla.org/"
    "?product=firefox-nightly-latest-ssl&os=linux64-aarch64&lang=en-US"
)


@dataclass(frozen=True)
class ProductConfig:
    """Per-product defaults."""

    host: str
    destination: str


PRODUCT_CONFIG: Dict[Product, ProductConfig] = {
    Product.CHROME: ProductConfig(
        host="https://storage.googleapis.com",
        destination="chromium",
    ),
    Product.FIREFOX: ProductConfig(
        host="https://archive.mozilla.org/pub/firefox/nightly/latest-mozilla-central",
        destination="firefox",
    ),
}


@dataclass(frozen=True)
class BrowserEntry:
    """
    How to fetch and locate one product on one platform.

    Attributes:
        url_template: Format string filled positionally with
            (host, revision, archive name)
        executable_parts: Path segments of the executable relative to the
            installation folder; ``{archive}`` expands to the archive name
        fixed_url: If set, returned instead of the template, ignoring the
            host and revision
    """

    url_template: str
    executable_parts: Tuple[str, ...]
    fixed_url: Optional[str] = None


_CHROME_MAC_EXE = (ARCHIVE, "Chromium.app", "Contents", "MacOS", "Chromium")
_FIREFOX_MAC_EXE = ("Firefox Nightly.app", "Contents", "MacOS", "firefox")

BROWSER_TABLE: Dict[Tuple[Product, Platform], BrowserEntry] = {
    (Product.CHROME, Platform.LINUX): BrowserEntry(
        "{0}/chromium-browser-snapshots/Linux_x64/{1}/{2}.zip",
        (ARCHIVE, "chrome"),
    ),
    (Product.CHROME, Platform.LINUX_ARM64): BrowserEntry(
        "{0}/chromium-browser-snapshots/Linux_arm64/{1}/{2}.zip",
        (ARCHIVE, "chrome"),
    ),
    (Product.CHROME, Platform.MAC): BrowserEntry(
        "{0}/chromium-browser-snapshots/Mac/{1}/{2}.zip",
        _CHROME_MAC_EXE,
    ),
    (Product.CHROME, Platform.WIN32): BrowserEntry(
        "{0}/chromium-browser-snapshots/Win/{1}/{2}.zip",
        (ARCHIVE, "chrome.exe"),
    ),
    (Product.CHROME, Platform.WIN64): BrowserEntry(
        "{0}/chromium-browser-snapshots/Win_x64/{1}/{2}.zip",
        (ARCHIVE, "chrome.exe"),
    ),
    (Product.FIREFOX, Platform.LINUX): BrowserEntry(
        "{0}/firefox-{1}.en-US.{2}-x86_64.tar.bz2",
        ("firefox", "firefox"),
        fixed_url=FIREFOX_NIGHTLY_LINUX_URL,
    ),
    (Product.FIREFOX, Platform.LINUX_ARM64): BrowserEntry(
        "{0}/firefox-{1}.en-US.{2}-aarch64.tar.bz2",
        ("firefox", "firefox"),
        fixed_url=FIREFOX_NIGHTLY_LINUX_ARM64_URL,
    ),
    (Product.FIREFOX, Platform.MAC): BrowserEntry(
        "{0}/firefox-{1}.en-US.{2}.dmg",
        _FIREFOX_MAC_EXE,
    ),
    (Product.FIREFOX, Platform.WIN32): BrowserEntry(
        "{0}/firefox-{1}.en-US.{2}.zip",
        ("firefox", "firefox.exe"),
    ),
    (Product.FIREFOX, Platform.WIN64): BrowserEntry(
        "{0}/firefox-{1}.en-US.{2}.zip",
        ("firefox", "firefox.exe"),
    ),
}

# Architecture suffix used in Firefox Linux archive names
_FIREFOX_LINUX_ARCH = {
    Platform.LINUX: "x86_64",
    Platform.LINUX_ARM64: "aarch64",
}

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_DISPOSITION_FILENAME = re.compile(
    r"""filename[^;=\n]*=\s*((['"]).*?\2|[^;\n]*)""", re.IGNORECASE
)


@dataclass(frozen=True)
class InstalledName:
    """Platform and revision recovered from an installation folder name."""

    platform: Platform
    revision: str


def get_entry(product: ProductLike, platform: PlatformLike) -> BrowserEntry:
    """
    Look up the table entry for a product/platform pair.

    Raises:
        UnsupportedProduct: If product is unknown
        UnsupportedPlatform: If platform is unknown
    """
    product = Product.parse(product)
    platform = Platform.parse(platform)
    return BROWSER_TABLE[(product, platform)]


def _leading_int(revision: str) -> Optional[int]:
    match = _LEADING_INT.match(revision)
    return int(match.group(0)) if match else None


def archive_name(product: ProductLike, platform: PlatformLike, revision: str) -> str:
    """
    Name of the archive (and of its top-level folder for Chrome).

    Example:
        >>> archive_name("chrome", "win64", "600000")
        'chrome-win'
        >>> archive_name("firefox", "mac", "80.0a1")
        'mac'
    """
    product = Product.parse(product)
    platform = Platform.parse(platform)

    if product is Product.FIREFOX:
        return platform.value

    if platform.is_linux:
        return "chrome-linux"
    if platform is Platform.MAC:
        return "chrome-mac"
    number = _leading_int(revision)
    if number is not None and number > CHROME_WIN_RENAME_REVISION:
        return "chrome-win"
    return "chrome-win32"


def download_url(
    product: ProductLike, platform: PlatformLike, host: str, revision: str
) -> str:
    """
    Build the download URL for a revision.

    Firefox on Linux uses fixed nightly redirect endpoints: the host and
    revision are ignored and the newest nightly is served, so the installed
    build can differ from the revision it is recorded under.

    Example:
        >>> download_url("chrome", "linux", "https://storage.googleapis.com", "1022525")
        'https://storage.googleapis.com/chromium-browser-snapshots/Linux_x64/1022525/chrome-linux.zip'
    """
    entry = get_entry(product, platform)
    if entry.fixed_url:
        return entry.fixed_url
    return entry.url_template.format(
        host, revision, archive_name(product, platform, revision)
    )


def folder_path(download_root: Union[str, Path], platform: PlatformLike, revision: str) -> Path:
    """Installation folder for a revision: ``<root>/<platform>-<revision>``."""
    platform = Platform.parse(platform)
    return Path(download_root) / f"{platform.value}-{revision}"


def executable_path(
    product: ProductLike,
    platform: PlatformLike,
    folder: Union[str, Path],
    revision: str,
) -> Path:
    """
    Path of the browser executable inside an installation folder.

    Raises:
        UnsupportedPlatform: If the pair is not in the table
    """
    entry = get_entry(product, platform)
    name = archive_name(product, platform, revision)
    parts = [part.replace(ARCHIVE, name) for part in entry.executable_parts]
    return Path(folder).joinpath(*parts)


def parse_installed_name(name: str) -> Optional[InstalledName]:
    """
    Recover platform and revision from an installation folder name.

    ``linux-arm64`` itself contains a hyphen, so a three-segment name starting
    with it is checked before the plain ``<platform>-<revision>`` split.

    Returns:
        InstalledName, or None if the name does not belong to a known platform

    Example:
        >>> parse_installed_name("linux-arm64-1022525")
        InstalledName(platform=<Platform.LINUX_ARM64: 'linux-arm64'>, revision='1022525')
        >>> parse_installed_name("chrome-linux.zip") is None
        True
    """
    splits = name.split("-")

    if len(splits) == 3 and f"{splits[0]}-{splits[1]}" == Platform.LINUX_ARM64.value:
        platform_id, revision = Platform.LINUX_ARM64.value, splits[2]
    elif len(splits) == 2:
        platform_id, revision = splits
    else:
        return None

    if not revision:
        return None
    try:
        return InstalledName(Platform(platform_id), revision)
    except ValueError:
        return None


def default_archive_file_name(
    product: ProductLike, platform: PlatformLike, revision: str, url: str
) -> str:
    """
    File name to store a download under before the server says otherwise.

    Templated URLs end in the archive file name. The fixed Firefox Linux
    endpoints do not, so a conventional release name is used instead.
    """
    entry = get_entry(product, platform)
    if entry.fixed_url:
        arch = _FIREFOX_LINUX_ARCH[Platform.parse(platform)]
        return f"firefox-{revision}.en-US.linux-{arch}.tar.bz2"
    return Path(urlparse(url).path).name


def filename_from_content_disposition(header: Optional[str]) -> Optional[str]:
    """
    Extract the file name from a Content-Disposition header value.

    Example:
        >>> filename_from_content_disposition('attachment; filename="firefox-130.0a1.tar.xz"')
        'firefox-130.0a1.tar.xz'
    """
    if not header:
        return None
    match = _DISPOSITION_FILENAME.search(header)
    if not match:
        return None
    filename = match.group(1).strip().strip("'\"")
    # Never let a header steer the download outside its directory
    filename = Path(filename.replace("\\", "/")).name
    return filename or None

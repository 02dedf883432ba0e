"""
Product and platform identifiers for browserfetch.

This module defines the browser families and target platforms known to the
fetcher, and detects the platform matching the running host so callers can
omit it.

Usage:
    from browserfetch.core.platform import Platform, Product, detect_platform

    platform = detect_platform()
    print(f"Host platform: {platform.value}")

    product = Product.parse("Firefox")
    assert product is Product.FIREFOX
"""

import functools
import os
import platform as _platform
from enum import Enum
from typing import Union

from browserfetch.core.exceptions import UnsupportedPlatform, UnsupportedProduct


class Product(Enum):
    """Supported browser families."""

    CHROME = "chrome"
    FIREFOX = "firefox"

    @classmethod
    def parse(cls, value: Union[str, "Product", None]) -> "Product":
        """
        Convert a user-supplied product name into a Product.

        Names are matched case-insensitively. ``None`` or an empty string
        selects Chrome.

        Raises:
            UnsupportedProduct: If the name is not a known browser family
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.CHROME
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedProduct(value) from None

    def __str__(self) -> str:
        return self.value


class Platform(Enum):
    """Target OS and architecture identifiers used for URLs and folder names."""

    LINUX = "linux"
    LINUX_ARM64 = "linux-arm64"
    MAC = "mac"
    WIN32 = "win32"
    WIN64 = "win64"

    @classmethod
    def parse(cls, value: Union[str, "Platform"]) -> "Platform":
        """
        Convert a platform identifier into a Platform.

        Raises:
            UnsupportedPlatform: If the identifier is not known
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedPlatform(value) from None

    @property
    def is_windows(self) -> bool:
        return self in (Platform.WIN32, Platform.WIN64)

    @property
    def is_linux(self) -> bool:
        return self in (Platform.LINUX, Platform.LINUX_ARM64)

    def __str__(self) -> str:
        return self.value


# Hosts that are not Windows get executable bits set after extraction
IS_WINDOWS_HOST = os.name == "nt"


@functools.lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """
    Detect the platform identifier for the running host.

    This function is cached - it only runs detection once per process.

    Returns:
        Platform matching the host OS and architecture

    Raises:
        UnsupportedPlatform: If the OS has no browser builds

    Example:
        >>> detect_platform()
        <Platform.LINUX: 'linux'>
    """
    system = _platform.system().lower()
    arch = detect_architecture()

    if system == "darwin":
        return Platform.MAC
    elif system == "linux":
        return Platform.LINUX_ARM64 if arch == "arm64" else Platform.LINUX
    elif system == "windows":
        return Platform.WIN64 if arch == "x64" else Platform.WIN32
    else:
        raise UnsupportedPlatform(system)


def detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = _platform.machine().lower()

    # Normalize architecture names
    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # Return original for unknown architectures
        return machine


def clear_platform_cache() -> None:
    """Clear the cached platform detection (useful for testing)."""
    detect_platform.cache_clear()

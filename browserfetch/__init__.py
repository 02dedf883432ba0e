"""
browserfetch - download and manage Chromium and Firefox builds.

Usage:
    from browserfetch import BrowserFetcher

    fetcher = BrowserFetcher(product="chrome")
    info = fetcher.download("1022525")
    print(info.executable_path)
"""

from browserfetch.browser.fetcher import (
    BrowserFetcher,
    RevisionInfo,
    create_browser_fetcher,
)
from browserfetch.core.platform import Platform, Product

__version__ = "0.1.0"

__all__ = [
    "BrowserFetcher",
    "RevisionInfo",
    "create_browser_fetcher",
    "Platform",
    "Product",
    "__version__",
]

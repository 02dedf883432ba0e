"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from typing import Callable, Optional

from browserfetch.browser.fetcher import BrowserFetcher
from browserfetch.config import FetcherConfig, resolve_config
from browserfetch.core.download import format_progress

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


def config_from_args(args) -> FetcherConfig:
    """
    Resolve configuration from parsed global options.

    Args:
        args: Parsed arguments with product/platform/path/host/config fields

    Returns:
        FetcherConfig
    """
    return resolve_config(
        product=getattr(args, "product", None),
        platform=getattr(args, "platform", None),
        path=getattr(args, "path", None),
        host=getattr(args, "host", None),
        revision=getattr(args, "revision", None),
        config_file=getattr(args, "config", None),
    )


def create_fetcher(config: FetcherConfig) -> BrowserFetcher:
    """Create a BrowserFetcher from resolved configuration."""
    return BrowserFetcher(**config.fetcher_options())


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def make_progress_logger(step_percent: float = 10.0) -> Callable[[int, int], None]:
    """
    Build a download progress callback that logs at coarse intervals.

    With a known total, a line is logged each time another ``step_percent``
    of the download completes. With an unknown total (0), a line is logged
    for every additional 10 MB.
    """
    state = {"next_percent": 0.0, "next_bytes": 0}

    def on_progress(received: int, total: int) -> None:
        if total > 0:
            percent = received / total * 100
            if percent >= state["next_percent"] or received >= total:
                logger.info(f"Downloading... {format_progress(received, total)}")
                state["next_percent"] = (percent // step_percent + 1) * step_percent
        elif received >= state["next_bytes"]:
            logger.info(f"Downloading... {format_progress(received, total)}")
            state["next_bytes"] = received + 10 * 1024 * 1024

    return on_progress

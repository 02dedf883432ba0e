"""
Network download helpers with progress reporting.

This module provides the HTTP side of browserfetch:
- HEAD probes to check whether a URL is downloadable
- Streaming downloads to disk with per-chunk progress callbacks
- Content-Disposition inspection for servers that rename files

No timeout is applied unless the caller passes one.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from browserfetch.core.exceptions import DownloadFailed

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

CHUNK_SIZE = 64 * 1024


def head_request(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> requests.Response:
    """
    Issue a HEAD request, following redirects.

    Args:
        url: URL to probe
        session: Optional requests session to reuse connections
        timeout: Optional request timeout in seconds

    Returns:
        The final response

    Raises:
        DownloadFailed: If the request could not be sent
    """
    http = session or requests
    try:
        return http.head(url, allow_redirects=True, timeout=timeout)
    except RequestException as e:
        raise DownloadFailed(url, reason=str(e)) from e


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[ProgressCallback] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    logger: logging.Logger = logger,
) -> Path:
    """
    Stream a URL to a local file.

    The progress callback is invoked after every chunk with the number of
    bytes received so far and the total size announced by the server. A total
    of 0 means the server sent no content-length.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback(received, total)
        session: Optional requests session
        timeout: Optional request timeout in seconds
        logger: Logger for progress messages

    Returns:
        Path to downloaded file

    Raises:
        DownloadFailed: If the server does not answer with 200 or the
            transfer breaks

    Example:
        >>> def on_progress(received, total):
        ...     print(format_progress(received, total))
        >>> download_file("https://example.com/chrome-linux.zip",
        ...               Path("chrome-linux.zip"), on_progress)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    http = session or requests

    logger.info(f"Downloading binary from {url}")

    try:
        with http.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            if response.status_code != 200:
                # Drain the body so the connection can be released
                _ = response.content
                raise DownloadFailed(url, status_code=response.status_code)

            total_bytes = _content_length(response)
            received = 0

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    received += len(chunk)
                    if progress_callback:
                        progress_callback(received, total_bytes)
    except RequestException as e:
        raise DownloadFailed(url, reason=str(e)) from e

    logger.debug(f"Download complete: {destination} ({received} bytes)")
    return destination


def _content_length(response: requests.Response) -> int:
    """Return the announced body size, or 0 when unknown."""
    value = response.headers.get("content-length")
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def format_progress(received: int, total: int) -> str:
    """
    Format progress for display.

    Args:
        received: Bytes received so far
        total: Total bytes, 0 if unknown

    Returns:
        Formatted progress string

    Example:
        >>> format_progress(52428800, 104857600)
        '50.0/100.0 MB (50.00%)'
        >>> format_progress(10485760, 0)
        '10.0 MB'
    """
    mb_received = received / 1024 / 1024

    if total > 0:
        mb_total = total / 1024 / 1024
        percentage = received / total * 100
        return f"{mb_received:.1f}/{mb_total:.1f} MB ({percentage:.2f}%)"
    else:
        # Unknown total size
        return f"{mb_received:.1f} MB"

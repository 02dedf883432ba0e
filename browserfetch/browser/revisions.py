"""
Default revisions for each product.

Chrome is pinned to a known-good Chromium snapshot. Firefox has no pinned
build: the latest nightly version is looked up from Mozilla's product-details
service.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from browserfetch.core.exceptions import RevisionLookupError
from browserfetch.core.platform import Product

logger = logging.getLogger(__name__)

# Firefox has no pinned revision; see latest_firefox_nightly
PREFERRED_REVISIONS = {
    Product.CHROME: "1022525",
}

FIREFOX_VERSIONS_URL = "https://product-details.mozilla.org/1.0/firefox_versions.json"


def latest_firefox_nightly(
    session: Optional[requests.Session] = None, timeout: Optional[float] = None
) -> str:
    """
    Fetch the current Firefox Nightly version string.

    Raises:
        RevisionLookupError: If the service is unreachable or the answer has
            no FIREFOX_NIGHTLY field
    """
    http = session or requests
    logger.debug(f"Looking up Firefox Nightly version from {FIREFOX_VERSIONS_URL}")
    try:
        response = http.get(FIREFOX_VERSIONS_URL, timeout=timeout)
        response.raise_for_status()
        versions = response.json()
    except (RequestException, ValueError) as e:
        raise RevisionLookupError(f"Failed to fetch Firefox versions: {e}") from e

    version = versions.get("FIREFOX_NIGHTLY") if isinstance(versions, dict) else None
    if not version:
        raise RevisionLookupError("Firefox version not found")
    return version


def default_revision(
    product: Product,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    """Revision to install when the caller does not name one."""
    if product is Product.FIREFOX:
        return latest_firefox_nightly(session, timeout)
    return PREFERRED_REVISIONS[product]

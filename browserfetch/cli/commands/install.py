"""
Install command implementation.

Downloads a browser revision unless it is already installed.
"""

import logging

from browserfetch.browser.revisions import default_revision
from browserfetch.cli.utils import config_from_args, create_fetcher, make_progress_logger

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments with:
            - revision: Revision to install (optional)

    Returns:
        Exit code (0 for success)
    """
    config = config_from_args(args)
    fetcher = create_fetcher(config)
    logger.info(f"Using product: {fetcher.product().value}")

    revision = config.revision or default_revision(fetcher.product())

    revision_info = fetcher.revision_info(revision)
    if revision_info.local:
        print(f"Already downloaded at {revision_info.executable_path}")
        return 0

    logger.info(
        f"Downloading {revision_info.product.value} {revision_info.revision} "
        f"from {revision_info.url}"
    )
    new_info = fetcher.download(revision_info.revision, make_progress_logger())
    print(
        f"Downloaded {new_info.product.value} {new_info.revision} "
        f"to {new_info.executable_path} from {new_info.url}"
    )
    return 0

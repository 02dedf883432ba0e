"""
List command implementation.

Lists revisions installed for the selected product and platform.
"""

import logging

from browserfetch.cli.utils import config_from_args, create_fetcher

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    fetcher = create_fetcher(config_from_args(args))
    revisions = fetcher.local_revisions()

    if not revisions:
        logger.info(
            f"No {fetcher.product().value} revisions installed for "
            f"{fetcher.platform().value} in {fetcher.download_root}"
        )
        return 0

    for revision in revisions:
        print(revision)
    return 0

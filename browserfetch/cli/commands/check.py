"""
Check command implementation.

Reports whether a revision is available from the download host.
"""

import logging

from browserfetch.cli.utils import config_from_args, create_fetcher

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments with:
            - revision: Revision to check

    Returns:
        Exit code (0 if downloadable, 1 otherwise)
    """
    fetcher = create_fetcher(config_from_args(args))
    if fetcher.can_download(args.revision):
        print(f"{fetcher.product().value} {args.revision} is available")
        return 0

    print(f"{fetcher.product().value} {args.revision} is not available")
    return 1

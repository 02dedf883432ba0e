"""
Remove command implementation.
"""

import logging

from browserfetch.cli.utils import config_from_args, create_fetcher, print_error
from browserfetch.core.exceptions import NotInstalled

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments with:
            - revision: Revision to remove

    Returns:
        Exit code (0 for success, 1 if the revision is not installed)
    """
    fetcher = create_fetcher(config_from_args(args))
    try:
        fetcher.remove(args.revision)
    except NotInstalled as e:
        installed = fetcher.local_revisions()
        print_error(
            str(e),
            f"Installed revisions: {', '.join(installed)}" if installed else None,
        )
        return 1

    print(f"Removed {fetcher.product().value} {args.revision}")
    return 0

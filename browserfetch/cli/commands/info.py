"""
Info command implementation.

Shows where a revision is downloaded from and where it is installed.
"""

import json
import logging

from browserfetch.cli.utils import config_from_args, create_fetcher

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments with:
            - revision: Revision to describe
            - json: Print JSON instead of text

    Returns:
        Exit code (0 for success)
    """
    fetcher = create_fetcher(config_from_args(args))
    info = fetcher.revision_info(args.revision)

    if args.json:
        print(json.dumps(info.to_dict(), indent=2))
        return 0

    print(f"Product:    {info.product.value}")
    print(f"Platform:   {info.platform.value}")
    print(f"Revision:   {info.revision}")
    print(f"URL:        {info.url}")
    print(f"Folder:     {info.folder_path}")
    print(f"Executable: {info.executable_path}")
    print(f"Installed:  {'yes' if info.local else 'no'}")
    return 0

"""
browserfetch CLI argument parser.

This module implements the command-line interface for browserfetch using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from browserfetch.core.exceptions import BrowserFetchError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("browserfetch")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

PRODUCT_CHOICES = ["chrome", "firefox"]
PLATFORM_CHOICES = ["linux", "linux-arm64", "mac", "win32", "win64"]


class CLI:
    """browserfetch command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="browserfetch",
            description="browserfetch - download and manage Chromium and Firefox builds",
            epilog='Use "browserfetch COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"browserfetch {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./browserfetch.yaml)",
        )
        parser.add_argument(
            "--product",
            type=str.lower,
            choices=PRODUCT_CHOICES,
            metavar="NAME",
            help="Browser to manage (chrome|firefox) [default: chrome]",
        )
        parser.add_argument(
            "--platform",
            choices=PLATFORM_CHOICES,
            metavar="PLATFORM",
            help="Target platform (linux|linux-arm64|mac|win32|win64) [default: host]",
        )
        parser.add_argument(
            "--path",
            type=Path,
            metavar="DIR",
            help="Download directory (default: user cache directory)",
        )
        parser.add_argument(
            "--host",
            metavar="URL",
            help="Download host (default: product's official host)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_list_command(subparsers)
        self._add_remove_command(subparsers)
        self._add_info_command(subparsers)
        self._add_check_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download and install a browser revision",
            description=(
                "Download and install a browser revision. Without --revision, "
                "Chrome uses the pinned revision and Firefox the latest nightly."
            ),
        )
        parser.add_argument(
            "--revision",
            metavar="REV",
            help="Revision to install (e.g., 1022525 for Chrome, 130.0a1 for Firefox)",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List installed revisions",
            description="List revisions installed for the selected product and platform",
        )

    def _add_remove_command(self, subparsers):
        """Add 'remove' subcommand."""
        parser = subparsers.add_parser(
            "remove",
            help="Remove an installed revision",
            description="Delete an installed revision from the download directory",
        )
        parser.add_argument("revision", metavar="REV", help="Revision to remove")

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show revision information",
            description="Show download URL and installation paths for a revision",
        )
        parser.add_argument("revision", metavar="REV", help="Revision to describe")
        parser.add_argument(
            "--json", action="store_true", help="Print information as JSON"
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        parser = subparsers.add_parser(
            "check",
            help="Check whether a revision can be downloaded",
            description="Send a HEAD request for a revision's download URL",
        )
        parser.add_argument("revision", metavar="REV", help="Revision to check")

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except BrowserFetchError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "install": "browserfetch.cli.commands.install",
            "list": "browserfetch.cli.commands.list_installed",
            "remove": "browserfetch.cli.commands.remove",
            "info": "browserfetch.cli.commands.info",
            "check": "browserfetch.cli.commands.check",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

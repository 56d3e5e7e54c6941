"""
swiftkit CLI argument parser.

This module implements the command-line interface for swiftkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from typing import List, Optional

from swiftkit.core.exceptions import PlatformSelectionCancelled, SwiftkitError
from swiftkit.platform.definitions import PLATFORM_HINTS

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("swiftkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """swiftkit command-line interface."""

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
            prog="swiftkit",
            description="swiftkit - Swift toolchain manager for Linux",
            epilog='Use "swiftkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"swiftkit {__version__}"
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

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_use_command(subparsers)
        self._add_uninstall_command(subparsers)
        self._add_list_command(subparsers)
        self._add_platform_command(subparsers)

        return parser

    @staticmethod
    def _add_platform_option(parser):
        parser.add_argument(
            "--platform",
            choices=sorted(PLATFORM_HINTS),
            metavar="PLATFORM",
            help=(
                "Platform to download toolchains for instead of detecting it "
                f"({'|'.join(sorted(PLATFORM_HINTS))})"
            ),
        )

    @staticmethod
    def _add_assume_yes_option(parser):
        parser.add_argument(
            "--assume-yes",
            "-y",
            action="store_true",
            help="Never prompt: confirm overwrites and fail instead of asking "
            "for the platform",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a toolchain",
            description="Download, verify and install a Swift toolchain",
        )
        parser.add_argument(
            "version",
            metavar="VERSION",
            help="Toolchain to install (e.g., 5.10.1, main-snapshot-2024-06-01)",
        )
        parser.add_argument(
            "--use",
            action="store_true",
            help="Make the toolchain the in-use toolchain after installing",
        )
        parser.add_argument(
            "--no-verify",
            action="store_true",
            help="Skip gpg signature verification",
        )
        self._add_platform_option(parser)
        self._add_assume_yes_option(parser)

    def _add_use_command(self, subparsers):
        """Add 'use' subcommand."""
        parser = subparsers.add_parser(
            "use",
            help="Switch the in-use toolchain",
            description="Link an installed toolchain's executables into the bin directory",
        )
        parser.add_argument(
            "version", metavar="VERSION", help="Installed toolchain to use"
        )
        self._add_assume_yes_option(parser)

    def _add_uninstall_command(self, subparsers):
        """Add 'uninstall' subcommand."""
        parser = subparsers.add_parser(
            "uninstall",
            help="Remove an installed toolchain",
            description="Remove an installed toolchain",
        )
        parser.add_argument(
            "version", metavar="VERSION", help="Installed toolchain to remove"
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List installed toolchains",
            description="List installed toolchains and mark the one in use",
        )

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        parser = subparsers.add_parser(
            "platform",
            help="Detect the platform",
            description="Detect or select the platform toolchains are downloaded for",
        )
        self._add_platform_option(parser)
        self._add_assume_yes_option(parser)

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

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except (KeyboardInterrupt, PlatformSelectionCancelled) as e:
            logger.info(str(e) or "Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (SwiftkitError, OSError) as e:
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
        command_map = {
            "install": "swiftkit.cli.commands.install",
            "use": "swiftkit.cli.commands.use",
            "uninstall": "swiftkit.cli.commands.uninstall",
            "list": "swiftkit.cli.commands.list",
            "platform": "swiftkit.cli.commands.platform",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

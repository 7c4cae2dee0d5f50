#!/usr/bin/env python3
"""Command-line interface for ftpdriver.

This module drives a ``MainDriver`` outside of a protocol engine, which is
handy to inspect what sessions will see:
- Argument parsing and validation
- Logging setup
- Subcommands: settings, ls, cat, stat, tls

Example:
    >>> from ftpdriver.cli import parse_arguments
    >>> args = parse_arguments(["--base-dir", "/srv/root", "ls", "/"])
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ftpdriver.core.constants import FTPDRIVER_VERSION, Defaults
from ftpdriver.infrastructure.logger import Logger

DESCRIPTION = "ftpdriver - Hybrid filesystem driver for a file-transfer server"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If argument validation fails
    """
    parser = argparse.ArgumentParser(
        prog="ftpdriver",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the settings the server would start with
  ftpdriver --settings sample/conf/settings.yaml settings

  # List the root of a served directory (includes /virtual)
  ftpdriver --base-dir /srv/root ls /

  # Read a virtual file
  ftpdriver --base-dir /srv/root cat /virtual/localpath.txt
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {FTPDRIVER_VERSION}",
    )

    driver_group = parser.add_argument_group("driver options")

    driver_group.add_argument(
        "-s",
        "--settings",
        metavar="FILE",
        type=str,
        default=Defaults.SETTINGS_FILE,
        help=f"Settings file path (YAML format, default: {Defaults.SETTINGS_FILE})",
    )

    driver_group.add_argument(
        "-b",
        "--base-dir",
        metavar="DIR",
        type=str,
        help="Directory to serve (default: a new temporary directory)",
    )

    driver_group.add_argument(
        "--certfile",
        metavar="FILE",
        type=str,
        default=Defaults.CERT_FILE,
        help="TLS certificate path",
    )

    driver_group.add_argument(
        "--keyfile",
        metavar="FILE",
        type=str,
        default=Defaults.KEY_FILE,
        help="TLS private key path",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write logs to this file (rotated)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser("settings", help="Print resolved settings as YAML")

    ls_parser = subparsers.add_parser("ls", help="List a directory")
    ls_parser.add_argument("path", nargs="?", default="/", help="Logical directory path")

    cat_parser = subparsers.add_parser("cat", help="Write a file to stdout")
    cat_parser.add_argument("path", help="Logical file path")

    stat_parser = subparsers.add_parser("stat", help="Describe a file or directory")
    stat_parser.add_argument("path", help="Logical path")

    subparsers.add_parser("tls", help="Load the TLS certificate")

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if args.base_dir:
        base_path = Path(args.base_dir)

        if not base_path.exists():
            raise CLIError(f"Base directory does not exist: {args.base_dir}")

        if not base_path.is_dir():
            raise CLIError(f"Base directory is not a directory: {args.base_dir}")

    path = getattr(args, "path", None)
    if path is not None and not path.startswith("/"):
        raise CLIError(f"Logical paths must be absolute: {path}")


def setup_logging(args: argparse.Namespace) -> Logger:
    """
    Setup logging based on arguments.

    Returns:
        Configured logger instance
    """
    logger = Logger("ftpdriver", level="DEBUG" if args.debug else "WARNING")

    if args.log_file:
        logger.add_handler(logger.create_file_handler(args.log_file))

    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        args = parse_arguments(argv)

        logger = setup_logging(args)

        from ftpdriver.main import run_driver

        return run_driver(args, logger)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Command runner for ftpdriver.

This module handles:
- Driver construction (explicit base directory or sample driver)
- One session context per invocation
- Dispatch of CLI subcommands to driver callbacks
- Mapping driver errors to exit codes

Example:
    >>> from ftpdriver.main import run_driver
    >>> run_driver(args, logger)
"""

import argparse
import os
import shutil
import stat
import sys
import time
from typing import Callable, Dict, Optional, TextIO

import yaml

from ftpdriver.driver.context import SessionContext
from ftpdriver.driver.operations import AuthError, DriverError, MainDriver, new_sample_driver
from ftpdriver.infrastructure.logger import Logger
from ftpdriver.infrastructure.settings import ConfigLoadError
from ftpdriver.infrastructure.tls_cache import CertificateLoadError
from ftpdriver.virtual.base import FileInfo

CHUNK_SIZE = 64 * 1024


def format_entry(entry: FileInfo) -> str:
    """Render one descriptor as an ``ls -l`` style line."""
    mtime = time.strftime("%Y-%m-%d %H:%M", time.localtime(entry.mtime))
    return f"{stat.filemode(entry.mode)} {entry.size:>10} {mtime} {entry.name}"


class DriverMain:
    """
    Runs a single CLI command against a driver.

    Owns the driver for the duration of the command and plays the role of
    the protocol engine: one session, welcomed and authenticated before the
    command runs and released afterwards.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        logger: Logger,
        stdout: Optional[TextIO] = None,
    ):
        """
        Initialize runner.

        Args:
            args: Parsed command-line arguments
            logger: Logger instance
            stdout: Output stream (defaults to sys.stdout)
        """
        self.args = args
        self.logger = logger
        self.stdout = stdout if stdout is not None else sys.stdout
        self.driver: Optional[MainDriver] = None
        self._sample_dir: Optional[str] = None
        self.session = SessionContext()

        self._commands: Dict[str, Callable[[], None]] = {
            "settings": self.cmd_settings,
            "ls": self.cmd_ls,
            "cat": self.cmd_cat,
            "stat": self.cmd_stat,
            "tls": self.cmd_tls,
        }

    def initialize_driver(self) -> MainDriver:
        """
        Create the driver.

        Raises:
            DriverError: If a sample driver cannot be created
        """
        if self.args.base_dir:
            self.driver = MainDriver(
                logger=self.logger,
                settings_file=self.args.settings,
                base_dir=self.args.base_dir,
                certfile=self.args.certfile,
                keyfile=self.args.keyfile,
            )
        else:
            self.driver = new_sample_driver(
                self.logger,
                settings_file=self.args.settings,
                certfile=self.args.certfile,
                keyfile=self.args.keyfile,
            )
            self._sample_dir = self.driver.base_dir

        self.logger.debug("Driver ready", base_dir=self.driver.base_dir)
        return self.driver

    def open_session(self) -> None:
        self.logger.debug(self.driver.welcome_user(self.session))
        self.driver.auth_user(self.session, "anonymous", "anonymous")
        self.session.debug = self.args.debug

    # =========================================================================
    # Commands
    # =========================================================================

    def cmd_settings(self) -> None:
        settings = self.driver.get_settings()
        yaml.safe_dump(settings.to_dict(), self.stdout, default_flow_style=False, sort_keys=True)

    def cmd_ls(self) -> None:
        self.driver.change_directory(self.session, self.args.path)
        self.session.path = self.args.path
        for entry in self.driver.list_files(self.session):
            print(format_entry(entry), file=self.stdout)

    def cmd_cat(self) -> None:
        out = getattr(self.stdout, "buffer", None)
        with self.driver.open_file(self.session, self.args.path, os.O_RDONLY) as stream:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                if out is not None:
                    out.write(chunk)
                else:
                    self.stdout.write(chunk.decode("utf-8", errors="replace"))
        self.stdout.flush()

    def cmd_stat(self) -> None:
        print(format_entry(self.driver.get_file_info(self.session, self.args.path)), file=self.stdout)

    def cmd_tls(self) -> None:
        self.driver.get_tls_config()
        protocols = ",".join(self.driver.certificates.alpn_protocols)
        print(f"certificate loaded, alpn={protocols}", file=self.stdout)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def cleanup(self) -> None:
        """End the session and remove a temporary base directory we created."""
        if self.driver:
            self.driver.user_left(self.session)
        if self._sample_dir:
            shutil.rmtree(self._sample_dir, ignore_errors=True)
            self._sample_dir = None

    def run(self) -> int:
        """
        Run the requested command.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            with self.logger.add_context(command=self.args.command):
                self.initialize_driver()
                self.open_session()
                self._commands[self.args.command]()
            return 0

        except (AuthError, ConfigLoadError, CertificateLoadError, DriverError) as e:
            self.logger.error(e.message, error_code=e.error_code.name)
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        except OSError as e:
            self.logger.error("Filesystem operation failed", err=e)
            print(f"Error: {e}", file=sys.stderr)
            return 1

        except KeyboardInterrupt:
            self.logger.info("Interrupted by user")
            return 130

        finally:
            self.cleanup()


def run_driver(args: argparse.Namespace, logger: Logger) -> int:
    """
    Main entry point for running a command.

    Args:
        args: Parsed command-line arguments
        logger: Logger instance

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    return DriverMain(args, logger).run()


def main():
    """Entry point when run as standalone script."""
    from ftpdriver.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

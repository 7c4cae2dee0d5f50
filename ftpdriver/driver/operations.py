"""
Protocol callbacks for ftpdriver.

``MainDriver`` implements every callback the file-transfer protocol engine
invokes:
- Session lifecycle (welcome_user, auth_user, user_left)
- Directory operations (change_directory, make_directory, list_files)
- File operations (open_file, get_file_info, can_allocate, chmod_file,
  delete_file, rename_file)
- Server setup (get_tls_config, get_settings)

Each path is routed through ``PathResolver``. Virtual paths are answered
from memory and never fail; real paths go straight to the filesystem and
any ``OSError`` reaches the engine unchanged.
"""

import contextlib
import os
import ssl
import tempfile
from typing import List, Optional

import jinja2

from ftpdriver.core.constants import Defaults, ErrorCode, FileModes, VirtualNames
from ftpdriver.driver.context import ClientContext
from ftpdriver.infrastructure.logger import Logger, LogLevel
from ftpdriver.infrastructure.settings import Settings, SettingsResolver
from ftpdriver.infrastructure.tls_cache import CertificateCache
from ftpdriver.virtual.base import FileInfo, FileStream
from ftpdriver.virtual.catalog import VirtualEntryCatalog
from ftpdriver.virtual.resolver import PathKind, PathResolver
from ftpdriver.virtual.stream import VirtualFile


class AuthError(Exception):
    """Credentials were rejected."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.PERMISSION_DENIED):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class DriverError(Exception):
    """Driver could not be set up."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def _stream_mode(flags: int) -> str:
    """Binary file mode matching low-level open flags."""
    access = flags & (os.O_RDONLY | os.O_WRONLY | os.O_RDWR)
    append = bool(flags & os.O_APPEND)

    if access == os.O_WRONLY:
        return "ab" if append else "wb"
    if access == os.O_RDWR:
        return "a+b" if append else "r+b"
    return "rb"


class MainDriver:
    """
    Hybrid filesystem driver shared by every session of the server.

    Components:
    - PathResolver: classifies logical paths
    - VirtualEntryCatalog: builds directory listings
    - CertificateCache: loads the TLS configuration once
    - SettingsResolver: reads settings and resolves the public host

    The instance holds no per-session state; after construction only the
    certificate cache changes, on its first successful load.
    """

    def __init__(
        self,
        logger: Logger,
        settings_file: str,
        base_dir: str,
        certfile: str = Defaults.CERT_FILE,
        keyfile: str = Defaults.KEY_FILE,
        welcome_template: str = Defaults.WELCOME_TEMPLATE,
    ):
        """
        Initialize driver.

        Args:
            logger: Logger shared with other components
            settings_file: Path to the YAML settings document
            base_dir: Directory real paths are served from
            certfile: Path to the PEM certificate
            keyfile: Path to the PEM private key
            welcome_template: Jinja2 template of the greeting (``base_dir`` in scope)
        """
        self.logger = logger
        self.settings_file = settings_file
        self.base_dir = base_dir

        self.resolver = PathResolver(base_dir)
        self.catalog = VirtualEntryCatalog(self.resolver)
        self.certificates = CertificateCache(logger, certfile=certfile, keyfile=keyfile)
        self.settings = SettingsResolver(settings_file, logger)

        self._jinja_env = jinja2.Environment(autoescape=False)
        self._welcome = self._jinja_env.from_string(welcome_template)

        self.logger.debug("Driver initialized", base_dir=base_dir)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def welcome_user(self, cc: ClientContext) -> str:
        """Return the very first message sent to a client."""
        cc.debug = True
        self.logger.debug("Session entered", path=cc.path)
        return self._welcome.render(base_dir=self.base_dir)

    def auth_user(self, cc: ClientContext, user: str, password: str) -> "MainDriver":
        """
        Authenticate a user and select the handling driver.

        Returns:
            This driver, shared by all sessions

        Raises:
            AuthError: If the user name or password is the reserved rejected value
        """
        if Defaults.REJECTED_CREDENTIAL in (user, password):
            self.logger.info("Authentication rejected", user=user)
            raise AuthError("bad username or password")

        return self

    def user_left(self, cc: ClientContext) -> None:
        """Called when a client disconnects, authenticated or not."""
        self.logger.debug("Session left", path=cc.path)

    # =========================================================================
    # Server setup
    # =========================================================================

    def get_tls_config(self) -> ssl.SSLContext:
        """
        Raises:
            CertificateLoadError: If the certificate cannot be loaded
        """
        return self.certificates.get_tls_config()

    def get_settings(self) -> Settings:
        """
        Raises:
            ConfigLoadError: If the settings document cannot be loaded
        """
        return self.settings.get_settings()

    # =========================================================================
    # Directory operations
    # =========================================================================

    def change_directory(self, cc: ClientContext, directory: str) -> None:
        """
        Check that ``directory`` can become the session's current path.

        ``/debug`` flips the session debug flag instead of changing anything.

        Raises:
            OSError: If the real directory cannot be stat'ed
        """
        if directory == VirtualNames.DEBUG_TOGGLE:
            cc.debug = not cc.debug
            return
        if self.resolver.classify(directory) is PathKind.VIRTUAL_ROOT:
            return

        os.stat(self.resolver.physical_path(directory))

    def make_directory(self, cc: ClientContext, directory: str) -> None:
        if self.resolver.is_virtual(directory):
            return

        os.mkdir(self.resolver.physical_path(directory), FileModes.NEW_DIR)

    def list_files(self, cc: ClientContext) -> List[FileInfo]:
        """
        List the session's current directory.

        Raises:
            OSError: If a real directory cannot be listed
        """
        return self.catalog.list(cc.path)

    # =========================================================================
    # File operations
    # =========================================================================

    def open_file(self, cc: ClientContext, path: str, flags: int) -> FileStream:
        """
        Open a file for reading, writing or appending.

        Writing without ``O_APPEND`` replaces any existing file.

        Args:
            cc: Session context
            path: Logical path
            flags: ``os.O_*`` flags (read, write or append)

        Returns:
            A virtual stream or a binary file object

        Raises:
            OSError: If the real file cannot be opened
        """
        if self.resolver.classify(path) is PathKind.VIRTUAL_FILE:
            return VirtualFile(self.resolver.virtual_content(path))

        real_path = self.resolver.physical_path(path)

        if flags & os.O_WRONLY:
            flags |= os.O_CREAT
            if not flags & os.O_APPEND:
                with contextlib.suppress(FileNotFoundError):
                    os.remove(real_path)

        fd = os.open(real_path, flags, FileModes.NEW_FILE)
        try:
            return os.fdopen(fd, _stream_mode(flags))
        except Exception:
            os.close(fd)
            raise

    def get_file_info(self, cc: ClientContext, path: str) -> FileInfo:
        """
        Describe a file or directory.

        Raises:
            OSError: If the real path cannot be stat'ed
        """
        entry = self.catalog.lookup(path)
        if entry is not None:
            return entry

        return FileInfo.from_path(self.resolver.physical_path(path))

    def can_allocate(self, cc: ClientContext, size: int) -> bool:
        """Approve allocating ``size`` bytes. Always granted."""
        return True

    def chmod_file(self, cc: ClientContext, path: str, mode: int) -> None:
        if self.resolver.is_virtual(path):
            return

        os.chmod(self.resolver.physical_path(path), mode)

    def delete_file(self, cc: ClientContext, path: str) -> None:
        """
        Delete a file or an empty directory.

        Raises:
            OSError: If the real entry cannot be removed
        """
        if self.resolver.is_virtual(path):
            return

        real_path = self.resolver.physical_path(path)
        if os.path.isdir(real_path) and not os.path.islink(real_path):
            os.rmdir(real_path)
        else:
            os.remove(real_path)

    def rename_file(self, cc: ClientContext, from_path: str, to_path: str) -> None:
        if self.resolver.is_virtual(from_path) or self.resolver.is_virtual(to_path):
            return

        os.rename(self.resolver.physical_path(from_path), self.resolver.physical_path(to_path))


def new_sample_driver(
    logger: Optional[Logger] = None,
    settings_file: str = Defaults.SETTINGS_FILE,
    certfile: str = Defaults.CERT_FILE,
    keyfile: str = Defaults.KEY_FILE,
) -> MainDriver:
    """
    Create a driver serving a fresh temporary directory.

    Args:
        logger: Shared logger (a quiet WARNING-level logger if None)
        settings_file: Path to the YAML settings document
        certfile: Path to the PEM certificate
        keyfile: Path to the PEM private key

    Returns:
        Driver rooted in the new directory

    Raises:
        DriverError: If no temporary directory can be created
    """
    if logger is None:
        logger = Logger("ftpdriver.driver", level=LogLevel.WARNING)

    try:
        base_dir = tempfile.mkdtemp(prefix=Defaults.TEMP_DIR_PREFIX)
        os.makedirs(base_dir, FileModes.NEW_DIR, exist_ok=True)
    except OSError as e:
        raise DriverError(f"could not find a temporary dir, err: {e}") from e

    return MainDriver(
        logger=logger,
        settings_file=settings_file,
        base_dir=base_dir,
        certfile=certfile,
        keyfile=keyfile,
    )

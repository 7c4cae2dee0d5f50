"""
ftpdriver Foundation: Constants and Type Definitions

This module provides driver-wide constants, error codes, and the fixed
names of the virtual namespace.
"""
import stat
from enum import IntEnum
from typing import TypeAlias

# Version information
FTPDRIVER_VERSION = "1.0.0"


# Error codes carried by every domain exception
class ErrorCode(IntEnum):
    """Standardized error codes for driver operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad credentials, malformed document
    NOT_FOUND = 2  # File or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Resource conflict (locked, exists)
    DEPENDENCY_ERROR = 5  # External service unavailable
    INTERNAL_ERROR = 6  # Bug in ftpdriver


# Type aliases for clarity
LogicalPath: TypeAlias = str
PhysicalPath: TypeAlias = str


class VirtualNames:
    """Fixed names of the virtual namespace (not configurable)."""

    ROOT = "/virtual"
    ROOT_NAME = "virtual"
    LOCAL_PATH_FILE = "localpath.txt"
    SECOND_FILE = "file2.txt"

    # Logical path that toggles the session debug flag
    DEBUG_TOGGLE = "/debug"


class FileModes:
    """Mode bits used for synthetic descriptors and created entries."""

    VIRTUAL_FILE = stat.S_IFREG | 0o666
    VIRTUAL_DIR = stat.S_IFDIR | 0o666
    NEW_FILE = 0o666
    NEW_DIR = 0o777


class DeclaredSizes:
    """Display sizes of synthetic descriptors."""

    LOCAL_PATH_FILE = 1024
    SECOND_FILE = 2048
    VIRTUAL_DIR = 4096


class Defaults:
    """Default locations and values."""

    SETTINGS_FILE = "sample/conf/settings.yaml"
    CERT_FILE = "sample/certs/mycert.crt"
    KEY_FILE = "sample/certs/mycert.key"
    ALPN_PROTOCOLS = ("ftp",)
    TEMP_DIR_PREFIX = "ftpserver"

    # Plain-text echo of the caller's public address
    ADDRESS_SERVICE_URL = "http://checkip.amazonaws.com"

    # Reserved credential used to exercise the rejection path
    REJECTED_CREDENTIAL = "bad"

    WELCOME_TEMPLATE = "Welcome on ftpserver, you're on dir {{ base_dir }}"

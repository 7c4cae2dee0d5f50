"""ftpdriver Core - Shared constants and error codes.

Import specific names from submodules:
    from ftpdriver.core.constants import ErrorCode, VirtualNames
"""

from ftpdriver.core import constants
from ftpdriver.core.constants import (
    FTPDRIVER_VERSION,
    DeclaredSizes,
    Defaults,
    ErrorCode,
    FileModes,
    VirtualNames,
)

__all__ = [
    "constants",
    "FTPDRIVER_VERSION",
    "DeclaredSizes",
    "Defaults",
    "ErrorCode",
    "FileModes",
    "VirtualNames",
]

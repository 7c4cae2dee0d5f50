"""ftpdriver - Hybrid filesystem driver for a file-transfer protocol server."""

from ftpdriver.core.constants import FTPDRIVER_VERSION as __version__

__all__ = ["__version__"]

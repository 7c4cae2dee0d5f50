"""
ftpdriver Virtual Namespace: Base Classes and Data Structures.

This module provides the shapes shared by real and synthetic entries:
- FileInfo: Immutable directory-entry descriptor
- FileStream: Capability every opened path must satisfy

The protocol engine cannot tell a virtual entry from a real one, so both
kinds are described by the same ``FileInfo`` and handed out through the
same ``FileStream`` interface.
"""

import io
import os
import stat
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FileInfo:
    """
    Immutable directory-entry descriptor.

    Attributes:
        name: Entry name only (e.g., "a.txt")
        size: Size in bytes (declared size for synthetic entries)
        mode: File mode (permissions and type)
        mtime: Modification timestamp (seconds since epoch)
        real_path: Absolute path of the backing file, None for synthetic entries
    """

    name: str
    size: int
    mode: int
    mtime: float
    real_path: Optional[str] = None

    @classmethod
    def _from_stat(cls, real_path: str, file_stat: os.stat_result) -> "FileInfo":
        return cls(
            name=os.path.basename(real_path.rstrip(os.sep)) or os.sep,
            size=file_stat.st_size,
            mode=file_stat.st_mode,
            mtime=file_stat.st_mtime,
            real_path=os.path.abspath(real_path),
        )

    @classmethod
    def from_path(cls, real_path: str) -> "FileInfo":
        """
        Describe a filesystem path, following symlinks.

        Raises:
            FileNotFoundError: If the path doesn't exist
            OSError: If stat() fails for other reasons
        """
        return cls._from_stat(real_path, os.stat(real_path))

    @classmethod
    def from_lstat(cls, real_path: str) -> "FileInfo":
        """Describe a filesystem path without following a final symlink."""
        return cls._from_stat(real_path, os.lstat(real_path))

    @classmethod
    def virtual(cls, name: str, size: int, mode: int) -> "FileInfo":
        """Synthesize a descriptor stamped with the current wall-clock time."""
        return cls(name=name, size=size, mode=mode, mtime=time.time())

    @property
    def is_virtual(self) -> bool:
        return self.real_path is None

    @property
    def is_file(self) -> bool:
        """Check if this is a regular file."""
        return stat.S_ISREG(self.mode)

    @property
    def is_dir(self) -> bool:
        """Check if this is a directory."""
        return stat.S_ISDIR(self.mode)

    @property
    def is_symlink(self) -> bool:
        """Check if this is a symbolic link."""
        return stat.S_ISLNK(self.mode)


class FileStream(ABC):
    """
    Capability of every handle returned by ``open_file``.

    Real files opened through ``os.fdopen`` satisfy it through the
    ``io.IOBase`` registration below; ``VirtualFile`` subclasses it.
    """

    @abstractmethod
    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; ``b""`` signals end-of-stream."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes accepted."""

    @abstractmethod
    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the cursor and return the new position."""

    @abstractmethod
    def close(self) -> None:
        """Release the handle."""

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


FileStream.register(io.IOBase)

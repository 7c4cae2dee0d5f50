"""
Directory listings for the hybrid namespace.

The virtual root lists a fixed pair of synthetic files. The filesystem root
lists the base directory plus one synthetic directory standing for the
virtual root. Every other directory is listed straight from disk.

Sizes of synthetic files are declared for display and are not the number
of bytes a client can actually download.
"""

import os
from typing import List, Optional, Tuple

from ftpdriver.core.constants import DeclaredSizes, FileModes, LogicalPath, VirtualNames
from ftpdriver.virtual.base import FileInfo
from ftpdriver.virtual.resolver import PathKind, PathResolver

# (name, declared size, mode) in listing order
VIRTUAL_ROOT_ENTRIES: Tuple[Tuple[str, int, int], ...] = (
    (VirtualNames.LOCAL_PATH_FILE, DeclaredSizes.LOCAL_PATH_FILE, FileModes.VIRTUAL_FILE),
    (VirtualNames.SECOND_FILE, DeclaredSizes.SECOND_FILE, FileModes.VIRTUAL_FILE),
)


class VirtualEntryCatalog:
    """Produces entry descriptors for real and virtual directories."""

    def __init__(self, resolver: PathResolver):
        self.resolver = resolver

    def virtual_root_entries(self) -> List[FileInfo]:
        return [FileInfo.virtual(name, size, mode) for name, size, mode in VIRTUAL_ROOT_ENTRIES]

    def virtual_dir_entry(self) -> FileInfo:
        return FileInfo.virtual(
            os.path.basename(self.resolver.virtual_root) or VirtualNames.ROOT_NAME,
            DeclaredSizes.VIRTUAL_DIR,
            FileModes.VIRTUAL_DIR,
        )

    def list_real(self, logical_path: LogicalPath) -> List[FileInfo]:
        """
        List a real directory, sorted by name.

        Raises:
            OSError: If the directory cannot be read
        """
        real_path = self.resolver.physical_path(logical_path)
        names = sorted(os.listdir(real_path))
        return [FileInfo.from_lstat(os.path.join(real_path, name)) for name in names]

    def list(self, logical_path: LogicalPath) -> List[FileInfo]:
        """
        List the entries of a logical directory.

        Args:
            logical_path: Directory as seen by the session

        Returns:
            Ordered entry descriptors

        Raises:
            OSError: If a real directory listing fails
        """
        if self.resolver.classify(logical_path) is PathKind.VIRTUAL_ROOT:
            return self.virtual_root_entries()

        files = self.list_real(logical_path)

        if logical_path == "/":
            files.append(self.virtual_dir_entry())

        return files

    def lookup(self, logical_path: LogicalPath) -> Optional[FileInfo]:
        """
        Synthetic descriptor for a path in the virtual namespace.

        Returns:
            The virtual root directory entry, a catalogued virtual file, or
            None when the path is not part of the catalog
        """
        if logical_path == self.resolver.virtual_root:
            return self.virtual_dir_entry()

        parent, name = os.path.split(logical_path)
        if parent != self.resolver.virtual_root:
            return None

        for entry in self.virtual_root_entries():
            if entry.name == name:
                return entry
        return None

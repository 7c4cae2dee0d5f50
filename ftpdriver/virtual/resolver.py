"""
Logical path classification for the hybrid namespace.

Every logical path is exactly one of:
- VIRTUAL_FILE: a synthetic file under the virtual root (opened in memory)
- VIRTUAL_ROOT: the virtual root itself (no directory backs it on disk)
- REAL: anything else, served from ``base_dir + logical_path``

Classification compares strings only and never probes the disk, so the
virtual root shadows a real directory of the same name. Physical paths are
built by plain concatenation without normalisation.
"""

from enum import Enum

from ftpdriver.core.constants import LogicalPath, PhysicalPath, VirtualNames


class PathKind(Enum):
    """Resolution outcome for a logical path."""

    VIRTUAL_FILE = "virtual-file"
    VIRTUAL_ROOT = "virtual-root"
    REAL = "real"


class PathResolver:
    """Routes logical paths to the virtual namespace or the base directory."""

    def __init__(self, base_dir: str, virtual_root: str = VirtualNames.ROOT):
        """
        Initialize the resolver.

        Args:
            base_dir: Directory real paths are served from
            virtual_root: Logical path of the virtual root
        """
        self.base_dir = base_dir
        self.virtual_root = virtual_root
        self.local_path_file = f"{virtual_root}/{VirtualNames.LOCAL_PATH_FILE}"

    def classify(self, logical_path: LogicalPath) -> PathKind:
        if logical_path == self.virtual_root:
            return PathKind.VIRTUAL_ROOT
        if logical_path == self.local_path_file:
            return PathKind.VIRTUAL_FILE
        return PathKind.REAL

    def is_virtual(self, logical_path: LogicalPath) -> bool:
        return self.classify(logical_path) is not PathKind.REAL

    def physical_path(self, logical_path: LogicalPath) -> PhysicalPath:
        return self.base_dir + logical_path

    def virtual_content(self, logical_path: LogicalPath) -> bytes:
        """
        Content snapshot for a virtual file.

        Raises:
            ValueError: If ``logical_path`` is not a virtual file
        """
        if self.classify(logical_path) is not PathKind.VIRTUAL_FILE:
            raise ValueError(f"Not a virtual file: {logical_path}")
        return self.base_dir.encode("utf-8")

    def __repr__(self) -> str:
        return f"PathResolver(base_dir='{self.base_dir}', virtual_root='{self.virtual_root}')"

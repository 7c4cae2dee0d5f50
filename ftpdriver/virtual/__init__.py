"""
ftpdriver Virtual Namespace.

Synthetic entries presented alongside the real base directory:
- FileInfo / FileStream: shapes shared with real entries
- PathResolver: real-vs-virtual routing of logical paths
- VirtualEntryCatalog: directory listings
- VirtualFile: in-memory read-only stream
"""

from ftpdriver.virtual.base import FileInfo, FileStream
from ftpdriver.virtual.catalog import VIRTUAL_ROOT_ENTRIES, VirtualEntryCatalog
from ftpdriver.virtual.resolver import PathKind, PathResolver
from ftpdriver.virtual.stream import VirtualFile

__all__ = [
    "FileInfo",
    "FileStream",
    "PathKind",
    "PathResolver",
    "VIRTUAL_ROOT_ENTRIES",
    "VirtualEntryCatalog",
    "VirtualFile",
]

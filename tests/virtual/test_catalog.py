"""
Tests for VirtualEntryCatalog and FileInfo.

Covers:
- Fixed virtual root listing
- Synthetic directory appended to the filesystem root
- Verbatim real listings elsewhere
- Descriptor lookup for the virtual namespace
"""

import os
import stat
import time

import pytest

from ftpdriver.virtual.base import FileInfo
from ftpdriver.virtual.catalog import VIRTUAL_ROOT_ENTRIES, VirtualEntryCatalog
from ftpdriver.virtual.resolver import PathResolver


@pytest.fixture
def catalog(base_dir):
    return VirtualEntryCatalog(PathResolver(str(base_dir)))


class TestFileInfo:
    """Test FileInfo construction."""

    def test_from_path(self, base_dir):
        info = FileInfo.from_path(str(base_dir / "a.txt"))

        assert info.name == "a.txt"
        assert info.size == 5
        assert info.is_file
        assert not info.is_dir
        assert not info.is_virtual
        assert info.real_path == str(base_dir / "a.txt")

    def test_from_path_directory(self, base_dir):
        info = FileInfo.from_path(str(base_dir / "subdir"))
        assert info.is_dir
        assert info.name == "subdir"

    def test_from_path_missing(self, base_dir):
        with pytest.raises(FileNotFoundError):
            FileInfo.from_path(str(base_dir / "missing"))

    def test_from_lstat_keeps_symlink(self, base_dir):
        os.symlink(base_dir / "a.txt", base_dir / "link")
        assert FileInfo.from_lstat(str(base_dir / "link")).is_symlink
        assert FileInfo.from_path(str(base_dir / "link")).is_file

    def test_virtual_uses_wall_clock(self):
        before = time.time()
        info = FileInfo.virtual("x.txt", 10, stat.S_IFREG | 0o666)
        after = time.time()

        assert before <= info.mtime <= after
        assert info.is_virtual
        assert info.real_path is None

    def test_frozen(self):
        info = FileInfo.virtual("x.txt", 10, stat.S_IFREG | 0o666)
        with pytest.raises(AttributeError):
            info.name = "y.txt"


class TestVirtualRootListing:
    """Test listing the virtual root."""

    def test_fixed_entries_in_order(self, catalog):
        entries = catalog.list("/virtual")
        assert [e.name for e in entries] == ["localpath.txt", "file2.txt"]

    def test_declared_sizes(self, catalog):
        entries = catalog.list("/virtual")
        assert [e.size for e in entries] == [1024, 2048]

    def test_regular_non_executable(self, catalog):
        for entry in catalog.list("/virtual"):
            assert entry.is_file
            assert stat.S_IMODE(entry.mode) == 0o666
            assert entry.is_virtual

    def test_independent_of_disk(self, catalog, base_dir):
        """A real 'virtual' directory is shadowed."""
        (base_dir / "virtual").mkdir()
        (base_dir / "virtual" / "real.txt").write_text("hidden")

        entries = catalog.list("/virtual")

        assert [e.name for e in entries] == [name for name, _, _ in VIRTUAL_ROOT_ENTRIES]

    def test_works_without_base_dir(self, tmp_path):
        """No disk access is needed for the virtual root."""
        catalog = VirtualEntryCatalog(PathResolver(str(tmp_path / "missing")))
        assert len(catalog.list("/virtual")) == 2


class TestRootListing:
    """Test listing the filesystem root."""

    def test_real_entries_plus_virtual_dir(self, catalog):
        names = [e.name for e in catalog.list("/")]
        assert names == ["a.txt", "b.txt", "subdir", "virtual"]

    def test_exactly_one_synthetic_entry(self, catalog):
        synthetic = [e for e in catalog.list("/") if e.is_virtual]
        assert len(synthetic) == 1
        assert synthetic[0].name == "virtual"
        assert synthetic[0].is_dir
        assert synthetic[0].size == 4096

    def test_empty_base_dir(self, tmp_path):
        catalog = VirtualEntryCatalog(PathResolver(str(tmp_path)))
        entries = catalog.list("/")
        assert [e.name for e in entries] == ["virtual"]

    def test_missing_base_dir_raises(self, tmp_path):
        catalog = VirtualEntryCatalog(PathResolver(str(tmp_path / "missing")))
        with pytest.raises(FileNotFoundError):
            catalog.list("/")


class TestSubdirectoryListing:
    """Test listing other real directories."""

    def test_verbatim(self, catalog):
        entries = catalog.list("/subdir")
        assert [e.name for e in entries] == ["nested.txt"]
        assert not any(e.is_virtual for e in entries)

    def test_missing_directory(self, catalog):
        with pytest.raises(FileNotFoundError):
            catalog.list("/nope")

    def test_file_is_not_a_directory(self, catalog):
        with pytest.raises(NotADirectoryError):
            catalog.list("/a.txt")


class TestLookup:
    """Test synthetic descriptor lookup."""

    def test_virtual_root(self, catalog):
        entry = catalog.lookup("/virtual")
        assert entry.is_dir
        assert entry.name == "virtual"

    def test_catalogued_files(self, catalog):
        assert catalog.lookup("/virtual/localpath.txt").size == 1024
        assert catalog.lookup("/virtual/file2.txt").size == 2048

    @pytest.mark.parametrize("path", ["/a.txt", "/virtual/other.txt", "/sub/virtual", "/"])
    def test_other_paths(self, catalog, path):
        assert catalog.lookup(path) is None

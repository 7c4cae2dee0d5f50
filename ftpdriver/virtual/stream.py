"""
In-memory stream served for virtual files.

Reads drain an immutable snapshot taken when the file was opened. Writes
are discarded and seeks are ignored: the protocol engine expects every
opened path to behave like a file handle, but virtual content is read-only
and only supports sequential access.
"""

import os

from ftpdriver.virtual.base import FileStream


class VirtualFile(FileStream):
    """Read-only stream over a content snapshot."""

    def __init__(self, content: bytes):
        """
        Initialize the stream.

        Args:
            content: Bytes served by this handle; copied so later changes to
                     the caller's buffer are not visible
        """
        self._content = bytes(content)
        self._offset = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def remaining(self) -> int:
        return len(self._content) - self._offset

    def readinto(self, buffer) -> int:
        """
        Copy the unread suffix into ``buffer``.

        Args:
            buffer: Writable bytes-like object (bytearray, memoryview)

        Returns:
            Number of bytes copied; 0 only when nothing was left to copy
        """
        view = memoryview(buffer).cast("B")
        n = min(len(view), self.remaining)
        view[:n] = self._content[self._offset : self._offset + n]
        self._offset += n
        return n

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = self.remaining
        chunk = self._content[self._offset : self._offset + size]
        self._offset += len(chunk)
        return chunk

    def write(self, data: bytes) -> int:
        # Writes to virtual files are dropped
        return 0

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return 0

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"VirtualFile(size={len(self._content)}, offset={self._offset})"

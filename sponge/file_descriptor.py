"""Reference-counted handles to operating-system file descriptors."""

from __future__ import annotations

import os
import sys
from typing import List

from sponge.buffer import BufferViewList

_MAX_READ = 1024 * 1024


class _FDWrapper:
    """The kernel descriptor shared by every duplicate handle; closes it when dropped."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        os.close(self.fd)
        self.eof = True
        self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError as exc:
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


def _views_of(data) -> List[memoryview]:
    if isinstance(data, BufferViewList):
        return [view for view in data.as_iovecs() if len(view)]
    if isinstance(data, str):
        data = data.encode()
    return [view for view in BufferViewList(data).as_iovecs() if len(view)]


def _drop_prefix(views: List[memoryview], n: int) -> List[memoryview]:
    rest = list(views)
    while n > 0:
        front = rest[0]
        if n < len(front):
            rest[0] = front[n:]
            n = 0
        else:
            n -= len(front)
            rest.pop(0)
    return rest


class FileDescriptor:
    """A handle to a file descriptor that tracks EOF and counts reads and writes."""

    def __init__(self, fd: int) -> None:
        self._internal = _FDWrapper(fd)

    @classmethod
    def _from_wrapper(cls, wrapper: _FDWrapper) -> FileDescriptor:
        handle = cls.__new__(cls)
        handle._internal = wrapper
        return handle

    def _register_read(self) -> None:
        self._internal.read_count += 1

    def _register_write(self) -> None:
        self._internal.write_count += 1

    def read(self, limit: int = sys.maxsize) -> bytes:
        """Read up to `limit` bytes; fewer may be returned. An empty read marks EOF."""
        size = min(_MAX_READ, limit)
        data = os.read(self.fd_num(), size)
        if limit > 0 and not data:
            self._internal.eof = True
        self._register_read()
        return data

    def write(self, data, write_all: bool = True) -> int:
        """Write bytes, a Buffer or a BufferList; with `write_all`, keep going until all is written."""
        views = _views_of(data)
        total = 0
        while True:
            remaining = sum(len(view) for view in views)
            written = os.writev(self.fd_num(), views) if views else os.write(self.fd_num(), b"")
            if written == 0 and remaining:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > remaining:
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            views = _drop_prefix(views, written)
            total += written
            if not (write_all and views):
                return total

    def close(self) -> None:
        """Close the underlying descriptor (shared by all duplicates)."""
        self._internal.close()

    def duplicate(self) -> FileDescriptor:
        """Another handle on the same descriptor and state."""
        return FileDescriptor._from_wrapper(self._internal)

    def set_blocking(self, blocking: bool) -> None:
        """Switch the descriptor between blocking and non-blocking mode."""
        os.set_blocking(self.fd_num(), blocking)

    def fd_num(self) -> int:
        """The underlying descriptor number."""
        return self._internal.fd

    def eof(self) -> bool:
        """Whether a read has reached end of file."""
        return self._internal.eof

    def closed(self) -> bool:
        """Whether the descriptor has been closed."""
        return self._internal.closed

    def read_count(self) -> int:
        """How many times the descriptor has been read."""
        return self._internal.read_count

    def write_count(self) -> int:
        """How many times the descriptor has been written."""
        return self._internal.write_count

    def __enter__(self) -> FileDescriptor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.closed():
            self.close()
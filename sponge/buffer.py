"""Shared read-only byte buffers that can discard bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Union

BytesLike = Union[bytes, bytearray, memoryview]


class Buffer:
    """A read-only byte string whose prefix can be dropped without copying."""

    __slots__ = ("_storage", "_offset")

    def __init__(self, data: BytesLike = b"") -> None:
        self._storage = bytes(data)
        self._offset = 0

    def _share(self) -> Buffer:
        twin = Buffer.__new__(Buffer)
        twin._storage = self._storage
        twin._offset = self._offset
        return twin

    def _view(self) -> memoryview:
        return memoryview(self._storage)[self._offset:]

    def __bytes__(self) -> bytes:
        return self._storage[self._offset:]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __getitem__(self, index: int | slice) -> int | bytes:
        if isinstance(index, slice):
            return bytes(self)[index]
        return self._view()[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(self) == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def copy(self) -> bytes:
        """Return the contents as a new bytes object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first `n` bytes."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0


class BufferList:
    """A discontiguous byte string made of several Buffers."""

    def __init__(self, data: BufferList | Buffer | BytesLike | None = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying Buffers, in order."""
        return tuple(buf._share() for buf in self._buffers)

    def append(self, other: BufferList | Buffer | BytesLike) -> None:
        """Append another BufferList, a Buffer, or raw bytes."""
        if isinstance(other, BufferList):
            self._buffers.extend(buf._share() for buf in other._buffers)
        elif isinstance(other, Buffer):
            self._buffers.append(other._share())
        else:
            self._buffers.append(Buffer(other))

    def to_buffer(self) -> Buffer:
        """Return the single Buffer held; fails if there is more than one."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return self._buffers[0]._share()
        raise ValueError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first `n` bytes across the Buffers."""
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """Return all the bytes joined into one bytes object."""
        return b"".join(bytes(buf) for buf in self._buffers)


class BufferViewList:
    """A non-owning view of a discontiguous byte string."""

    def __init__(self, data: BufferList | Buffer | BytesLike) -> None:
        self._views: deque[memoryview] = deque()
        if isinstance(data, BufferList):
            self._views.extend(buf._view() for buf in data._buffers)
        elif isinstance(data, Buffer):
            self._views.append(data._view())
        else:
            self._views.append(memoryview(data))

    def remove_prefix(self, n: int) -> None:
        """Discard the first `n` bytes across the views."""
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def as_iovecs(self) -> list[memoryview]:
        """The views as a list suitable for scatter/gather writes."""
        return list(self._views)

    def __iter__(self) -> Iterable[memoryview]:
        return iter(list(self._views))
"""A flow-controlled, in-order, in-memory byte stream."""

from __future__ import annotations


class ByteStream:
    """Bytes are written on one side and read from the other, up to a capacity."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._buffer = bytearray()
        self._ended = False
        self._error = False
        self._total_read = 0
        self._total_written = 0

    def write(self, data) -> int:
        """Write as much of `data` as fits; return how many bytes were accepted."""
        if self._ended:
            return 0
        accepted = bytes(data)[: self.remaining_capacity()]
        self._buffer += accepted
        self._total_written += len(accepted)
        return len(accepted)

    def remaining_capacity(self) -> int:
        """How many more bytes the stream has room for."""
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        """Signal that no more bytes will be written."""
        self._ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    def peek_output(self, length: int) -> bytes:
        """The next `length` bytes, without removing them."""
        return bytes(self._buffer[:length])

    def pop_output(self, length: int) -> None:
        """Remove `length` bytes from the front of the buffer."""
        if length < 0 or length > len(self._buffer):
            raise ValueError("cannot pop more bytes than are buffered")
        del self._buffer[:length]
        self._total_read += length

    def read(self, length: int) -> bytes:
        """Remove and return up to `length` bytes."""
        size = min(length, len(self._buffer))
        data = self.peek_output(size)
        self.pop_output(size)
        return data

    def input_ended(self) -> bool:
        """Whether the writer has ended the input."""
        return self._ended

    def error(self) -> bool:
        """Whether the stream has suffered an error."""
        return self._error

    def buffer_size(self) -> int:
        """How many bytes can currently be read."""
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        """Whether nothing is buffered."""
        return not self._buffer

    def eof(self) -> bool:
        """Whether the input has ended and everything has been read."""
        return self._ended and not self._buffer

    def bytes_written(self) -> int:
        """Total number of bytes written."""
        return self._total_written

    def bytes_read(self) -> int:
        """Total number of bytes popped."""
        return self._total_read
"""Reassembles possibly out-of-order, overlapping substrings into a ByteStream."""

from __future__ import annotations

from bisect import bisect_left, insort
from typing import NamedTuple

from sponge.byte_stream import ByteStream


class _Node(NamedTuple):
    index: int
    byte: int
    is_end: bool


class StreamReassembler:
    """Stores up to `capacity` waiting bytes and writes contiguous ones in order."""

    def __init__(self, capacity: int) -> None:
        self._output = ByteStream(capacity)
        self._capacity = capacity
        self._required_index = 0
        self._keys: list[int] = []
        self._waiting: dict[int, _Node] = {}
        self._eof_nodes = 0

    def _deliver(self, node: _Node) -> bool:
        if node.is_end:
            self._output.end_input()
        elif self._output.remaining_capacity():
            self._output.write(bytes((node.byte,)))
        else:
            return False
        return True

    def _remove(self, index: int) -> _Node:
        node = self._waiting.pop(index)
        self._keys.remove(index)
        if node.is_end:
            self._eof_nodes -= 1
        return node

    def _insert(self, node: _Node) -> None:
        if node.index in self._waiting:
            return
        self._waiting[node.index] = node
        insort(self._keys, node.index)
        if node.is_end:
            self._eof_nodes += 1

    def push_substring(self, data, index: int, eof: bool) -> None:
        """Accept `data` starting at stream position `index`; `eof` marks its end as the stream's end."""
        if self._output.input_ended():
            return

        raw = bytes(data)
        nodes = [_Node(index + pos, byte, False) for pos, byte in enumerate(raw)]
        if eof:
            nodes.append(_Node(index + len(raw), 0, True))

        pos = min(len(nodes), max(0, self._required_index - index))
        while pos < len(nodes) and nodes[pos].index == self._required_index:
            if not self._deliver(nodes[pos]):
                break
            pos += 1
            self._required_index += 1

        stale = bisect_left(self._keys, self._required_index)
        for key in self._keys[:stale]:
            if self._waiting.pop(key).is_end:
                self._eof_nodes -= 1
        del self._keys[:stale]

        while self._keys and self._keys[0] == self._required_index:
            node = self._remove(self._keys[0])
            if not self._deliver(node):
                break
            self._required_index += 1

        for node in nodes[pos:]:
            self._insert(node)
            if len(self._waiting) > self._capacity + self._eof_nodes:
                self._remove(self._keys[-1])

    def stream_out(self) -> ByteStream:
        """The reassembled, in-order byte stream."""
        return self._output

    def unassembled_bytes(self) -> int:
        """Bytes stored but not yet reassembled, each position counted once."""
        return len(self._waiting) - self._eof_nodes

    def empty(self) -> bool:
        """Whether nothing is waiting to be assembled."""
        return not self._waiting

    def required_index(self) -> int:
        """The index of the next byte the stream expects (the end marker counts as one)."""
        return self._required_index
"""The receiving half of a TCP connection."""

from __future__ import annotations

from typing import Optional

from sponge.byte_stream import ByteStream
from sponge.stream_reassembler import StreamReassembler
from sponge.tcp_segment import TCPSegment
from sponge.wrapping_integers import WrappingInt32, unwrap, wrap


class TCPReceiver:
    """Reassembles inbound segments into a ByteStream and computes ackno and window."""

    def __init__(self, capacity: int) -> None:
        self._reassembler = StreamReassembler(capacity)
        self._capacity = capacity
        self._isn: Optional[WrappingInt32] = None
        self._checkpoint = 0

    def segment_received(self, seg: TCPSegment) -> None:
        """Handle an inbound segment; everything before the SYN is ignored."""
        header = seg.header
        if self._isn is None:
            if not header.syn:
                return
            self._isn = header.seqno
            self._checkpoint = 0

        index = unwrap(header.seqno, self._isn, self._checkpoint)
        self._checkpoint = index
        if index > 0:
            index -= 1
        self._reassembler.push_substring(seg.payload.copy(), index, header.fin)

    def ackno(self) -> Optional[WrappingInt32]:
        """The first sequence number not yet received, or None before the SYN."""
        if self._isn is None:
            return None
        return wrap(self._reassembler.required_index() + 1, self._isn)

    def window_size(self) -> int:
        """Capacity minus the bytes reassembled but not yet read."""
        return self._capacity - self._reassembler.stream_out().buffer_size()

    def unassembled_bytes(self) -> int:
        """Bytes stored but not yet reassembled."""
        return self._reassembler.unassembled_bytes()

    def stream_out(self) -> ByteStream:
        """The reassembled inbound byte stream."""
        return self._reassembler.stream_out()
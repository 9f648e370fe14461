"""A TCP segment: a header plus a payload, with checksummed wire format."""

from __future__ import annotations

import dataclasses

from sponge.buffer import Buffer, BufferList
from sponge.parser import NetParser, ParseError, ParseResult
from sponge.tcp_header import TCPHeader
from sponge.util import InternetChecksum


def _as_bytes(data) -> bytes:
    if isinstance(data, BufferList):
        return data.concatenate()
    return bytes(data)


class TCPSegment:
    """A TCP header and the bytes it carries."""

    __slots__ = ("header", "_payload")

    def __init__(self, header: TCPHeader | None = None, payload=b"") -> None:
        self.header = header if header is not None else TCPHeader()
        self.payload = payload

    @property
    def payload(self) -> Buffer:
        """The segment's data."""
        return self._payload

    @payload.setter
    def payload(self, data) -> None:
        self._payload = data if isinstance(data, Buffer) else Buffer(_as_bytes(data))

    @classmethod
    def parse(cls, data, datagram_layer_checksum: int = 0) -> TCPSegment:
        """Parse a segment from wire bytes; raises ParseError on failure."""
        raw = _as_bytes(data)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(raw)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        parser = NetParser(raw)
        header = TCPHeader.parse(parser)
        return cls(header, parser.buffer())

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """The segment in wire format, with a freshly computed checksum."""
        header_out = dataclasses.replace(self.header, cksum=0)

        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(self._payload)
        header_out.cksum = check.value()

        ret = BufferList(header_out.serialize())
        ret.append(self._payload)
        return ret

    def length_in_sequence_space(self) -> int:
        """Payload length, plus one for SYN and one for FIN."""
        return len(self._payload) + int(self.header.syn) + int(self.header.fin)

    def __repr__(self) -> str:
        return f"TCPSegment({self.header.summary()}, {len(self._payload)} bytes)"
"""Reading and writing network-byte-order integers."""

from __future__ import annotations

from enum import Enum

from sponge.buffer import Buffer


class ParseResult(Enum):
    """The result of parsing a datagram, segment, frame or message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


class ParseError(Exception):
    """Parsing failed; `result` says why."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(str(result))
        self.result = result


class NetParser:
    """Consumes big-endian integers from the front of a buffer."""

    def __init__(self, buffer) -> None:
        self._buffer = Buffer(bytes(buffer))

    def buffer(self) -> Buffer:
        """What remains to be parsed."""
        return Buffer(bytes(self._buffer))

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        value = int.from_bytes(self._buffer[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u32(self) -> int:
        """Parse a 32-bit integer."""
        return self._parse_int(4)

    def u16(self) -> int:
        """Parse a 16-bit integer."""
        return self._parse_int(2)

    def u8(self) -> int:
        """Parse an 8-bit integer."""
        return self._parse_int(1)

    def remove_prefix(self, n: int) -> None:
        """Skip `n` bytes."""
        self._check_size(n)
        self._buffer.remove_prefix(n)


def pack_u32(value: int) -> bytes:
    """A 32-bit integer in network byte order (truncated to 32 bits)."""
    return (value & 0xFFFFFFFF).to_bytes(4, "big")


def pack_u16(value: int) -> bytes:
    """A 16-bit integer in network byte order (truncated to 16 bits)."""
    return (value & 0xFFFF).to_bytes(2, "big")


def pack_u8(value: int) -> bytes:
    """An 8-bit integer (truncated to 8 bits)."""
    return (value & 0xFF).to_bytes(1, "big")
"""Internet checksum, a program clock and a hex dump helper."""

from __future__ import annotations

import sys
import time
from typing import TextIO

_PROGRAM_START = time.monotonic()


def timestamp_ms() -> int:
    """Milliseconds elapsed since the program started."""
    return int((time.monotonic() - _PROGRAM_START) * 1000)


class InternetChecksum:
    """The one's-complement Internet checksum, computed incrementally."""

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data) -> None:
        """Add bytes (or a Buffer) to the running sum."""
        for byte in bytes(data):
            val = byte if self._parity else byte << 8
            self._sum = (self._sum + val) & 0xFFFFFFFF
            self._parity = not self._parity

    def value(self) -> int:
        """The checksum of everything added so far, in host order."""
        ret = self._sum
        while ret > 0xFFFF:
            ret = (ret >> 16) + (ret & 0xFFFF)
        return ~ret & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def _text(chunk: bytes) -> str:
    return "".join(_printable(byte) for byte in chunk)


def hexdump(data, indent: int = 0, file: TextIO | None = None) -> None:
    """Write a hex and text dump of `data` to `file` (stdout by default)."""
    out = sys.stdout if file is None else file
    raw = bytes(data)
    pad = " " * indent
    chunks = [raw[start:start + 16] for start in range(0, len(raw), 16)]
    parts: list[str] = []

    for number, chunk in enumerate(chunks):
        groups = " ".join(chunk[i:i + 2].hex() for i in range(0, len(chunk), 2))
        parts.append(f"{pad}{number * 16:08x}:    {groups}")
        if number < len(chunks) - 1:
            parts.append(f"    {_text(chunk)}\n")

    rem = (16 - len(raw) % 16) % 16
    tail = _text(chunks[-1]) if chunks else " "
    parts.append(" " * (2 * rem + rem // 2 + 4) + tail + "\n\n")
    out.write("".join(parts))
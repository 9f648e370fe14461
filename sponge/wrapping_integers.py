"""32-bit wrapping sequence numbers and conversion to absolute 64-bit indices."""

from __future__ import annotations

from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_HALF32 = 1 << 31
_MOD32 = 1 << 32


@dataclass(frozen=True)
class WrappingInt32:
    """A 32-bit integer expressed relative to an initial sequence number."""

    raw_value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_value", self.raw_value & _MASK32)

    def __add__(self, other: int) -> WrappingInt32:
        if not isinstance(other, int):
            return NotImplemented
        return WrappingInt32(self.raw_value + other)

    def __sub__(self, other: WrappingInt32 | int) -> WrappingInt32 | int:
        """Signed distance to another WrappingInt32, or a step back by an int."""
        if isinstance(other, WrappingInt32):
            diff = (self.raw_value - other.raw_value) & _MASK32
            return diff - _MOD32 if diff >= _HALF32 else diff
        if isinstance(other, int):
            return WrappingInt32(self.raw_value - other)
        return NotImplemented

    def __str__(self) -> str:
        return str(self.raw_value)


def wrap(n: int, isn: WrappingInt32) -> WrappingInt32:
    """Turn an absolute sequence number into a relative 32-bit one."""
    return WrappingInt32((n & _MASK32) + isn.raw_value)


def unwrap(n: WrappingInt32, isn: WrappingInt32, checkpoint: int) -> int:
    """Return the absolute sequence number that wraps to `n` and is closest to `checkpoint`."""
    offset_n = (n.raw_value - isn.raw_value) & _MASK32
    offset_checkpoint = checkpoint & _MASK32

    after = (offset_n - offset_checkpoint) & _MASK32
    before = (offset_checkpoint - offset_n) & _MASK32

    if after < before or checkpoint < before:
        return (checkpoint + after) & _MASK64
    return checkpoint - before
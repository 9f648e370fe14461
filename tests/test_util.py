import io
import time

import pytest

from sponge.buffer import Buffer
from sponge.util import InternetChecksum, hexdump, timestamp_ms

SAMPLE = bytes([0x00, 0x01, 0xF2, 0x03, 0xF4, 0xF5, 0xF6, 0xF7])


def _checksum(data, initial=0):
    check = InternetChecksum(initial)
    check.add(data)
    return check.value()


def test_checksum_worked_example():
    assert _checksum(SAMPLE) == 0x220D


def test_checksum_of_nothing():
    assert InternetChecksum().value() == 0xFFFF


def test_checksum_verifies_to_zero():
    value = _checksum(SAMPLE)
    assert _checksum(SAMPLE + value.to_bytes(2, "big")) == 0


@pytest.mark.parametrize("split", [0, 1, 3, 4, 7, 8])
def test_checksum_split_matches_whole(split):
    check = InternetChecksum()
    check.add(SAMPLE[:split])
    check.add(SAMPLE[split:])
    assert check.value() == _checksum(SAMPLE)


def test_checksum_initial_sum_matches_prefix():
    prefix = b"\x12\x34"
    assert _checksum(SAMPLE, int.from_bytes(prefix, "big")) == _checksum(prefix + SAMPLE)


def test_checksum_accepts_buffer():
    assert _checksum(Buffer(SAMPLE)) == _checksum(SAMPLE)


def test_checksum_odd_length_pads_with_zero():
    assert _checksum(SAMPLE + b"\x42") == _checksum(SAMPLE + b"\x42\x00")


def test_timestamp_is_monotonic():
    first = timestamp_ms()
    time.sleep(0.01)
    second = timestamp_ms()
    assert first >= 0
    assert second >= first


def _dump(data, indent=0):
    out = io.StringIO()
    hexdump(data, indent, out)
    return out.getvalue()


def test_hexdump_single_line():
    text = _dump(b"AB")
    assert text.startswith("00000000:    4142")
    assert text.rstrip("\n").endswith("AB")
    assert text.endswith("\n\n")


def test_hexdump_non_printable_shown_as_dot():
    text = _dump(b"A\x00B")
    assert text.rstrip("\n").endswith("A.B")


def test_hexdump_groups_pairs():
    text = _dump(b"abcd")
    assert "6162 6364" in text


def test_hexdump_indent():
    text = _dump(b"xyz", indent=3)
    assert text.startswith("   " + "0" * 8 + ":")


def test_hexdump_multiple_lines():
    data = bytes(range(0x41, 0x41 + 17))
    lines = _dump(data).rstrip("\n").split("\n")
    assert len(lines) == 2
    assert int(lines[1].split(":")[0], 16) == 16
    assert lines[0].endswith(data[:16].decode())
    assert lines[1].endswith(data[16:].decode())


def test_hexdump_defaults_to_stdout(capsys):
    hexdump(b"Q")
    assert capsys.readouterr().out.rstrip("\n").endswith("Q")
from dataclasses import astuple

import pytest

from sponge.parser import NetParser, ParseError, ParseResult
from sponge.tcp_header import TCPHeader
from sponge.wrapping_integers import WrappingInt32


def _full_header(**overrides):
    fields = dict(
        sport=4321,
        dport=80,
        seqno=WrappingInt32(0xDEADBEEF),
        ackno=WrappingInt32(12345),
        urg=True,
        ack=True,
        psh=False,
        rst=True,
        syn=False,
        fin=True,
        win=6000,
        cksum=0xABCD,
        uptr=17,
    )
    fields.update(overrides)
    return TCPHeader(**fields)


def test_default_serializes_to_twenty_bytes():
    assert len(TCPHeader().serialize()) == TCPHeader.LENGTH


def test_round_trip_all_fields():
    header = _full_header()
    parsed = TCPHeader.parse(NetParser(header.serialize()))
    assert astuple(parsed) == astuple(header)


def test_ports_on_wire():
    data = TCPHeader(sport=1, dport=2).serialize()
    assert data[:4] == b"\x00\x01\x00\x02"


@pytest.mark.parametrize(
    "flag, bit",
    [("syn", 0b10), ("fin", 0b1), ("rst", 0b100), ("ack", 0b1_0000)],
)
def test_flag_bits(flag, bit):
    data = TCPHeader(**{flag: True}).serialize()
    assert data[13] == bit


def test_parse_leaves_payload():
    header = _full_header()
    parser = NetParser(header.serialize() + b"payload")
    TCPHeader.parse(parser)
    assert parser.buffer() == b"payload"


def test_options_padded_and_skipped():
    header = _full_header(doff=6)
    data = header.serialize()
    assert len(data) == 24
    assert data[20:] == bytes(4)
    parser = NetParser(data + b"x")
    parsed = TCPHeader.parse(parser)
    assert parsed.doff == 6
    assert parser.buffer() == b"x"


def test_serialize_rejects_short_doff():
    with pytest.raises(ValueError):
        TCPHeader(doff=4).serialize()


def test_parse_very_short_is_header_too_short():
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(NetParser(TCPHeader().serialize()[:10]))
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_parse_truncated_after_doff_is_packet_too_short():
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(NetParser(TCPHeader().serialize()[:15]))
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_parse_small_doff_is_header_too_short():
    data = bytearray(TCPHeader().serialize())
    data[12] = 4 << 4
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(NetParser(bytes(data)))
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_parse_missing_options_is_packet_too_short():
    data = bytearray(TCPHeader().serialize())
    data[12] = 6 << 4
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(NetParser(bytes(data)))
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_equality_ignores_ports_and_checksum():
    a = _full_header()
    b = _full_header(sport=1, dport=2, cksum=0)
    assert a == b


def test_equality_sees_window_and_flags():
    a = _full_header()
    assert not (a == _full_header(win=1))
    assert not (a == _full_header(syn=True))


def test_summary():
    header = TCPHeader(syn=True, ack=True, seqno=WrappingInt32(5), win=7)
    assert header.summary() == "Header(flags=SA,seqno=5,ack=0,win=7)"


def test_to_string_uses_hex_and_words():
    text = TCPHeader(sport=255, syn=True).to_string()
    assert "TCP source port: ff\n" in text
    assert "syn: true" in text
    assert "fin: false" in text
    assert text.count("\n") == 9
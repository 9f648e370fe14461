from sponge.stream_reassembler import StreamReassembler


def _assembled(r):
    return r.stream_out().bytes_written()


def _available(r):
    stream = r.stream_out()
    return stream.read(stream.buffer_size())


def _at_eof(r):
    return r.stream_out().eof()


def test_hole_only():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, False)
    assert _assembled(r) == 0
    assert _available(r) == b""
    assert not _at_eof(r)


def test_hole_then_fill():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, False)
    r.push_substring(b"a", 0, False)
    assert _assembled(r) == 2
    assert _available(r) == b"ab"
    assert not _at_eof(r)


def test_hole_with_eof_then_fill():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, True)
    assert _assembled(r) == 0
    assert _available(r) == b""
    assert not _at_eof(r)
    r.push_substring(b"a", 0, False)
    assert _assembled(r) == 2
    assert _available(r) == b"ab"
    assert _at_eof(r)


def test_overlapping_fill():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, False)
    r.push_substring(b"ab", 0, False)
    assert _assembled(r) == 2
    assert _available(r) == b"ab"
    assert not _at_eof(r)


def test_many_holes_filled_last():
    r = StreamReassembler(65000)
    for data, index in ((b"b", 1), (b"d", 3), (b"c", 2)):
        r.push_substring(data, index, False)
        assert _assembled(r) == 0
        assert _available(r) == b""
        assert not _at_eof(r)
    r.push_substring(b"a", 0, False)
    assert _assembled(r) == 4
    assert _available(r) == b"abcd"
    assert not _at_eof(r)


def test_many_holes_filled_by_one_segment():
    r = StreamReassembler(65000)
    for data, index in ((b"b", 1), (b"d", 3)):
        r.push_substring(data, index, False)
        assert _assembled(r) == 0
        assert _available(r) == b""
        assert not _at_eof(r)
    r.push_substring(b"abc", 0, False)
    assert _assembled(r) == 4
    assert _available(r) == b"abcd"
    assert not _at_eof(r)


def test_holes_filled_piecewise_then_empty_eof():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, False)
    r.push_substring(b"d", 3, False)
    assert _assembled(r) == 0
    r.push_substring(b"a", 0, False)
    assert _assembled(r) == 2
    assert _available(r) == b"ab"
    assert not _at_eof(r)
    r.push_substring(b"c", 2, False)
    assert _assembled(r) == 4
    assert _available(r) == b"cd"
    assert not _at_eof(r)
    r.push_substring(b"", 4, True)
    assert _assembled(r) == 4
    assert _available(r) == b""
    assert _at_eof(r)


def test_duplicate_bytes_counted_once():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, False)
    r.push_substring(b"b", 1, False)
    assert r.unassembled_bytes() == 1
    assert not r.empty()


def test_eof_marker_is_not_an_unassembled_byte():
    r = StreamReassembler(65000)
    r.push_substring(b"b", 1, True)
    assert r.unassembled_bytes() == 1
    r.push_substring(b"a", 0, False)
    assert r.unassembled_bytes() == 0
    assert r.empty()


def test_required_index_counts_end_marker():
    r = StreamReassembler(65000)
    r.push_substring(b"ab", 0, False)
    assert r.required_index() == 2
    r.push_substring(b"", 2, True)
    assert r.required_index() == 3
    assert r.stream_out().input_ended()


def test_full_output_holds_rest_until_room():
    r = StreamReassembler(2)
    r.push_substring(b"abc", 0, False)
    assert r.stream_out().bytes_written() == 2
    assert r.unassembled_bytes() == 1
    assert r.stream_out().read(2) == b"ab"
    r.push_substring(b"", 0, False)
    assert r.stream_out().read(2) == b"c"
    assert r.empty()


def test_waiting_bytes_limited_by_capacity():
    r = StreamReassembler(3)
    r.push_substring(b"bcdefg", 1, False)
    assert r.unassembled_bytes() == 3
    r.push_substring(b"a", 0, False)
    assert r.stream_out().read(10) == b"abc"


def test_push_after_end_is_ignored():
    r = StreamReassembler(65000)
    r.push_substring(b"ab", 0, True)
    r.push_substring(b"cd", 2, False)
    assert r.stream_out().bytes_written() == 2
    assert r.empty()
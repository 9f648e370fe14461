# sponge

A small TCP toolkit in plain Python with no third-party dependencies. It
provides the pieces of a TCP endpoint's receiving side, the TCP wire format,
and thin helpers over POSIX descriptors, polling and sockets. You can use and
test each piece on its own.

## Modules

- `sponge.wrapping_integers` provides `WrappingInt32`, `wrap` and `unwrap`.
  These convert between 32-bit sequence numbers and 64-bit absolute stream
  positions. `unwrap` picks the absolute value closest to a checkpoint.
- `sponge.byte_stream` provides `ByteStream`, a finite, capacity-limited,
  in-memory byte pipe. Use `write`, `read`, `peek_output` and `pop_output` to
  move bytes. Use `end_input` and `eof` for the end of the stream, and
  `bytes_written` and `bytes_read` for the running totals.
- `sponge.stream_reassembler` provides `StreamReassembler`. It accepts
  substrings that may arrive out of order or overlap, and writes them in order
  into its `stream_out()` byte stream. It stores at most `capacity` bytes that
  are still waiting.
- `sponge.tcp_receiver` provides `TCPReceiver`, which turns inbound
  `TCPSegment`s into a byte stream:
  - `ackno()` returns `None` until a SYN has arrived.
  - `window_size()` is the capacity minus the bytes that are buffered but not
    yet read.
- `sponge.tcp_header` provides `TCPHeader`, a dataclass with `parse`,
  `serialize`, `to_string` and `summary`. TCP options are skipped, not
  interpreted.
- `sponge.tcp_segment` provides `TCPSegment`:
  - `parse` checks the Internet checksum.
  - `serialize` computes a fresh checksum and returns a `BufferList`.
  - `length_in_sequence_space` counts SYN and FIN as one each.
- `sponge.tcp_config` provides `TCPConfig` and `FdAdapterConfig`. `TCPConfig`
  holds these limits:

  | Constant | Value |
  |---|---|
  | `DEFAULT_CAPACITY` | 64000 |
  | `MAX_PAYLOAD_SIZE` | 1452 |
  | `TIMEOUT_DFLT` | 1000 ms |
  | `MAX_RETX_ATTEMPTS` | 8 |

- `sponge.parser` provides `NetParser`, which reads big-endian integers, and
  `pack_u8`, `pack_u16` and `pack_u32`. Failures raise `ParseError`, whose
  `result` is a `ParseResult`.
- `sponge.buffer` provides `Buffer`, `BufferList` and `BufferViewList`. These
  are byte buffers that can drop a prefix without copying.
- `sponge.util` provides `InternetChecksum`, `timestamp_ms` and `hexdump`.
- `sponge.address` provides `Address`. Create one with `Address.resolve`,
  `Address.from_ip_port` or `Address.from_ipv4_numeric`. Read it back with
  `ip_port`, `ip`, `port`, `ipv4_numeric` and `str()`.
- `sponge.file_descriptor` provides `FileDescriptor`, a shared handle on an OS
  descriptor. It tracks EOF and counts reads and writes, and it can be used as
  a context manager.
- `sponge.eventloop` provides `EventLoop`, `Direction` and `Result`:
  - Rules are based on `poll`.
  - A rule is cancelled when its descriptor reaches EOF, hangs up or is
    closed.
  - A busy wait is reported by raising `RuntimeError`.
- `sponge.sockets` provides `UDPSocket`, `TCPSocket`, `LocalStreamSocket` and
  `ReceivedDatagram`, all built on `FileDescriptor`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Receiving a stream

```python
from sponge.tcp_header import TCPHeader
from sponge.tcp_receiver import TCPReceiver
from sponge.tcp_segment import TCPSegment
from sponge.wrapping_integers import WrappingInt32

receiver = TCPReceiver(4000)
receiver.ackno()                                   # None: no SYN yet

receiver.segment_received(TCPSegment(TCPHeader(syn=True, seqno=WrappingInt32(1000))))
receiver.ackno()                                   # WrappingInt32(raw_value=1001)

receiver.segment_received(TCPSegment(TCPHeader(seqno=WrappingInt32(1001)), b"hello"))
receiver.ackno()                                   # WrappingInt32(raw_value=1006)
receiver.window_size()                             # 3995
receiver.stream_out().read(5)                      # b'hello'
```

## Reassembly

```python
from sponge.stream_reassembler import StreamReassembler

reassembler = StreamReassembler(65000)
reassembler.push_substring(b"b", 1, False)
reassembler.unassembled_bytes()                    # 1
reassembler.push_substring(b"a", 0, False)
reassembler.stream_out().read(2)                   # b'ab'
```

## Wire format

```python
from sponge.tcp_header import TCPHeader
from sponge.tcp_segment import TCPSegment
from sponge.wrapping_integers import WrappingInt32

segment = TCPSegment(TCPHeader(ack=True, ackno=WrappingInt32(7), win=512), b"data")
raw = segment.serialize().concatenate()            # header with checksum, then payload
again = TCPSegment.parse(raw)                      # raises ParseError on a bad checksum
again.header == segment.header                     # True
again.payload.copy()                               # b'data'
```

## Sequence numbers

```python
from sponge.wrapping_integers import WrappingInt32, wrap, unwrap

isn = WrappingInt32(15)
seqno = wrap(3 * 2**32 + 17, isn)                  # WrappingInt32(raw_value=32)
unwrap(seqno, isn, 3 * 2**32)                      # 3 * 2**32 + 17
```

## What the package does not do

The package covers only the receiving half of TCP. It has no sending half:
nothing splits an outgoing byte stream into segments, keeps track of bytes in
flight, or runs a retransmission timer. It also has no summary of connection
state and no complete connection object that joins a sender and a receiver.
It provides no TUN/TAP device support, no command-line program and no server.
The pieces here are building blocks to be driven from your own code.
"""A user-space TCP toolkit: byte streams, reassembly, the receiving half, segment formats and POSIX helpers."""

__version__ = "0.1.0"
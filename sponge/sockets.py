"""Network sockets built on FileDescriptor."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from sponge.address import Address
from sponge.buffer import BufferViewList
from sponge.file_descriptor import FileDescriptor

_MSG_TRUNC = getattr(socket, "MSG_TRUNC", 0)


def _payload_views(payload) -> list:
    if not isinstance(payload, BufferViewList):
        if isinstance(payload, str):
            payload = payload.encode()
        payload = BufferViewList(payload)
    return payload.as_iovecs()


class Socket(FileDescriptor):
    """A network socket; normally used through a subclass."""

    def __init__(self, domain: int, sock_type: int, fd: Optional[FileDescriptor] = None) -> None:
        if fd is None:
            raw = socket.socket(domain, sock_type)
            super().__init__(raw.detach())
            return

        self._internal = fd._internal
        with self._socket() as sock:
            if sock.family != domain:
                raise RuntimeError("socket domain mismatch")
            if sock.type != sock_type:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _socket(self) -> Iterator[socket.socket]:
        sock = socket.socket(fileno=self.fd_num())
        try:
            yield sock
        finally:
            sock.detach()

    def _setsockopt(self, level: int, option: int, value) -> None:
        with self._socket() as sock:
            sock.setsockopt(level, option, value)

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listen/accept."""
        with self._socket() as sock:
            sock.bind(address.sockaddr)

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._socket() as sock:
            sock.connect(address.sockaddr)

    def shutdown(self, how: int) -> None:
        """Shut down reading (SHUT_RD), writing (SHUT_WR) or both (SHUT_RDWR)."""
        with self._socket() as sock:
            sock.shutdown(how)
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise RuntimeError("Socket.shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        """The address this socket is bound to."""
        with self._socket() as sock:
            return Address(sock.getsockname())

    def peer_address(self) -> Address:
        """The address of the connected peer."""
        with self._socket() as sock:
            return Address(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner."""
        self._setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A datagram and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """A UDP socket."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM)

    @classmethod
    def _adopt(cls, fd: FileDescriptor) -> UDPSocket:
        obj = cls.__new__(cls)
        Socket.__init__(obj, socket.AF_INET, socket.SOCK_DGRAM, fd)
        return obj

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raises RuntimeError if it is larger than `mtu`."""
        buf = bytearray(mtu)
        with self._socket() as sock:
            length, source = sock.recvfrom_into(buf, mtu, _MSG_TRUNC)
        if length > mtu:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address(source), bytes(buf[:length]))

    def _sendmsg(self, payload, address: Optional[Address]) -> None:
        views = _payload_views(payload)
        expected = sum(len(view) for view in views)
        with self._socket() as sock:
            if address is None:
                sent = sock.sendmsg(views)
            else:
                sent = sock.sendmsg(views, [], 0, address.sockaddr)
        if sent != expected:
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()

    def sendto(self, destination: Address, payload) -> None:
        """Send a datagram to `destination`."""
        self._sendmsg(payload, destination)

    def send(self, payload) -> None:
        """Send a datagram to the connected address."""
        self._sendmsg(payload, None)


class TCPSocket(Socket):
    """A TCP socket."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM)

    @classmethod
    def _adopt(cls, fd: FileDescriptor) -> TCPSocket:
        obj = cls.__new__(cls)
        Socket.__init__(obj, socket.AF_INET, socket.SOCK_STREAM, fd)
        return obj

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting incoming connections."""
        with self._socket() as sock:
            sock.listen(backlog)

    def accept(self) -> TCPSocket:
        """Wait for and return a new connection."""
        self._register_read()
        with self._socket() as sock:
            conn, _ = sock.accept()
        return TCPSocket._adopt(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket."""

    def __init__(self, fd: FileDescriptor) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)
"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import ipaddress
import socket
from typing import Tuple, Union

SockAddr = Union[Tuple, str]


def _family_of(sockaddr: SockAddr) -> int:
    if isinstance(sockaddr, str):
        return socket.AF_UNIX
    if len(sockaddr) == 2:
        return socket.AF_INET
    if len(sockaddr) == 4:
        return socket.AF_INET6
    raise ValueError("invalid sockaddr size")


def _lookup(node: str, service: str, flags: int) -> Address:
    try:
        results = socket.getaddrinfo(node, service, socket.AF_INET, 0, 0, flags)
    except socket.gaierror as exc:
        raise socket.gaierror(exc.errno, f"getaddrinfo({node}, {service}): {exc.strerror}") from exc
    if not results:
        raise RuntimeError("getaddrinfo returned successfully but with no results")
    return Address(results[0][4])


class Address:
    """A socket address, with conversions to and from IPv4 forms."""

    __slots__ = ("_sockaddr", "_family")

    def __init__(self, sockaddr: SockAddr) -> None:
        if not isinstance(sockaddr, (tuple, list, str)):
            raise TypeError("sockaddr must be a tuple or a path string")
        normalized = sockaddr if isinstance(sockaddr, str) else tuple(sockaddr)
        self._family = _family_of(normalized)
        self._sockaddr = normalized

    @classmethod
    def resolve(cls, hostname: str, service: str) -> Address:
        """Resolve a hostname and a service name (e.g. "http") to an IPv4 address."""
        return _lookup(hostname, service, 0)

    @classmethod
    def from_ip_port(cls, ip: str, port: int = 0) -> Address:
        """Build from a dotted-quad string and a numeric port, without any lookup."""
        return _lookup(ip, str(port), socket.AI_NUMERICHOST | socket.AI_NUMERICSERV)

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> Address:
        """Build from a 32-bit numeric IPv4 address in host order (port 0)."""
        return cls((str(ipaddress.IPv4Address(ip_address)), 0))

    @property
    def sockaddr(self) -> SockAddr:
        """The address in the form the socket module takes."""
        return self._sockaddr

    @property
    def family(self) -> int:
        """The address family."""
        return self._family

    def ip_port(self) -> tuple[str, int]:
        """The numeric host string and the port."""
        flags = socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
        try:
            host, port = socket.getnameinfo(self._sockaddr, flags)
        except (socket.gaierror, TypeError) as exc:
            raise socket.gaierror(f"getnameinfo: {exc}") from exc
        return host, int(port)

    def ip(self) -> str:
        """The numeric host string, e.g. "18.243.0.1"."""
        return self.ip_port()[0]

    def port(self) -> int:
        """The port number in host order."""
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """The IPv4 address as a 32-bit integer in host order."""
        if self._family != socket.AF_INET:
            raise ValueError("ipv4_numeric called on non-IPV4 address")
        return int(ipaddress.IPv4Address(self._sockaddr[0]))

    def __str__(self) -> str:
        host, port = self.ip_port()
        return f"{host}:{port}"

    def __repr__(self) -> str:
        return f"Address({self._sockaddr!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))
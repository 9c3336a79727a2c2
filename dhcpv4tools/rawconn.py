"""A UDP connection over a raw packet socket that broadcasts every packet."""

from __future__ import annotations

import socket
from typing import Any, Optional, Tuple

from .ipv4 import (
    IPV4_MAXIMUM_HEADER_SIZE,
    UDP_MINIMUM_SIZE,
    UDP_PROTOCOL_NUMBER,
    Address,
    IPv4Header,
    UDPHeader,
    _to_ipv4,
    build_udp4_packet,
)

#: The broadcast hardware address; frames sent to it reach the whole subnet.
BROADCAST_MAC = b"\xff" * 6

_ETH_P_IP = 0x0800


def udp_match(addr: Address, bound: Optional[Address]) -> bool:
    """Return whether a packet for addr should be delivered to a conn bound to bound."""
    if bound is None:
        return True
    bound_host, bound_port = bound
    if bound_host not in (None, "", b"") and _to_ipv4(bound_host) != _to_ipv4(addr[0]):
        return False
    return bound_port == addr[1]


class BroadcastRawUDPConn:
    """Sends and receives UDP datagrams through a raw IPv4 datagram socket.

    Outgoing datagrams are wrapped in UDP and IPv4 headers and sent to
    link_addr (the broadcast hardware address for a real interface); when
    link_addr is None the raw socket is assumed to be connected. Incoming
    packets are only returned when they are UDP and addressed to bound_addr.
    """

    def __init__(
        self,
        raw_conn: Any,
        bound_addr: Optional[Address] = None,
        link_addr: Optional[tuple] = None,
    ) -> None:
        self.raw_conn = raw_conn
        self.bound_addr = bound_addr
        self.link_addr = link_addr

    def recvfrom(self, bufsize: int) -> Tuple[bytes, Tuple[str, int]]:
        """Return the next UDP payload for the bound address and its sender.

        Raises EOFError when the raw socket yields an empty packet.
        """
        while True:
            packet, _ = self.raw_conn.recvfrom(
                IPV4_MAXIMUM_HEADER_SIZE + UDP_MINIMUM_SIZE + bufsize
            )
            if not packet:
                raise EOFError("raw connection returned no data")
            try:
                ip_header = IPv4Header.parse(packet)
            except ValueError:
                continue
            if ip_header.protocol != UDP_PROTOCOL_NUMBER:
                continue
            rest = packet[ip_header.header_length :]
            try:
                udp_header = UDPHeader.parse(rest)
            except ValueError:
                continue
            if not udp_match((str(ip_header.dst), udp_header.dst_port), self.bound_addr):
                continue
            source = (str(ip_header.src), udp_header.src_port)
            body = rest[UDP_MINIMUM_SIZE:]
            # Padding after the end of the IP packet is not part of the payload.
            length = ip_header.payload_length - UDP_MINIMUM_SIZE
            if length < 0 or length > len(body):
                return b"", source
            return body[:length][:bufsize], source

    def sendto(self, data: bytes, addr: Address) -> int:
        """Wrap data for the UDP address addr and broadcast it; return bytes sent."""
        if not (isinstance(addr, tuple) and len(addr) == 2 and isinstance(addr[1], int)):
            raise TypeError("must supply a UDP address as a (host, port) pair")
        packet = build_udp4_packet(data, addr, self.bound_addr)
        if self.link_addr is None:
            return self.raw_conn.send(packet)
        return self.raw_conn.sendto(packet, self.link_addr)

    def close(self) -> None:
        """Close the underlying raw socket."""
        self.raw_conn.close()

    def __enter__(self) -> "BroadcastRawUDPConn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_raw_udp_conn(iface: str, port: int) -> BroadcastRawUDPConn:
    """Open a broadcasting UDP connection on iface, bound to port.

    The interface may be completely unconfigured. Raises OSError if the
    interface does not exist or raw sockets are unavailable.
    """
    socket.if_nametoindex(iface)
    family = getattr(socket, "AF_PACKET", None)
    if family is None:
        raise OSError("raw packet sockets are not supported on this platform")
    sock = socket.socket(family, socket.SOCK_DGRAM, socket.htons(_ETH_P_IP))
    try:
        sock.bind((iface, _ETH_P_IP))
    except OSError:
        sock.close()
        raise
    return BroadcastRawUDPConn(
        sock,
        ("", port),
        link_addr=(iface, _ETH_P_IP, 0, 0, BROADCAST_MAC),
    )